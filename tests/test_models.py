"""Tests for wire models and exceptions."""

import pytest
from pydantic import ValidationError

from airship.exceptions import AirshipError, SerializationError, TransportError
from airship.models import (
    EvaluationResult,
    decode_payload,
    decode_response,
    encode_request,
)
from tests.conftest import Entity, Limits, Payload, Pricing


class TestEncodeRequest:
    """Test request body encoding."""

    def test_compact_body(self) -> None:
        assert encode_request("x", {"id": "1"}) == b'{"flag":"x","entity":{"id":"1"}}'

    def test_scalar_entity(self) -> None:
        """Entities are opaque; any JSON value is accepted."""
        assert encode_request("x", "user-1") == b'{"flag":"x","entity":"user-1"}'

    def test_unicode_entity(self) -> None:
        body = encode_request("x", {"name": "Zoë"})

        assert body.decode("utf-8") == '{"flag":"x","entity":{"name":"Zo\\u00eb"}}'

    def test_dataclass_type_is_rejected(self) -> None:
        """Only dataclass instances are encoded, not the class itself."""
        with pytest.raises(SerializationError):
            encode_request("x", Entity)


class TestDecodeResponse:
    """Test response body decoding."""

    def test_full_body(self) -> None:
        result = decode_response(
            b'{"treatment":"blue","payload":[1,2],"isEligible":true,"isEnabled":false}'
        )

        assert result == EvaluationResult("blue", [1, 2], True, False)

    def test_null_fields(self) -> None:
        result = decode_response(
            b'{"treatment":null,"payload":null,"isEligible":null,"isEnabled":null}'
        )

        assert result == EvaluationResult()

    def test_empty_body(self) -> None:
        with pytest.raises(SerializationError):
            decode_response(b"")

    def test_result_is_frozen(self) -> None:
        result = EvaluationResult(treatment="on")

        with pytest.raises(AttributeError):
            result.treatment = "off"  # type: ignore[misc]


class TestDecodePayload:
    """Test payload conversion."""

    def test_no_type_returns_value(self) -> None:
        assert decode_payload({"a": 1}) == {"a": 1}

    def test_none_payload_into_dataclass(self) -> None:
        with pytest.raises(SerializationError):
            decode_payload(None, Payload)

    @pytest.mark.parametrize(
        "payload, payload_type",
        [
            ({"foo": "bar"}, str),
            (3.7, int),
            ("12", int),
            ({"a": 1}, list),
            ("yes", bool),
            ({"foo": 123}, Payload),
            ({"limits": {"daily": "5"}}, Pricing),
        ],
    )
    def test_values_are_not_coerced(self, payload: object, payload_type: type) -> None:
        """A payload of the wrong JSON type fails instead of being converted."""
        with pytest.raises(SerializationError):
            decode_payload(payload, payload_type)

    def test_nested_dataclass(self) -> None:
        pricing = decode_payload({"limits": {"daily": 5}}, Pricing)

        assert pricing == Pricing(limits=Limits(daily=5))
        assert isinstance(pricing.limits, Limits)

    def test_unknown_keys_ignored(self) -> None:
        assert decode_payload({"foo": "bar", "extra": [1]}, Payload) == Payload(foo="bar")

    def test_error_is_chained(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            decode_payload({"foo": 123}, Payload)

        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestErrors:
    """Test the exception hierarchy."""

    def test_prefix(self) -> None:
        assert str(SerializationError("bad entity")) == "airship: bad entity"

    def test_message_attribute(self) -> None:
        error = TransportError("unexpected response status: 503", status_code=503)

        assert error.message == "unexpected response status: 503"
        assert error.status_code == 503

    def test_hierarchy(self) -> None:
        assert issubclass(SerializationError, AirshipError)
        assert issubclass(TransportError, AirshipError)
        assert TransportError("x").status_code is None
