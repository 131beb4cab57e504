"""Wire models for the Airship edge service.

This module converts between Python values and the JSON documents exchanged
with the ``/v2/object-values`` endpoint.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from airship.exceptions import SerializationError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """Evaluation of a single flag for a single entity.

    Attributes:
        treatment: The treatment codename assigned to the entity.
        payload: The decoded JSON payload attached to the treatment.
        is_eligible: Whether the entity belongs to the flag's population.
        is_enabled: Whether the entity is sampled and given a non-off treatment.
    """

    treatment: str = ""
    payload: Any = None
    is_eligible: bool = False
    is_enabled: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvaluationResult":
        """Build a result from a decoded response body.

        Unknown keys are ignored. Missing or wrongly typed keys fall back to
        their zero value so one bad field never hides the others.
        """
        return cls(
            treatment=_typed_field(data, "treatment", str, ""),
            payload=data.get("payload"),
            is_eligible=_typed_field(data, "isEligible", bool, False),
            is_enabled=_typed_field(data, "isEnabled", bool, False),
        )


def _typed_field(data: Dict[str, Any], key: str, kind: Type[T], default: T) -> T:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        logger.warning(
            "Ignoring response field %r of type %s", key, type(value).__name__
        )
        return default
    return value


def _encode_default(value: Any) -> Any:
    """JSON fallback encoder for entities built from dataclasses."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_request(flag_name: str, entity: Any) -> bytes:
    """Serialize the request body for a flag evaluation.

    Args:
        flag_name: The name of the flag to evaluate.
        entity: Any JSON-serializable value describing the entity.

    Returns:
        The compact JSON body as UTF-8 bytes.

    Raises:
        SerializationError: If the entity cannot be encoded.
    """
    try:
        body = json.dumps(
            {"flag": flag_name, "entity": entity},
            separators=(",", ":"),
            allow_nan=False,
            default=_encode_default,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to encode entity: {e}") from e
    return body.encode("utf-8")


def decode_response(content: bytes) -> EvaluationResult:
    """Decode a response body into an EvaluationResult.

    Raises:
        SerializationError: If the body is not a JSON object.
    """
    try:
        data = json.loads(content)
    except ValueError as e:
        raise SerializationError(f"failed to decode response: {e}") from e

    if not isinstance(data, dict):
        raise SerializationError(
            f"failed to decode response: expected object, got {type(data).__name__}"
        )
    return EvaluationResult.from_dict(data)


def decode_payload(payload: Any, payload_type: Any = None) -> Any:
    """Convert a decoded payload into the caller's type.

    Without ``payload_type`` the JSON value is returned unchanged. Otherwise
    the payload is validated as JSON against ``payload_type`` (a dataclass,
    pydantic model, TypedDict or any other annotation pydantic understands)
    in strict mode: values are never coerced between JSON types, nested
    objects decode into nested types, and unknown object keys are ignored.

    Raises:
        SerializationError: If the payload does not fit ``payload_type``.
    """
    if payload_type is None:
        return payload

    try:
        return TypeAdapter(payload_type).validate_json(
            json.dumps(payload), strict=True
        )
    except ValidationError as e:
        raise SerializationError(f"cannot decode payload: {e}") from e
