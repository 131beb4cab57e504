"""Airship OpenFeature provider implementation.

This module provides the AirshipProvider class that implements the OpenFeature
AbstractProvider interface on top of an Airship Client. Each resolution is one
request to the edge service.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from openfeature.evaluation_context import EvaluationContext
from openfeature.exception import ErrorCode
from openfeature.flag_evaluation import FlagResolutionDetails, Reason
from openfeature.provider import AbstractProvider, Metadata, ProviderStatus

from airship.client import Client
from airship.exceptions import SerializationError, TransportError
from airship.models import EvaluationResult, encode_request

# Type variable for generic resolution
T = TypeVar("T")

logger = logging.getLogger(__name__)


class AirshipProvider(AbstractProvider):
    """OpenFeature provider backed by the Airship edge service.

    Flag keys may carry a dot-separated path into the flag's payload, e.g.
    ``bitcoin-pay.limits.daily``. Without a path, booleans resolve to the
    entity's enablement and strings to its treatment; integers, floats and
    objects always read the payload.

    The evaluation context becomes the Airship entity: its attributes are
    copied and the targeting key is sent as ``id``.

    Attributes:
        PROVIDER_NAME: The name of this provider.
    """

    PROVIDER_NAME = "airship-sdk-python"

    def __init__(self, client: Client) -> None:
        """Initialize the provider.

        Args:
            client: The Airship client used for every resolution. The provider
                does not close it on shutdown.
        """
        self._client = client
        self._status = ProviderStatus.NOT_READY

    @property
    def client(self) -> Client:
        return self._client

    def get_status(self) -> ProviderStatus:
        """Get the current provider status."""
        return self._status

    def get_metadata(self) -> Metadata:
        """Get provider metadata."""
        return Metadata(name=self.PROVIDER_NAME)

    def initialize(self, evaluation_context: EvaluationContext) -> None:
        """Mark the provider as ready; there is no state to load."""
        self._status = ProviderStatus.READY
        logger.info("AirshipProvider initialized for %s", self._client.url)

    def shutdown(self) -> None:
        self._status = ProviderStatus.NOT_READY
        logger.info("AirshipProvider shutdown complete")

    def resolve_boolean_details(
        self,
        flag_key: str,
        default_value: bool,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[bool]:
        """Resolve a boolean flag."""
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            select=lambda r: r.is_enabled,
            type_check=lambda v: isinstance(v, bool),
            type_convert=lambda v: v,
        )

    def resolve_string_details(
        self,
        flag_key: str,
        default_value: str,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[str]:
        """Resolve a string flag."""
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            select=lambda r: r.treatment or None,
            type_check=lambda v: isinstance(v, str),
            type_convert=lambda v: v,
        )

    def resolve_integer_details(
        self,
        flag_key: str,
        default_value: int,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[int]:
        """Resolve an integer flag."""
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            select=lambda r: r.payload,
            # Accept int (but not bool) or a whole float
            type_check=lambda v: (isinstance(v, int) and not isinstance(v, bool))
            or (isinstance(v, float) and v.is_integer()),
            type_convert=lambda v: int(v),
        )

    def resolve_float_details(
        self,
        flag_key: str,
        default_value: float,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[float]:
        """Resolve a float flag."""
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            select=lambda r: r.payload,
            type_check=lambda v: isinstance(v, (int, float))
            and not isinstance(v, bool),
            type_convert=lambda v: float(v),
        )

    def resolve_object_details(
        self,
        flag_key: str,
        default_value: Dict[str, Any],
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[Dict[str, Any]]:
        """Resolve an object flag."""
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            select=lambda r: r.payload,
            type_check=lambda v: isinstance(v, (dict, list)),
            type_convert=lambda v: v,
        )

    def _resolve_typed(
        self,
        flag_key: str,
        default_value: T,
        evaluation_context: Optional[EvaluationContext],
        select: Callable[[EvaluationResult], Any],
        type_check: Callable[[Any], bool],
        type_convert: Callable[[Any], T],
    ) -> FlagResolutionDetails[T]:
        """Core resolution logic for all flag types.

        Args:
            flag_key: The flag key (may include a payload path).
            default_value: The default value.
            evaluation_context: The evaluation context.
            select: Picks the value from the result when no path is given.
            type_check: Whether a resolved value has the requested type.
            type_convert: Converts an accepted value to the requested type.

        Returns:
            The resolved flag details.
        """
        flag_name, path = self._parse_flag_path(flag_key)
        entity = self._context_to_entity(evaluation_context)

        try:
            encode_request(flag_name, entity)
        except SerializationError as e:
            logger.error("Invalid evaluation context for flag '%s': %s", flag_key, e)
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.INVALID_CONTEXT,
                error_message=str(e),
            )

        try:
            result = self._client.evaluate(flag_name, entity)
        except TransportError as e:
            logger.error("Failed to resolve flag '%s': %s", flag_key, e)
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.GENERAL,
                error_message=str(e),
            )
        except SerializationError as e:
            logger.error("Failed to resolve flag '%s': %s", flag_key, e)
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.PARSE_ERROR,
                error_message=str(e),
            )

        variant = result.treatment or None
        reason = Reason.TARGETING_MATCH if result.is_eligible else Reason.DEFAULT

        if path:
            value, found = self._get_value_for_path(path, result.payload)
            if not found:
                return FlagResolutionDetails(
                    value=default_value,
                    reason=Reason.ERROR,
                    error_code=ErrorCode.FLAG_NOT_FOUND,
                    error_message=f"Path '{path}' not found in flag '{flag_name}'",
                    variant=variant,
                )
        else:
            value = select(result)

        if value is None:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.DEFAULT,
                variant=variant,
            )

        if not type_check(value):
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.TYPE_MISMATCH,
                error_message=f"Value is not {type(default_value).__name__}",
                variant=variant,
            )

        return FlagResolutionDetails(
            value=type_convert(value),
            reason=reason,
            variant=variant,
        )

    @staticmethod
    def _parse_flag_path(flag_key: str) -> Tuple[str, str]:
        """Parse a flag key into flag name and payload path.

        Args:
            flag_key: The flag key (e.g., "my-flag.nested.value").

        Returns:
            Tuple of (flag_name, path) where path may be empty.
        """
        parts = flag_key.split(".", 1)
        if len(parts) == 1:
            return parts[0], ""
        return parts[0], parts[1]

    @staticmethod
    def _context_to_entity(
        context: Optional[EvaluationContext],
    ) -> Dict[str, Any]:
        """Convert an EvaluationContext to an Airship entity."""
        entity: Dict[str, Any] = {}
        if context is None:
            return entity

        if context.attributes:
            for key, value in context.attributes.items():
                entity[key] = AirshipProvider._value_to_json(value)

        if context.targeting_key:
            entity["id"] = context.targeting_key

        return entity

    @staticmethod
    def _value_to_json(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        elif isinstance(value, list):
            return [AirshipProvider._value_to_json(v) for v in value]
        elif isinstance(value, dict):
            return {k: AirshipProvider._value_to_json(v) for k, v in value.items()}
        return value

    @staticmethod
    def _get_value_for_path(path: str, value: Any) -> Tuple[Any, bool]:
        """Extract a nested value using dot notation.

        Args:
            path: The dot-separated path (e.g., "nested.value").
            value: The value to extract from.

        Returns:
            Tuple of (extracted_value, found).
        """
        if not path:
            return value, True

        current = value
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None, False

        return current, True
