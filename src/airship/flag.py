"""Flag handles for the Airship SDK.

A FeatureFlag is a lightweight, named reference to a flag bound to a Client.
Its query methods come in two shapes:

- fail-open (``get_treatment``, ``is_eligible``, ``is_enabled``) return only the
  value and fall back to the off/disabled default on any error, so a flag
  lookup can never break the calling code path;
- fail-visible (``*_details``) return a FlagDetails holding both the value and
  the error, for call sites that want to report failures.

``get_payload`` has no meaningful default and always raises on failure.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, Type, TypeVar

from airship.exceptions import AirshipError
from airship.models import EvaluationResult, decode_payload

if TYPE_CHECKING:
    from airship.client import Client

T = TypeVar("T")

logger = logging.getLogger(__name__)

# An entity is not part of a treatment.
TREATMENT_OFF = "off"
# An entity is part of a treatment.
TREATMENT_ON = "on"


@dataclass
class FlagDetails(Generic[T]):
    """Value of a flag query together with the error that replaced it, if any.

    Attributes:
        flag: The flag name.
        value: The resolved value, or the safe default when ``error`` is set.
        error: The failure that forced the default, or None on success.
    """

    flag: str
    value: T
    error: Optional[AirshipError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FeatureFlag:
    """A named flag bound to a Client."""

    def __init__(self, name: str, client: "Client") -> None:
        self.name = name
        self.client = client

    def __repr__(self) -> str:
        return f"FeatureFlag(name={self.name!r})"

    def evaluate(self, entity: Any) -> EvaluationResult:
        """Evaluate the flag for an entity, raising on failure.

        Raises:
            SerializationError: If the entity or response cannot be (de)serialized.
            TransportError: If the request to the edge service fails.
        """
        return self.client.evaluate(self.name, entity)

    def _details(
        self, entity: Any, extract: Callable[[EvaluationResult], T], default: T
    ) -> FlagDetails[T]:
        try:
            result = self.evaluate(entity)
        except AirshipError as e:
            return FlagDetails(flag=self.name, value=default, error=e)
        return FlagDetails(flag=self.name, value=extract(result))

    def _value(self, details: FlagDetails[T]) -> T:
        if details.error is not None:
            logger.error("Failed to evaluate flag '%s': %s", self.name, details.error)
        return details.value

    def get_treatment_details(self, entity: Any) -> FlagDetails[str]:
        """Return the treatment for an entity along with any evaluation error.

        On error the value is TREATMENT_OFF.
        """
        return self._details(entity, lambda r: r.treatment, TREATMENT_OFF)

    def get_treatment(self, entity: Any) -> str:
        """Return the treatment codename for an entity, or TREATMENT_OFF on error."""
        return self._value(self.get_treatment_details(entity))

    def is_eligible_details(self, entity: Any) -> FlagDetails[bool]:
        return self._details(entity, lambda r: r.is_eligible, False)

    def is_eligible(self, entity: Any) -> bool:
        """Return whether the entity is part of the flag's population.

        The population includes entities that are sampled as well as those
        yet to be sampled. Returns False on error.
        """
        return self._value(self.is_eligible_details(entity))

    def is_enabled_details(self, entity: Any) -> FlagDetails[bool]:
        return self._details(entity, lambda r: r.is_enabled, False)

    def is_enabled(self, entity: Any) -> bool:
        """Return whether the entity is sampled and given a non-off treatment.

        Returns False on error.
        """
        return self._value(self.is_enabled_details(entity))

    def get_payload(
        self, entity: Any, payload_type: Optional[Type[T]] = None
    ) -> Any:
        """Return the JSON payload attached to the entity's treatment.

        Args:
            entity: Any JSON-serializable value describing the entity.
            payload_type: Optional type to decode the payload into, such as a
                dataclass or pydantic model. The payload must match it
                exactly; JSON values are never coerced. Without it the
                decoded JSON value is returned.

        Returns:
            The payload, converted to ``payload_type`` when given.

        Raises:
            SerializationError: If evaluation fails to (de)serialize or the
                payload does not fit ``payload_type``.
            TransportError: If the request to the edge service fails.
        """
        result = self.evaluate(entity)
        return decode_payload(result.payload, payload_type)
