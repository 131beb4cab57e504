"""Exception types for the Airship SDK."""

from typing import Optional


class AirshipError(Exception):
    """Base class for errors raised while evaluating a flag.

    The string form is prefixed with ``airship:`` so failures surfaced through
    application logs can be traced back to this library.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"airship: {self.message}"


class SerializationError(AirshipError):
    """Raised when an entity cannot be encoded or a response cannot be decoded."""

    pass


class TransportError(AirshipError):
    """Raised on connection failures, timeouts and non-200 responses."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
