"""HTTP client for the Airship edge service.

This module provides the Client class that holds connection configuration and
performs flag evaluation requests against the edge service.
"""

import logging
from types import TracebackType
from typing import Any, Optional, Type

import httpx

from airship.exceptions import TransportError
from airship.flag import FeatureFlag
from airship.models import EvaluationResult, decode_response, encode_request
from airship.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
OBJECT_VALUES_PATH = "/v2/object-values/"
USER_AGENT = f"airship-python/{__version__}"


class Client:
    """Configuration and transport for talking to an Airship edge service.

    A Client is immutable after construction and safe to share between
    threads. Every evaluation is a single POST; nothing is cached or retried.

    Example:
        client = Client("env-key", "http://localhost:5000")
        if client.flag("bitcoin-pay").is_enabled({"id": "1"}):
            ...
    """

    def __init__(
        self,
        env_key: str,
        edge_url: str,
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the client.

        Args:
            env_key: The Airship environment key.
            edge_url: Base URL of the edge service, including its scheme.
            timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT,
                or to the timeout of ``http_client`` when one is given.
            http_client: Optional httpx.Client for custom HTTP configuration
                or testing. It is not closed by ``close()``.
        """
        self._env_key = env_key
        self._edge_url = edge_url.rstrip("/")
        self._url = f"{self._edge_url}{OBJECT_VALUES_PATH}{env_key}"
        self._owns_client = http_client is None

        if http_client is None:
            self._timeout: Optional[float] = (
                DEFAULT_TIMEOUT if timeout is None else timeout
            )
            # An unconfigured client never sends, so it gets no transport.
            self._http_client: Optional[httpx.Client] = (
                httpx.Client(timeout=self._timeout) if self._edge_url else None
            )
        else:
            self._timeout = timeout
            self._http_client = http_client

    @property
    def env_key(self) -> str:
        return self._env_key

    @property
    def edge_url(self) -> str:
        return self._edge_url

    @property
    def url(self) -> str:
        """Return the full evaluation endpoint URL."""
        return self._url

    @property
    def timeout(self) -> Optional[float]:
        """Return the configured timeout, or None if the transport's applies."""
        return self._timeout

    def flag(self, name: str) -> FeatureFlag:
        """Return a handle for the named flag bound to this client."""
        return FeatureFlag(name, self)

    def evaluate(self, flag_name: str, entity: Any) -> EvaluationResult:
        """Evaluate a flag for an entity with one request to the edge service.

        Args:
            flag_name: The flag to evaluate.
            entity: Any JSON-serializable value describing the entity.

        Returns:
            The evaluation result decoded from the response.

        Raises:
            SerializationError: If the entity cannot be encoded or the
                response cannot be decoded.
            TransportError: If the request fails, times out or the response
                status is not 200.
        """
        body = encode_request(flag_name, entity)

        if not self._edge_url:
            raise TransportError("client is not configured with an edge URL")

        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        kwargs: dict = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        logger.debug("Evaluating flag '%s' via %s", flag_name, self._url)
        try:
            response = self._http_client.post(
                self._url, content=body, headers=headers, **kwargs
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"request timed out: {e}") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise TransportError(f"request failed: {e}") from e

        logger.debug(
            "Flag '%s' evaluation returned HTTP %d", flag_name, response.status_code
        )
        if response.status_code != 200:
            raise TransportError(
                f"unexpected response status: {response.status_code} "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        return decode_response(response.content)

    def close(self) -> None:
        """Close the underlying transport if this client created it."""
        if self._owns_client and self._http_client is not None:
            self._http_client.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Client(edge_url={self._edge_url!r})"
