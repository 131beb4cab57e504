"""Airship feature flag SDK for Python.

This package evaluates Airship feature flags by querying an Airship edge
service. Use a Client directly, or configure a process-wide default once at
startup and call the package-level helpers:

    import airship

    airship.configure(airship.Client("env-key", "http://localhost:5000"))
    if airship.flag("bitcoin-pay").is_enabled({"id": "1"}):
        ...

The default client is a plain module attribute. ``configure`` is meant to be
called once, before any other thread reads it; concurrent calls are not
synchronized and the last writer wins.
"""

from airship.client import DEFAULT_TIMEOUT, Client
from airship.exceptions import AirshipError, SerializationError, TransportError
from airship.flag import TREATMENT_OFF, TREATMENT_ON, FeatureFlag, FlagDetails
from airship.models import EvaluationResult
from airship.provider import AirshipProvider
from airship.version import __version__

# Unconfigured until configure() is called; every request fails with TransportError.
_default_client = Client(env_key="", edge_url="")


def configure(client: Client) -> None:
    """Set the process-wide default client used by ``flag``."""
    global _default_client
    _default_client = client


def get_default_client() -> Client:
    """Return the process-wide default client."""
    return _default_client


def flag(name: str) -> FeatureFlag:
    """Return a handle for the named flag bound to the default client."""
    return _default_client.flag(name)


__all__ = [
    "__version__",
    "AirshipError",
    "AirshipProvider",
    "Client",
    "DEFAULT_TIMEOUT",
    "EvaluationResult",
    "FeatureFlag",
    "FlagDetails",
    "SerializationError",
    "TREATMENT_OFF",
    "TREATMENT_ON",
    "TransportError",
    "configure",
    "flag",
    "get_default_client",
]
