"""Shared pytest fixtures for Airship SDK tests."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

import pytest

import airship
from airship import Client

ENV_KEY = "test-env-key"
EDGE_URL = "http://edge.airship.test"
EVALUATION_URL = f"{EDGE_URL}/v2/object-values/{ENV_KEY}"


@dataclass
class Entity:
    """Entity shape used by the example application."""

    id: str


@dataclass
class Payload:
    """Payload shape used by the example application."""

    foo: str


@dataclass
class Limits:
    daily: int = 0
    currencies: List[str] = field(default_factory=list)


@dataclass
class Pricing:
    """Payload with a nested object."""

    limits: Limits


@pytest.fixture
def success_body() -> Dict[str, Any]:
    """Response body for an entity that is sampled into the 'on' treatment."""
    return {
        "treatment": "on",
        "payload": {"foo": "bar"},
        "isEligible": True,
        "isEnabled": True,
    }


@pytest.fixture
def client() -> Iterator[Client]:
    """Client with its own transport, pointed at the test edge URL."""
    c = Client(ENV_KEY, EDGE_URL)
    yield c
    c.close()


@pytest.fixture
def restore_default_client() -> Iterator[None]:
    """Put the process-wide default client back after the test."""
    previous = airship.get_default_client()
    yield
    airship.configure(previous)
