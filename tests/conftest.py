"""Pytest configuration and fixtures."""

import json
from typing import Any

import pytest

from rest_bridge import InMemoryCacheStore, ResourceDefinition, RestResource, TransportResponse

APPS = [
    {"AppId": 1, "status": "active", "name": "Kerrang", "rank": 3, "genre": "rock"},
    {"AppId": 2, "status": "inactive", "name": "Absolute", "rank": 1, "genre": "pop"},
    {"AppId": 3, "status": "active", "name": "Magic", "rank": 2, "genre": "pop"},
]


class FakeTransport:
    """Transport double that records every request."""

    def __init__(self, payload: Any = None, responses: dict[str, Any] | None = None) -> None:
        self.payload = {"body": APPS} if payload is None else payload
        self.responses = responses or {}
        self.calls: list[tuple[str, str, list[tuple[str, str]]]] = []

    def _respond(self, url: str) -> TransportResponse:
        payload = self.responses.get(url, self.payload)
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        return TransportResponse(body=body, status_code=200, url=url)

    def get(self, url, params=None):
        self.calls.append(("GET", url, list(params or [])))
        return self._respond(url)

    def post(self, url, form=None):
        self.calls.append(("POST", url, list(form or [])))
        return self._respond(url)

    @property
    def get_calls(self) -> list[tuple[str, str, list[tuple[str, str]]]]:
        return [call for call in self.calls if call[0] == "GET"]


@pytest.fixture
def transport():
    """Create a recording transport serving the sample collection."""
    return FakeTransport()


@pytest.fixture
def cache():
    """Create an empty in-memory cache store."""
    return InMemoryCacheStore()


@pytest.fixture
def make_resource(transport, cache):
    """Build a resource with the given capabilities."""

    def _make(**overrides: Any) -> RestResource:
        config = {
            "name": "apps",
            "primary_key": "AppId",
            "endpoint_url": "https://api.example.com/applist",
            "filterable": set(),
            "includable": ("genre",),
            "supported_verbs": {"where"},
        }
        config.update(overrides)
        return RestResource(
            ResourceDefinition(**config),
            transport=transport,
            cache=cache,
            single_flight=False,
        )

    return _make
