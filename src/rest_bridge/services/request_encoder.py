"""Canonical request encoding.

Turns the native part of a QuerySpec into ordered query parameter pairs.
Keys are sorted at every level so that two specs with the same content
always encode to the same string, whatever order they were built in.
"""

import json
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import urlencode

from rest_bridge.entities import INCLUDE_PARAM, QuerySpec


def canonical(value: Any) -> Any:
    """Recursively sort mapping keys and sets, leaving sequence order alone."""
    if isinstance(value, Mapping):
        return {key: canonical(value[key]) for key in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((canonical(item) for item in value), key=str)
    return value


def canonical_json(value: Any) -> str:
    """Deterministic JSON for hashing."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _flatten(prefix: str, value: Any) -> Iterator[tuple[str, str]]:
    # Bracket notation, e.g. _filter[status][EQ]=active, _filter[id][IN][0]=1
    if value is None:
        return
    if isinstance(value, Mapping):
        for key in sorted(value):
            yield from _flatten(f"{prefix}[{key}]", value[key])
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        for index, item in enumerate(items):
            yield from _flatten(f"{prefix}[{index}]", item)
    else:
        yield prefix, _scalar(value)


class RequestEncoder:
    """Encodes query specs into canonical wire parameters."""

    def params(self, spec: QuerySpec) -> dict[str, Any]:
        """Canonical outbound parameter structure, top-level keys sorted."""
        params = dict(spec.native_params)
        if spec.includes:
            params[INCLUDE_PARAM] = ",".join(spec.includes)
        return canonical(params)

    def encode(self, spec: QuerySpec) -> list[tuple[str, str]]:
        """Ordered query pairs for a GET request."""
        return self.pairs(self.params(spec))

    def pairs(self, params: Mapping[str, Any]) -> list[tuple[str, str]]:
        """Flatten an arbitrary parameter mapping into ordered pairs."""
        result: list[tuple[str, str]] = []
        for key in sorted(params):
            result.extend(_flatten(key, params[key]))
        return result

    def query_string(self, spec: QuerySpec) -> str:
        """The canonical URL-encoded query string for ``spec``."""
        return urlencode(self.encode(spec))

    def url(self, endpoint_url: str, spec: QuerySpec) -> str:
        """``endpoint_url`` with the canonical query string appended."""
        query = self.query_string(spec)
        if not query:
            return endpoint_url
        separator = "&" if "?" in endpoint_url else "?"
        return f"{endpoint_url}{separator}{query}"
