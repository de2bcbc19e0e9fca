"""Fluent query builder.

Each intent is routed once, when it is issued: either into the native
request parameters or onto the post-filter queue. Nothing is
re-evaluated later.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from rest_bridge.entities import (
    IN_TOKEN,
    ORDER_BY,
    WHERE,
    WHERE_IN,
    PostFilterVerb,
    QuerySpec,
    ResultSet,
    SortDirection,
    normalize_operator,
)

from .capability_resolver import CapabilityResolver

if TYPE_CHECKING:
    from .fetch_orchestrator import FetchOrchestrator

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Accumulates one query and executes it.

    A builder owns its QuerySpec; start a new builder for every query.

    Example:
        ```python
        active = (
            stations.query()
            .where("status", "=", "active")
            .where_in("genre", ["rock", "pop"])
            .order_by("name")
            .include("genre")
            .remember(300)
            .get()
        )
        ```
    """

    def __init__(self, resolver: CapabilityResolver, orchestrator: FetchOrchestrator) -> None:
        self._resolver = resolver
        self._orchestrator = orchestrator
        self.spec = QuerySpec()

    def where(self, field: str, operator: str, value: Any) -> QueryBuilder:
        """Filter on ``field`` compared against ``value``.

        Operators =, >, >=, <, <= are sent as EQ, GT, GTE, LT, LTE.
        Anything else is passed through unchanged.
        """
        if self._resolver.supports_verb(WHERE) and self._resolver.is_filterable(field):
            self.spec.native_filters.setdefault(field, {})[normalize_operator(operator)] = value
            logger.debug("where(%r) sent natively", field)
        else:
            self.spec.pending[PostFilterVerb.WHERE].append((field, operator, value))
            logger.debug("where(%r) deferred to post-filter", field)
        return self

    def where_in(self, field: str, values: Iterable[Any], strict: bool = False) -> QueryBuilder:
        """Filter on ``field`` being one of ``values``.

        ``strict`` only matters when the filter runs locally.
        """
        if self._resolver.supports_verb(WHERE_IN) and self._resolver.is_filterable(field):
            self.spec.native_filters.setdefault(field, {})[IN_TOKEN] = list(values)
            logger.debug("whereIn(%r) sent natively", field)
        else:
            self.spec.pending[PostFilterVerb.WHERE_IN].append((field, list(values), strict))
            logger.debug("whereIn(%r) deferred to post-filter", field)
        return self

    def order_by(self, field: str, direction: str = "asc") -> QueryBuilder:
        """Sort by ``field``.

        Natively only one ordering exists, so a later call replaces an
        earlier one. Locally, calls stack as sort keys.
        """
        sort_direction = SortDirection.from_string(direction)
        if self._resolver.supports_verb(ORDER_BY):
            self.spec.ordering = ("-" if sort_direction is SortDirection.DESC else "") + field
        else:
            self.spec.pending[PostFilterVerb.SORT_BY].append((field, sort_direction))
        return self

    def include(self, name: str) -> QueryBuilder:
        """Request a sub-resource. Names the resource does not offer are dropped."""
        if not self._resolver.is_includable(name):
            logger.debug("include(%r) dropped: not includable", name)
        elif name not in self.spec.includes:
            self.spec.includes.append(name)
        return self

    def remember(self, ttl: int, key: str | None = None) -> QueryBuilder:
        """Cache results for ``ttl`` seconds, optionally under a fixed key tail.

        The caller is responsible for the uniqueness of ``key``.
        """
        self.spec.cache_ttl = ttl
        self.spec.cache_key = key
        return self

    def find(self, entity_id: Any) -> ResultSet:
        """Run the query for a single entity."""
        return self._orchestrator.fetch_one(self.spec, entity_id)

    def get(self) -> ResultSet:
        """Run the query for the collection."""
        return self._orchestrator.fetch_many(self.spec)

    def post(self, form: Mapping[str, Any]) -> Any:
        """POST ``form`` to the resource's index endpoint. Never cached."""
        return self._orchestrator.post(self.spec, form)
