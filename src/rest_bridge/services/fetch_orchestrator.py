"""Fetch orchestration with memoization.

This service coordinates cache lookup, network fetch, response parsing,
cache population and post-filtering for one resource.
"""

from __future__ import annotations

import contextlib
import json
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rest_bridge.config import settings
from rest_bridge.entities import QuerySpec, ResultSet, TransportResponse
from rest_bridge.exceptions import CacheStoreError, ParseError
from rest_bridge.metrics import FetchMetrics
from rest_bridge.protocols import CacheStore, Transport

from .cache_keys import CacheKeyDeriver
from .post_filters import PostFilterEngine
from .request_encoder import RequestEncoder
from .single_flight import SingleFlight

if TYPE_CHECKING:
    from rest_bridge.resource import RestResource

logger = logging.getLogger(__name__)


class FetchOrchestrator:
    """Runs queries for a resource against its transport and cache.

    Caching is asymmetric on purpose:
    - ``fetch_one`` caches the finalized ResultSet and returns it as-is
      on a hit, without re-running post-filters.
    - ``fetch_many`` caches the raw parsed collection, so the same native
      request can be re-filtered locally in different ways.

    Cache store failures never abort a query: reads fail open to the
    network and failed writes are logged and skipped.

    Example:
        ```python
        orchestrator = FetchOrchestrator(
            resource=stations,
            transport=HttpxTransport.create(),
            cache=RedisCacheStore.create(),
        )
        results = orchestrator.fetch_many(spec)
        ```
    """

    def __init__(
        self,
        resource: RestResource,
        transport: Transport,
        cache: CacheStore,
        encoder: RequestEncoder | None = None,
        key_deriver: CacheKeyDeriver | None = None,
        post_filters: PostFilterEngine | None = None,
        metrics: FetchMetrics | None = None,
        single_flight: bool = False,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            resource: Resource supplying URLs, parsing hooks and the definition
            transport: HTTP transport (required)
            cache: Cache store (required; use NullCacheStore for "no cache")
            encoder: Request encoder. Defaults to RequestEncoder().
            key_deriver: Cache key deriver. Defaults to CacheKeyDeriver().
            post_filters: Post-filter engine. Defaults to PostFilterEngine().
            metrics: Metrics sink. Defaults to a fresh FetchMetrics.
            single_flight: Coalesce concurrent identical fetches per key
        """
        self._resource = resource
        self._transport = transport
        self._cache = cache
        self._encoder = encoder or RequestEncoder()
        self._keys = key_deriver or CacheKeyDeriver()
        self._post_filters = post_filters or PostFilterEngine()
        self._metrics = metrics or FetchMetrics()
        self._single_flight = SingleFlight() if single_flight else None

    def fetch_one(self, spec: QuerySpec, entity_id: Any) -> ResultSet:
        """Fetch a single entity.

        Args:
            spec: The accumulated query
            entity_id: Primary key value of the entity

        Returns:
            A ResultSet holding the entity, after post-filters

        Raises:
            TransportError: If the request fails
            ParseError: If the response is not a single record
        """
        key = self._keys.derive(self._resource.name, spec, f"find:{entity_id}")

        with self._guard(key):
            cached = self._cache_get(key)
            if cached:
                self._metrics.record_hit()
                logger.debug("Cache HIT %s", key)
                return ResultSet(cached)

            self._metrics.record_miss()
            logger.debug("Cache MISS %s", key)

            response = self._send_get(self._resource.view_url(entity_id), spec)
            record = self._parse_item(self._decode(response))
            results = self._post_filters.apply(ResultSet.of_item(record), spec.pending)

            self._cache_put(key, results.to_list(), self.active_ttl(spec))
            return results

    def fetch_many(self, spec: QuerySpec) -> ResultSet:
        """Fetch the collection for the native part of ``spec``.

        Args:
            spec: The accumulated query

        Returns:
            The post-filtered ResultSet

        Raises:
            TransportError: If the request fails
            ParseError: If the response is not a collection of records
        """
        key = self._keys.derive(self._resource.name, spec, "get")

        with self._guard(key):
            raw = self._cache_get(key)
            if raw is not None:
                self._metrics.record_hit()
                logger.debug("Cache HIT %s", key)
            else:
                self._metrics.record_miss()
                logger.debug("Cache MISS %s", key)

                response = self._send_get(self._resource.index_url(), spec)
                raw = self._parse_collection(self._decode(response))
                self._cache_put(key, raw, self.active_ttl(spec))

        return self._post_filters.apply(ResultSet(raw), spec.pending)

    def post(self, spec: QuerySpec, form: Mapping[str, Any]) -> Any:
        """POST form parameters to the index endpoint. Never cached.

        The native filters, ordering and includes of ``spec`` are sent in
        the body alongside ``form``; on a name clash ``form`` wins.

        Args:
            spec: The accumulated query; its TTL is forced to 0
            form: Form parameters, encoded like query parameters

        Returns:
            The response body passed through ``parse_item``
        """
        spec.cache_ttl = 0
        body = {**self._encoder.params(spec), **form}

        started = time.perf_counter()
        response = self._transport.post(self._resource.index_url(), self._encoder.pairs(body))
        self._metrics.record_fetch((time.perf_counter() - started) * 1000)

        return self._parse_item(self._decode(response))

    def active_ttl(self, spec: QuerySpec) -> int:
        """TTL in seconds for writes made on behalf of ``spec``."""
        if spec.cache_ttl is not None:
            return spec.cache_ttl
        if self._resource.definition.default_ttl is not None:
            return self._resource.definition.default_ttl
        return settings.default_ttl

    @property
    def metrics(self) -> FetchMetrics:
        return self._metrics

    @property
    def encoder(self) -> RequestEncoder:
        return self._encoder

    @property
    def key_deriver(self) -> CacheKeyDeriver:
        return self._keys

    def _guard(self, key: str):
        if self._single_flight is None:
            return contextlib.nullcontext()
        return self._single_flight.lock(key)

    def _send_get(self, url: str, spec: QuerySpec) -> TransportResponse:
        params = self._encoder.encode(spec)
        logger.debug("GET %s", self._encoder.url(url, spec))

        started = time.perf_counter()
        response = self._transport.get(url, params)
        self._metrics.record_fetch((time.perf_counter() - started) * 1000)
        return response

    def _decode(self, response: TransportResponse) -> Any:
        try:
            return json.loads(response.body)
        except (TypeError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Response from {response.url or 'endpoint'} is not JSON: {e}") from e

    def _parse_item(self, data: Any) -> dict[str, Any]:
        try:
            record = self._resource.parse_item(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ParseError(f"Cannot parse {self._resource.name} item: {e}") from e

        if not isinstance(record, Mapping):
            raise ParseError(
                f"Expected a record for {self._resource.name}, got {type(record).__name__}"
            )
        return dict(record)

    def _parse_collection(self, data: Any) -> list[dict[str, Any]]:
        try:
            records = self._resource.parse_collection(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ParseError(f"Cannot parse {self._resource.name} collection: {e}") from e

        if isinstance(records, Mapping) or not isinstance(records, (list, tuple)):
            raise ParseError(
                f"Expected a list of records for {self._resource.name}, got {type(records).__name__}"
            )
        if not all(isinstance(record, Mapping) for record in records):
            raise ParseError(f"Collection for {self._resource.name} contains non-record items")
        return [dict(record) for record in records]

    def _cache_get(self, key: str) -> Any | None:
        try:
            return self._cache.get(key)
        except CacheStoreError as e:
            self._metrics.record_cache_error()
            logger.warning("Cache read failed, treating as miss: %s", e)
            return None

    def _cache_put(self, key: str, value: Any, ttl: int) -> None:
        try:
            self._cache.put(key, value, ttl)
        except CacheStoreError as e:
            self._metrics.record_cache_error()
            logger.warning("Cache write failed, result not memoized: %s", e)
