"""
Tests for fetching, memoization and the end-to-end query flow.
"""

import threading
import time

import pytest

from rest_bridge import (
    CacheStoreError,
    InMemoryCacheStore,
    ParseError,
    ResourceDefinition,
    RestResource,
    TransportError,
)
from rest_bridge.services import CacheKeyDeriver

from tests.conftest import APPS, FakeTransport


def _ids(results):
    return [record["AppId"] for record in results]


def test_scenario_a_post_filters_when_nothing_is_filterable(make_resource, transport, cache):
    """Test an unfilterable where() fetches everything, caches raw, filters locally."""
    resource = make_resource(filterable=set())

    results = resource.where("status", "=", "active").remember(60).get()

    assert _ids(results) == [1, 3]
    method, url, params = transport.calls[0]
    assert (method, url) == ("GET", "https://api.example.com/applist")
    assert params == []

    key = CacheKeyDeriver().derive("apps", resource.query().spec, "get")
    assert cache.get(key) == APPS


def test_scenario_b_native_filter_is_not_reapplied(make_resource, transport):
    """Test a natively satisfied where() returns the fetched collection as-is."""
    resource = make_resource(filterable={"status"})

    builder = resource.where("status", "=", "active")
    results = builder.get()

    assert not builder.spec.has_post_filters
    assert transport.calls[0][2] == [("_filter[status][EQ]", "active")]
    # The fake server ignores filters, so every record comes back untouched
    assert _ids(results) == [1, 2, 3]


def test_scenario_c_same_query_different_order_hits_cache(make_resource, transport):
    """Test semantically identical queries share one network fetch."""
    resource = make_resource(filterable={"status", "genre"})

    first = resource.where("status", "=", "active").where("genre", "=", "pop").remember(60).get()
    second = resource.where("genre", "=", "pop").where("status", "=", "active").remember(60).get()

    assert len(transport.get_calls) == 1
    assert first == second
    assert resource.metrics.cache_hits == 1
    assert resource.metrics.cache_misses == 1


def test_scenario_d_find_hit_skips_transport(make_resource, transport, cache):
    """Test a cached find() is returned without touching the network or post-filters."""
    resource = make_resource()
    spec = resource.query().spec
    cache.put(CacheKeyDeriver().derive("apps", spec, "find:7"), [{"AppId": 7, "status": "gone"}], 60)

    results = resource.where("status", "=", "active").find(7)

    assert transport.calls == []
    assert _ids(results) == [7]


def test_scenario_e_only_includable_names_are_sent(make_resource, transport):
    """Test include() drops unknown names before encoding."""
    make_resource().include("genre").include("unknown").get()

    assert transport.calls[0][2] == [("include", "genre")]


def test_collection_cache_is_reused_with_different_post_filters(make_resource, transport):
    """Test one cached raw collection serves differently post-filtered queries."""
    resource = make_resource()

    active = resource.where("status", "=", "active").remember(60).get()
    inactive = resource.where("status", "=", "inactive").remember(60).get()

    assert len(transport.get_calls) == 1
    assert _ids(active) == [1, 3]
    assert _ids(inactive) == [2]


def test_cached_empty_collection_is_a_hit(make_resource, transport, cache):
    """Test an empty cached collection still counts as present."""
    resource = make_resource()
    cache.put(CacheKeyDeriver().derive("apps", resource.query().spec, "get"), [], 60)

    assert len(resource.get()) == 0
    assert transport.calls == []


def test_find_fetches_view_url_and_caches_final_result(make_resource, transport, cache):
    """Test find() GETs {base}/{id}, post-filters and caches the final records."""
    transport.responses["https://api.example.com/applist/2"] = APPS[1]
    resource = make_resource()

    results = resource.include("genre").remember(60).find(2)

    assert _ids(results) == [2]
    assert transport.calls == [("GET", "https://api.example.com/applist/2", [("include", "genre")])]

    again = resource.include("genre").remember(60).find(2)
    assert again == results
    assert len(transport.calls) == 1


def test_find_post_filter_can_empty_result(make_resource, transport):
    """Test post-filters apply to the wrapped single record."""
    transport.responses["https://api.example.com/applist/2"] = APPS[1]

    results = make_resource().where("status", "=", "active").find(2)

    assert len(results) == 0


def test_find_empty_cached_result_is_refetched(make_resource, transport, cache):
    """Test an empty finalized find() entry is treated as a miss."""
    transport.responses["https://api.example.com/applist/1"] = APPS[0]
    resource = make_resource()
    cache.put(CacheKeyDeriver().derive("apps", resource.query().spec, "find:1"), [], 60)

    assert _ids(resource.find(1)) == [1]
    assert len(transport.calls) == 1


def test_zero_ttl_does_not_cache(make_resource, transport, cache):
    """Test the default TTL of 0 never persists anything."""
    resource = make_resource()

    resource.get()
    resource.get()

    assert len(transport.get_calls) == 2
    assert len(cache) == 0


def test_definition_default_ttl_applies(make_resource, transport):
    """Test a definition TTL is used when the query does not remember()."""
    resource = make_resource(default_ttl=30)

    resource.get()
    resource.get()

    assert len(transport.get_calls) == 1


def test_remember_override_key(make_resource, cache):
    """Test remember(ttl, key) stores under the verbatim key tail."""
    make_resource().remember(60, ":all-apps").get()

    assert cache.get("resource:apps:get:all-apps") == APPS


def test_post_is_never_cached(make_resource, transport, cache):
    """Test POST forces TTL to 0 and sends form pairs."""
    transport.payload = {"ok": True}
    builder = make_resource().remember(60)

    response = builder.post({"name": "New", "tags": ["a", "b"]})

    assert response == {"ok": True}
    assert builder.spec.cache_ttl == 0
    assert transport.calls == [
        ("POST", "https://api.example.com/applist", [("name", "New"), ("tags[0]", "a"), ("tags[1]", "b")])
    ]
    assert len(cache) == 0


def test_post_body_carries_native_query(make_resource, transport):
    """Test chained native filters and includes reach the POST body."""
    transport.payload = {"ok": True}

    make_resource(filterable={"status"}).where("status", "=", "active").include("genre").post({"name": "n"})

    assert transport.calls == [
        (
            "POST",
            "https://api.example.com/applist",
            [("_filter[status][EQ]", "active"), ("include", "genre"), ("name", "n")],
        )
    ]


class BrokenCacheStore:
    """Cache store whose every operation fails."""

    def get(self, key):
        raise CacheStoreError("down")

    def put(self, key, value, ttl):
        raise CacheStoreError("down")


def test_cache_failures_fail_open(transport):
    """Test a failing cache never aborts the query."""
    resource = RestResource(
        ResourceDefinition(name="apps", endpoint_url="https://api.example.com/applist"),
        transport=transport,
        cache=BrokenCacheStore(),
    )

    results = resource.where("status", "=", "active").remember(60).get()

    assert _ids(results) == [1, 3]
    assert resource.metrics.cache_errors == 2


def test_parse_errors_propagate(make_resource, transport):
    """Test bodies in the wrong shape raise ParseError."""
    transport.payload = [{"AppId": 1}]
    with pytest.raises(ParseError):
        make_resource().get()

    transport.payload = b"<html>"
    with pytest.raises(ParseError):
        make_resource().get()

    transport.payload = {"body": ["not", "records"]}
    with pytest.raises(ParseError):
        make_resource().get()


def test_transport_errors_propagate(make_resource, transport):
    """Test transport failures reach the caller unchanged."""
    error = TransportError("boom", url="https://api.example.com/applist", status_code=503)

    def failing_get(url, params=None):
        raise error

    transport.get = failing_get

    with pytest.raises(TransportError) as exc_info:
        make_resource().get()
    assert exc_info.value is error


class FlatApps(RestResource):
    """Resource whose index endpoint returns a bare list."""

    definition = ResourceDefinition(
        name="flat-apps",
        primary_key="AppId",
        endpoint_url="https://api.example.com/applist",
        supported_verbs={"where"},
    )

    def parse_collection(self, data):
        return data


def test_subclass_parse_hook(transport):
    """Test subclasses can normalize non-enveloped responses."""
    transport.payload = APPS

    results = FlatApps(transport=transport).where("AppId", "=", 3).get()

    assert _ids(results) == [3]


class SlowTransport(FakeTransport):
    def get(self, url, params=None):
        time.sleep(0.05)
        return super().get(url, params)


def test_single_flight_coalesces_concurrent_misses():
    """Test identical concurrent queries cause exactly one network fetch."""
    transport = SlowTransport()
    resource = RestResource(
        ResourceDefinition(name="apps", endpoint_url="https://api.example.com/applist"),
        transport=transport,
        cache=InMemoryCacheStore(),
        single_flight=True,
    )
    results = []

    def worker():
        results.append(resource.remember(60).get())

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(transport.get_calls) == 1
    assert len(results) == 5
    assert all(result == results[0] for result in results)
