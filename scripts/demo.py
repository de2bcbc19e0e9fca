#!/usr/bin/env python3
"""
Demo script for rest_bridge.

This script runs queries against an in-process fake radio API so that it
works offline. It shows native filtering, post-filtering, memoization and
a resource with a non-enveloped response.
"""

import json
import logging

import httpx

from rest_bridge import HttpxTransport, InMemoryCacheStore, ResourceDefinition, RestResource

STATIONS = [
    {"StationId": 1, "name": "Kerrang", "status": "active", "genre": "rock", "listeners": 410},
    {"StationId": 2, "name": "Absolute", "status": "inactive", "genre": "rock", "listeners": 120},
    {"StationId": 3, "name": "Magic", "status": "active", "genre": "pop", "listeners": 980},
    {"StationId": 4, "name": "Heart", "status": "active", "genre": "pop", "listeners": 1500},
]

APPS = [
    {"AppId": 10, "platform": "ios", "version": "4.2"},
    {"AppId": 11, "platform": "android", "version": "4.1"},
]


def fake_api(request: httpx.Request) -> httpx.Response:
    """Serve the sample data. Only `status` is filtered server-side."""
    print(f"  🌐 {request.method} {request.url}")

    if request.url.path.startswith("/applist"):
        return httpx.Response(200, json=APPS)

    parts = request.url.path.strip("/").split("/")
    if len(parts) == 2:
        station = next((s for s in STATIONS if str(s["StationId"]) == parts[1]), None)
        if station is None:
            return httpx.Response(404)
        return httpx.Response(200, json=station)

    status = request.url.params.get("_filter[status][EQ]")
    body = [s for s in STATIONS if status is None or s["status"] == status]
    return httpx.Response(200, json={"body": body})


class Stations(RestResource):
    definition = ResourceDefinition(
        name="stations",
        primary_key="StationId",
        endpoint_url="https://radio.example.com/stations",
        filterable={"status"},
        includable=("genre",),
        supported_verbs={"where"},
    )


class Apps(RestResource):
    """App list endpoint returns a bare JSON array."""

    definition = ResourceDefinition(
        name="apps",
        primary_key="AppId",
        endpoint_url="https://radio.example.com/applist",
        supported_verbs=set(),
    )

    def parse_collection(self, data):
        return data


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_records(records, fields) -> None:
    for record in records:
        print("  " + ", ".join(f"{f}={record.get(f)}" for f in fields))


def demo_routing(stations: Stations) -> None:
    """Demonstrate native vs. post-filtered intents."""
    print_section("Native filters and post-filters")

    print("\n🔍 Active pop stations by listeners (status native, rest local):")
    results = (
        stations.where("status", "=", "active")
        .where("genre", "=", "pop")
        .order_by("listeners", "desc")
        .get()
    )
    print_records(results, ("StationId", "name", "listeners"))

    print("\n🔍 Stations 1 and 3 (whereIn post-filtered):")
    print_records(stations.where_in("StationId", [1, 3]).get(), ("StationId", "name"))


def demo_memoization(stations: Stations) -> None:
    """Demonstrate cache hits for semantically identical queries."""
    print_section("Memoization")

    for attempt in range(1, 3):
        print(f"\n🔁 Attempt {attempt}")
        results = stations.where("status", "=", "active").include("genre").remember(60).get()
        print(f"  ✓ {len(results)} stations")

    print("\n🔍 find(4), twice:")
    for _ in range(2):
        print_records(stations.remember(60).find(4), ("StationId", "name"))

    print(f"\n📊 Metrics: {json.dumps(stations.metrics.to_dict(), indent=2)}")


def demo_custom_parser(apps: Apps) -> None:
    """Demonstrate a resource that overrides parse_collection."""
    print_section("Custom response parsing")

    print_records(apps.where("platform", "=", "ios").get(), ("AppId", "platform", "version"))


def main() -> None:
    """Run all demos."""
    logging.basicConfig(level=logging.INFO)

    transport = HttpxTransport.create(httpx.Client(transport=httpx.MockTransport(fake_api)))
    cache = InMemoryCacheStore()

    print("\n" + "🚀" * 35)
    print("  REST BRIDGE DEMO")
    print("🚀" * 35)

    try:
        demo_routing(Stations(transport=transport, cache=cache))
        demo_memoization(Stations(transport=transport, cache=cache))
        demo_custom_parser(Apps(transport=transport, cache=cache))
    finally:
        transport.close()

    print_section("Demo Complete")


if __name__ == "__main__":
    main()
