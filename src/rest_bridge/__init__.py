"""REST Bridge - ORM-style querying and caching over limited REST endpoints.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStore, Transport)
    - repositories: Collaborator implementations (Redis, in-memory, httpx)
    - services: Query routing, encoding, cache keys, memoization, post-filters
    - dto: Configuration contracts (ResourceDefinition)
    - entities: Domain models (internal)

Usage:
    ```python
    from rest_bridge import RedisCacheStore, ResourceDefinition, RestResource

    stations = RestResource(
        ResourceDefinition(
            name="stations",
            endpoint_url="https://api.example.com/stations",
            filterable={"status"},
            supported_verbs={"where"},
        ),
        cache=RedisCacheStore.create(),
    )
    active = stations.where("status", "=", "active").remember(300).get()
    ```
"""

from rest_bridge.config import get_http_client, get_redis_client, settings
from rest_bridge.dto import ResourceDefinition
from rest_bridge.entities import Capabilities, QuerySpec, ResultSet, SortDirection, TransportResponse
from rest_bridge.exceptions import (
    CacheStoreError,
    ConfigurationError,
    ParseError,
    RestBridgeError,
    TransportError,
)
from rest_bridge.metrics import FetchMetrics
from rest_bridge.protocols import CacheStore, Transport
from rest_bridge.repositories import HttpxTransport, InMemoryCacheStore, NullCacheStore, RedisCacheStore
from rest_bridge.resource import RestResource
from rest_bridge.services import (
    CacheKeyDeriver,
    CapabilityResolver,
    FetchOrchestrator,
    PostFilterEngine,
    QueryBuilder,
    RequestEncoder,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "get_http_client",
    "ResourceDefinition",
    # Protocols (interfaces)
    "CacheStore",
    "Transport",
    # Services
    "CacheKeyDeriver",
    "CapabilityResolver",
    "FetchOrchestrator",
    "PostFilterEngine",
    "QueryBuilder",
    "RequestEncoder",
    "RestResource",
    # Repositories
    "HttpxTransport",
    "InMemoryCacheStore",
    "NullCacheStore",
    "RedisCacheStore",
    # Entities
    "Capabilities",
    "QuerySpec",
    "ResultSet",
    "SortDirection",
    "TransportResponse",
    "FetchMetrics",
    # Errors
    "RestBridgeError",
    "TransportError",
    "ParseError",
    "ConfigurationError",
    "CacheStoreError",
]
