"""Service layer for query translation and memoization.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    QueryBuilder -> FetchOrchestrator -> Transport / CacheStore
    (intents)    -> (memoize, filter) -> (repositories)
"""

from .cache_keys import CacheKeyDeriver
from .capability_resolver import CapabilityResolver
from .fetch_orchestrator import FetchOrchestrator
from .post_filters import PostFilterEngine
from .query_builder import QueryBuilder
from .request_encoder import RequestEncoder, canonical_json
from .single_flight import SingleFlight

__all__ = [
    "CacheKeyDeriver",
    "CapabilityResolver",
    "FetchOrchestrator",
    "PostFilterEngine",
    "QueryBuilder",
    "RequestEncoder",
    "SingleFlight",
    "canonical_json",
]
