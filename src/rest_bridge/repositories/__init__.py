"""Repository layer for external collaborators.

This layer wraps external dependencies (Redis, HTTP) behind the
protocol-based interfaces in the protocols package. This enables:
- Easy swapping of implementations (Redis -> in-memory, httpx -> other clients)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from rest_bridge.protocols import CacheStore, Transport

from .httpx_transport import HttpxTransport
from .memory_repository import InMemoryCacheStore, NullCacheStore
from .redis_repository import RedisCacheStore

__all__ = [
    "CacheStore",
    "Transport",
    "HttpxTransport",
    "InMemoryCacheStore",
    "NullCacheStore",
    "RedisCacheStore",
]
