"""Cache storage protocol.

Defines the interface for any key/value cache backend the fetch
orchestrator memoizes responses in.

Implementations can include:
- Redis (default)
- In-process dictionary with expiry
- A null store that never persists anything
- Memcached, a framework cache, etc.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for key/value cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Values handed to ``put`` are JSON-compatible (lists of mappings).
    Backends report their own failures as ``CacheStoreError`` so the
    orchestrator can fall through to the network.

    Example:
        ```python
        from rest_bridge.protocols import CacheStore

        store: CacheStore = RedisCacheStore.create()
        store: CacheStore = InMemoryCacheStore()
        ```
    """

    def get(self, key: str) -> Any | None:
        """Fetch a cached value.

        Args:
            key: The derived cache key

        Returns:
            The stored value, or None when absent or expired
        """
        ...

    def put(self, key: str, value: Any, ttl: int | None) -> None:
        """Store a value.

        Args:
            key: The derived cache key
            value: JSON-compatible value to store
            ttl: Time-to-live in seconds. 0 or None means "do not persist".
        """
        ...
