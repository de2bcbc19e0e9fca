"""In-process CacheStore implementations."""

import copy
import threading
import time
from typing import Any


class InMemoryCacheStore:
    """Dictionary-backed CacheStore with per-entry expiry.

    Values are deep-copied on the way in and out so callers can never
    mutate a cached response.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return copy.deepcopy(value)

    def put(self, key: str, value: Any, ttl: int | None) -> None:
        if not ttl:
            return
        with self._lock:
            self._entries[key] = (self._clock() + ttl, copy.deepcopy(value))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCacheStore:
    """CacheStore used when no cache is configured: always misses, never stores."""

    def get(self, key: str) -> Any | None:
        return None

    def put(self, key: str, value: Any, ttl: int | None) -> None:
        return None
