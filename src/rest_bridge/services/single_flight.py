"""Per-key request coalescing.

With single-flight enabled, concurrent identical queries serialize on a
per-key lock. The first caller fetches and populates the cache, the
others re-check the cache once they get the lock and reuse the result.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class SingleFlight:
    """Reference-counted per-key locks."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, waiters = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, waiters + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, waiters = self._locks[key]
                if waiters <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, waiters - 1)

    def __len__(self) -> int:
        """Number of keys currently held or awaited."""
        return len(self._locks)
