import threading
from dataclasses import dataclass, field


@dataclass
class FetchMetrics:
    """Track cache and network activity for a resource."""

    cache_hits: int = 0
    cache_misses: int = 0
    cache_errors: int = 0
    network_fetches: int = 0
    total_fetch_time_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def total_lookups(self) -> int:
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_lookups == 0:
            return 0.0
        return self.cache_hits / self.total_lookups

    @property
    def avg_fetch_time_ms(self) -> float:
        """Calculate average network fetch time."""
        if self.network_fetches == 0:
            return 0.0
        return self.total_fetch_time_ms / self.network_fetches

    def record_hit(self) -> None:
        """Record a cache hit."""
        with self._lock:
            self.cache_hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        with self._lock:
            self.cache_misses += 1

    def record_cache_error(self) -> None:
        """Record a failed cache read or write."""
        with self._lock:
            self.cache_errors += 1

    def record_fetch(self, duration_ms: float) -> None:
        """Record a network round trip."""
        with self._lock:
            self.network_fetches += 1
            self.total_fetch_time_ms += duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "cache_errors": self.cache_errors,
            "hit_rate": self.hit_rate,
            "network_fetches": self.network_fetches,
            "avg_fetch_time_ms": self.avg_fetch_time_ms,
        }
