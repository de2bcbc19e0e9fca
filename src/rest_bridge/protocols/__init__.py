"""Protocol interfaces for swappable collaborators.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> in-memory, httpx -> requests, etc.)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .cache_store import CacheStore
from .transport import QueryPairs, Transport

__all__ = [
    "CacheStore",
    "QueryPairs",
    "Transport",
]
