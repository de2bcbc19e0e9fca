"""Redis implementation of CacheStore.

Values are stored as JSON strings with a native Redis expiry.
It's the default implementation and satisfies the CacheStore protocol.
"""

import json
import logging
from typing import Any

import redis

from rest_bridge.config import get_redis_client
from rest_bridge.exceptions import CacheStoreError

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Redis implementation of the CacheStore protocol.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Redis failures and undecodable payloads surface as CacheStoreError.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_client: Redis client instance. If None, creates default.
        """
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisCacheStore":
        """Factory method to create RedisCacheStore with defaults.

        Args:
            redis_client: Redis client. If None, one is built from settings.

        Returns:
            Configured RedisCacheStore
        """
        return cls(redis_client=redis_client)

    def get(self, key: str) -> Any | None:
        """Fetch and decode a cached value.

        Args:
            key: The cache key

        Returns:
            The decoded value, or None when absent

        Raises:
            CacheStoreError: If Redis is unreachable or the payload is corrupt
        """
        try:
            payload = self._client.get(key)
        except redis.RedisError as e:
            raise CacheStoreError(f"Redis GET failed for {key}: {e}") from e

        if payload is None:
            return None

        try:
            return json.loads(payload)
        except (TypeError, json.JSONDecodeError) as e:
            raise CacheStoreError(f"Corrupt cache payload for {key}: {e}") from e

    def put(self, key: str, value: Any, ttl: int | None) -> None:
        """Store a value with an expiry.

        Args:
            key: The cache key
            value: JSON-compatible value
            ttl: Time-to-live in seconds. 0 or None skips the write.

        Raises:
            CacheStoreError: If Redis rejects the write
        """
        if not ttl:
            return

        try:
            self._client.set(key, json.dumps(value), ex=ttl)
        except (TypeError, ValueError) as e:
            raise CacheStoreError(f"Value for {key} is not JSON serializable: {e}") from e
        except redis.RedisError as e:
            raise CacheStoreError(f"Redis SET failed for {key}: {e}") from e

        logger.debug("Stored %s for %ss", key, ttl)

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
