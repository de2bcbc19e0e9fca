import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import httpx
import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REST_BRIDGE_REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REST_BRIDGE_REDIS_PASSWORD")

    # Cache
    default_ttl: int = int(os.getenv("REST_BRIDGE_DEFAULT_TTL", "0"))  # seconds, 0 = do not cache
    single_flight: bool = os.getenv("REST_BRIDGE_SINGLE_FLIGHT", "false").lower() == "true"

    # HTTP
    http_timeout: float = float(os.getenv("REST_BRIDGE_HTTP_TIMEOUT", "10.0"))

    # Logging
    log_level: str | None = os.getenv("REST_BRIDGE_LOG_LEVEL")  # unset = leave host logging alone

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.default_ttl < 0:
            raise ValueError("REST_BRIDGE_DEFAULT_TTL must be >= 0 (seconds)")

        if self.http_timeout <= 0:
            raise ValueError(
                f"REST_BRIDGE_HTTP_TIMEOUT must be positive, got {self.http_timeout}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(config: Settings) -> None:
    """Apply REST_BRIDGE_LOG_LEVEL to the package logger, if it was set."""
    if config.log_level:
        logging.getLogger("rest_bridge").setLevel(config.log_level.upper())


configure_logging(settings)


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def get_http_client() -> httpx.Client:
    """Create an HTTP client instance."""
    return httpx.Client(timeout=settings.http_timeout, follow_redirects=False)
