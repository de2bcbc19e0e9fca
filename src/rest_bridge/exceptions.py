"""Error taxonomy for the bridge.

Transport and parse failures propagate to the caller. Cache store
failures are caught by the fetch orchestrator and treated as misses.
"""


class RestBridgeError(Exception):
    """Base class for every error raised by rest_bridge."""


class TransportError(RestBridgeError):
    """Network or HTTP failure reported by a transport."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(RestBridgeError):
    """Response body is not in the shape a parsing hook expects."""


class ConfigurationError(RestBridgeError):
    """A resource definition could not be loaded."""


class CacheStoreError(RestBridgeError):
    """Cache backend read or write failed."""
