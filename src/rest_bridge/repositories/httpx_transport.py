"""httpx-based transport.

Wraps a blocking ``httpx.Client``. No retries and no redirect following;
failures are reported as TransportError and propagate to the caller.
"""

import logging

import httpx

from rest_bridge.config import get_http_client
from rest_bridge.entities import TransportResponse
from rest_bridge.exceptions import TransportError
from rest_bridge.protocols import QueryPairs

logger = logging.getLogger(__name__)


class HttpxTransport:
    """httpx implementation of the Transport protocol.

    This class satisfies the Transport protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        transport = HttpxTransport.create()
        response = transport.get("https://api.example.com/apps", [("include", "genre")])
        ```
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize the transport.

        Args:
            client: httpx client. If None, one is built from settings.
        """
        self._client = client or get_http_client()

    @classmethod
    def create(cls, client: httpx.Client | None = None) -> "HttpxTransport":
        """Factory method to create HttpxTransport with defaults."""
        return cls(client=client)

    def get(self, url: str, params: QueryPairs | None = None) -> TransportResponse:
        """Issue a GET request.

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        return self._send("GET", url, params=list(params) if params else None)

    def post(self, url: str, form: QueryPairs | None = None) -> TransportResponse:
        """Issue a form-encoded POST request.

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        return self._send("POST", url, data=list(form or []))

    def _send(self, method: str, url: str, **kwargs) -> TransportResponse:
        if method == "POST":
            # httpx only form-encodes mappings; keep pair order by encoding ourselves
            kwargs = {
                "content": str(httpx.QueryParams(kwargs.pop("data"))),
                "headers": {"Content-Type": "application/x-www-form-urlencoded"},
            }

        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{method} {e.request.url} returned {e.response.status_code}",
                url=str(e.request.url),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        logger.debug("%s %s -> %s", method, response.request.url, response.status_code)
        return TransportResponse(
            body=response.content,
            status_code=response.status_code,
            url=str(response.request.url),
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
