"""HTTP transport protocol.

The bridge only needs a blocking GET and a form POST. Retries, redirects
and timeouts are the transport's own business.
"""

from typing import Protocol, Sequence, runtime_checkable

from rest_bridge.entities import TransportResponse

QueryPairs = Sequence[tuple[str, str]]


@runtime_checkable
class Transport(Protocol):
    """Protocol for synchronous HTTP transports.

    Implementations raise ``TransportError`` for network failures and
    non-success status codes.
    """

    def get(self, url: str, params: QueryPairs | None = None) -> TransportResponse:
        """Issue a GET request.

        Args:
            url: Target URL
            params: Ordered query parameter pairs

        Returns:
            The response body and status code
        """
        ...

    def post(self, url: str, form: QueryPairs | None = None) -> TransportResponse:
        """Issue a form-encoded POST request.

        Args:
            url: Target URL
            form: Ordered form parameter pairs

        Returns:
            The response body and status code
        """
        ...
