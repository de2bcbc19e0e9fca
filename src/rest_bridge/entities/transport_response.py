"""Transport response domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransportResponse:
    """Raw response returned by a transport.

    Attributes:
        body: The undecoded response body
        status_code: HTTP status code
        url: The final request URL, including the encoded query string
    """

    body: bytes
    status_code: int
    url: str = ""
