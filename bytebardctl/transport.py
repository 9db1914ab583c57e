"""HTTP transport for the ByteBard API.

The executor talks to the network only through the ``Transport`` protocol,
so tests can swap in a stub that records requests instead of sending them.
"""

from typing import Any, BinaryIO, Iterable, Mapping, NamedTuple, Optional, Protocol, Union

import requests
from requests.adapters import HTTPAdapter

from .exceptions import TransportError

Body = Union[str, bytes, BinaryIO, Iterable[bytes], None]


class TransportResponse(NamedTuple):
    """Status code and raw body of a completed HTTP exchange."""

    status_code: int
    content: bytes


class Transport(Protocol):
    """Anything that can deliver one HTTP request and return its response."""

    def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Body = None,
    ) -> TransportResponse:
        ...


class RequestsTransport:
    """Transport backed by a pooled ``requests.Session``."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None) -> None:
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds, passed to every call
            session: Existing session to reuse. If None, creates one.
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self._configure_session()

    def _configure_session(self) -> None:
        """Mount a pooling adapter that never retries on its own."""
        adapter = HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=20)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Body = None,
    ) -> TransportResponse:
        """Send one request and return its status and body.

        Raises:
            TransportError: If the request cannot be delivered
        """
        try:
            prepared = self.session.prepare_request(
                requests.Request(method=method, url=url, headers=dict(headers), data=body)
            )
            # requests marks streams of unknown size as chunked even when the
            # caller gave a Content-Length; a message may carry only one of the two
            if "Content-Length" in prepared.headers:
                prepared.headers.pop("Transfer-Encoding", None)

            settings = self.session.merge_environment_settings(prepared.url, {}, None, None, None)
            response = self.session.send(prepared, timeout=self.timeout, **settings)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", url=url) from e

        return TransportResponse(response.status_code, response.content)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
