"""Request execution for the ByteBard API.

This module turns an API-relative path plus per-call options into one
outbound HTTP request: it merges headers, checks the API key, encodes the
body, delegates to a transport and decodes the JSON reply.
"""

import json
import sys
from typing import Any, Mapping, Optional

from requests.structures import CaseInsensitiveDict

from .exceptions import AuthenticationError, DecodeError
from .transport import Body, RequestsTransport, Transport

DEFAULT_BASE_URL = "https://bytebard.co/api"
API_KEY_HEADER = "x-api-key"
DEFAULT_HEADERS = (("Content-Type", "application/json"),)


def build_headers(overrides: Optional[Mapping[str, str]] = None) -> CaseInsensitiveDict:
    """Compute the headers for one request.

    Defaults are applied first and caller headers are laid over them, so a
    caller value wins on collision. Keys compare case-insensitively, which
    keeps every header name unique in the result.

    Args:
        overrides: Caller-supplied headers

    Returns:
        A fresh header mapping
    """
    headers = CaseInsensitiveDict(DEFAULT_HEADERS)
    if overrides:
        for key, value in overrides.items():
            headers[key] = value
    return headers


def mask_key(api_key: str) -> str:
    """Mask an API key for debug output."""
    if len(api_key) <= 8:
        return "****"
    return f"{api_key[:4]}...{api_key[-4:]}"


class RequestExecutor:
    """Builds and sends requests against a fixed API origin."""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        base_url: str = DEFAULT_BASE_URL,
        debug: bool = False,
    ) -> None:
        """Initialize the executor.

        Args:
            transport: HTTP transport. If None, uses RequestsTransport.
            base_url: Origin every relative path is appended to
            debug: Print request and response details to stderr
        """
        self.transport = transport or RequestsTransport()
        self.base_url = base_url
        self.debug = debug

    def _debug(self, message: str) -> None:
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def execute(
        self,
        relative_path: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> Any:
        """Send one request and return its decoded JSON body.

        The HTTP status is not interpreted. Any response whose body parses as
        JSON is returned, error payloads included.

        Args:
            relative_path: Path appended verbatim to the base URL
            method: HTTP method
            headers: Caller headers, must include the API key
            body: Request body; text is sent as UTF-8

        Returns:
            Decoded JSON value

        Raises:
            AuthenticationError: If no API key header is present
            TransportError: If the network call fails
            DecodeError: If the response body is not valid JSON
        """
        merged = build_headers(headers)
        api_key = merged.get(API_KEY_HEADER)
        if not api_key:
            raise AuthenticationError("Missing API key")

        url = self.base_url + relative_path
        if isinstance(body, str):
            body = body.encode("utf-8")

        self._debug(f"Making {method} request to {url}")
        self._debug(f"API key: {mask_key(api_key)}")

        response = self.transport.send(url, method, merged, body)

        self._debug(f"Response status: {response.status_code}")

        try:
            return json.loads(response.content)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Invalid JSON response (HTTP {response.status_code}): {e}",
                status_code=response.status_code,
                content=response.content,
            ) from e
