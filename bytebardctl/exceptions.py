"""Exception classes for the ByteBard API client.

This module defines the error taxonomy raised by the client layer. Only
local failures are exceptions: application errors reported by the API
(``{"success": false, "error": "..."}``) come back as ordinary decoded JSON.
"""

from typing import Optional, Dict, Any


class BytebardError(Exception):
    """Base exception class for all bytebardctl errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(BytebardError):
    """Exception raised for configuration-related errors."""
    pass


class AuthenticationError(BytebardError):
    """Exception raised when a request has no API key to send."""
    pass


class ValidationError(BytebardError):
    """Exception raised for local input validation errors."""
    pass


class TransportError(BytebardError):
    """Exception raised when the network call itself cannot complete."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            url: URL that was being requested
            details: Optional additional error details
        """
        super().__init__(message, details)
        self.url = url


class DecodeError(BytebardError):
    """Exception raised when a response body is not valid JSON."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        content: bytes = b"",
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code of the undecodable response
            content: Raw response body
        """
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code
        self.content = content
