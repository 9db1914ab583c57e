"""CLI-level exceptions and user-facing error messages."""

from typing import Any, Dict, List, Optional

from ..exceptions import (
    BytebardError,
    AuthenticationError,
    ConfigError,
    DecodeError,
    TransportError,
)

# Failures listed in debug output before the rest are summarized
MAX_LISTED_FAILURES = 5


class ApiFailure(BytebardError):
    """Raised by the CLI when the API answers ``{"success": false}``.

    The client itself never raises this: it returns the payload unchanged.
    """

    def __init__(self, message: str, response: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, {"response": response or {}})
        self.response = response or {}


class BulkOperationError(BytebardError):
    """Raised when some batches of an import were rejected."""

    def __init__(
        self,
        message: str,
        accepted_batches: int = 0,
        rejected_batches: int = 0,
        failures: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            accepted_batches: Batches the API accepted
            rejected_batches: Batches the API rejected
            failures: One ``{"batch": index, "error": ...}`` entry per rejection
        """
        super().__init__(message, {"failures": failures or []})
        self.accepted_batches = accepted_batches
        self.rejected_batches = rejected_batches
        self.failures = failures or []

    def get_summary(self) -> str:
        total = self.accepted_batches + self.rejected_batches
        return f"{self.accepted_batches}/{total} batches accepted, {self.rejected_batches} rejected"


def check_response(response: Any) -> Any:
    """Raise ApiFailure if a decoded response reports ``success: false``."""
    if isinstance(response, dict) and response.get("success") is False:
        raise ApiFailure(str(response.get("error") or "Request was not successful"), response)
    return response


def _bulk_message(error: BulkOperationError, debug: bool) -> str:
    lines = [f"Import incomplete: {error.message}", error.get_summary()]
    if debug and error.failures:
        lines.append("Rejected batches:")
        lines.extend(f"  - batch {f.get('batch')}: {f.get('error')}" for f in error.failures[:MAX_LISTED_FAILURES])
        hidden = len(error.failures) - MAX_LISTED_FAILURES
        if hidden > 0:
            lines.append(f"  ... and {hidden} more")
    return "\n".join(lines)


def _transport_message(error: TransportError, debug: bool) -> str:
    text = f"Connection error: {error.message}"
    if debug and error.url:
        text += f"\nURL: {error.url}"
    return text


def _decode_message(error: DecodeError, debug: bool) -> str:
    text = f"Invalid response: {error.message}"
    if debug and error.content:
        text += f"\nBody: {error.content[:200]!r}"
    return text


def _api_message(error: ApiFailure, debug: bool) -> str:
    text = f"API error: {error.message}"
    if debug:
        text += f"\nResponse: {error.response}"
    return text


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Describe an error in one or more lines for the terminal.

    Debug mode adds the URL, raw body, full response or exception type,
    depending on the error.
    """
    if isinstance(error, BulkOperationError):
        return _bulk_message(error, debug)
    if isinstance(error, AuthenticationError):
        return (
            f"Authentication error: {error.message}\n"
            "Run 'bytebardctl config init' or set BYTEBARD_API_KEY"
        )
    if isinstance(error, TransportError):
        return _transport_message(error, debug)
    if isinstance(error, DecodeError):
        return _decode_message(error, debug)
    if isinstance(error, ApiFailure):
        return _api_message(error, debug)
    if isinstance(error, ConfigError):
        return f"Configuration error: {error.message}"

    text = f"Error: {error}"
    if debug:
        text += f"\nType: {type(error).__name__}"
    return text
