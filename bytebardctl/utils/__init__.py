"""Utility modules for bytebardctl.

This package contains the CLI's client factory and error formatting helpers.
"""

from .client_factory import ClientFactory, get_client_and_formatter
from .exceptions import ApiFailure, BulkOperationError, check_response, format_error_for_user

__all__ = [
    "ClientFactory",
    "get_client_and_formatter",
    "ApiFailure",
    "BulkOperationError",
    "check_response",
    "format_error_for_user",
]
