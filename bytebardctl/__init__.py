"""ByteBard API client package.

A thin client for the ByteBard blogging API, plus a command-line tool for
managing posts, files and site reindexing from the terminal.
"""

__version__ = "0.1.0"
__description__ = "Client and command-line tool for the ByteBard blogging API"

# Re-export main classes for convenience
from .client import BytebardClient
from .config import ConfigManager, Profile
from .executor import RequestExecutor, build_headers
from .transport import RequestsTransport, Transport, TransportResponse
from .models import PostData
from .exceptions import (
    BytebardError,
    ConfigError,
    AuthenticationError,
    TransportError,
    DecodeError,
    ValidationError,
)

__all__ = [
    "__version__",
    "__description__",
    "BytebardClient",
    "ConfigManager",
    "Profile",
    "RequestExecutor",
    "build_headers",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
    "PostData",
    "BytebardError",
    "ConfigError",
    "AuthenticationError",
    "TransportError",
    "DecodeError",
    "ValidationError",
]
