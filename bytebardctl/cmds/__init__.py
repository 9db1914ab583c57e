"""Command modules for the bytebardctl CLI.

This module exports all command groups (Typer apps) that can be registered
with the main application.
"""

from .posts import app as posts_app
from .files import app as files_app
from .site import app as site_app
from .config import app as config_app

__all__ = [
    "posts_app",
    "files_app",
    "site_app",
    "config_app",
]
