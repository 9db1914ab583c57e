"""Client factory for CLI commands.

This module builds BytebardClient instances from the Typer context so
every command resolves profiles and environment variables the same way.
"""

from typing import Optional, Tuple

import typer
from rich.console import Console

from ..client import BytebardClient
from ..config import ConfigManager, Profile
from ..exceptions import ConfigError
from ..render import OutputFormatter


class ClientFactory:
    """Factory for creating configured BytebardClient instances."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the client factory.

        Args:
            console: Rich console instance for output
        """
        self.console = console or Console(stderr=True)

    def create_client_from_context(self, ctx: typer.Context) -> BytebardClient:
        """Create a BytebardClient from Typer context.

        Args:
            ctx: Typer context containing configuration

        Returns:
            Configured BytebardClient instance

        Raises:
            ConfigError: If no API key can be found
        """
        profile: Optional[Profile] = ctx.obj.get("profile")
        debug = ctx.obj.get("debug", False)
        timeout = ctx.obj.get("timeout")
        config_manager: Optional[ConfigManager] = ctx.obj.get("config_manager")

        if profile is None and config_manager is not None and config_manager.has_environment_config():
            if debug:
                self.console.print("[dim]Using environment variables for ByteBard connection[/dim]")
            profile = config_manager.get_environment_config()

        if profile is None:
            raise ConfigError(
                "No ByteBard configuration found. Please either:\n"
                "  1. Run 'bytebardctl config init' to set up a profile, or\n"
                "  2. Set the BYTEBARD_API_KEY environment variable"
            )

        if debug:
            self.console.print(f"[dim]Using profile: {profile.name}[/dim]")

        return BytebardClient(profile=profile, timeout=timeout, debug=debug)


def get_client_and_formatter(ctx: typer.Context) -> Tuple[BytebardClient, OutputFormatter]:
    """Get a client and the shared output formatter from context."""
    factory = ctx.obj.get("client_factory") or ClientFactory()
    client = factory.create_client_from_context(ctx)
    return client, ctx.obj["output_formatter"]
