"""Typer application for the bytebardctl CLI.

The callback resolves global options once per invocation and stores them in
``ctx.obj``. Commands are wrapped with ``handle_exceptions`` so library
errors reach the user as one readable message and a non-zero exit code.
"""

import functools
import os
import sys
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console
from rich.traceback import install

from . import __version__
from .config import ConfigManager, Profile, ENV_API_KEY, ENV_API_URL
from .render import OutputFormatter, FORMATS
from .exceptions import BytebardError, ConfigError
from .utils.client_factory import ClientFactory
from .utils.exceptions import format_error_for_user

install(show_locals=False)

app = typer.Typer(
    name="bytebardctl",
    help="Command-line tool for the ByteBard blogging API",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Messages go to stderr so stdout stays parseable
console = Console(stderr=True)
output_formatter = OutputFormatter(Console())

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"bytebardctl {__version__}")
        raise typer.Exit()


def resolve_profile(config_manager: ConfigManager, name: Optional[str]) -> Optional[Profile]:
    """Pick the profile for this invocation.

    A named profile must exist. Without a name, the default profile is used
    unless BYTEBARD_API_KEY is set, in which case the client factory builds
    an environment profile later.
    """
    if name:
        return config_manager.get_profile(name)
    if config_manager.has_environment_config():
        return None
    try:
        return config_manager.get_default_profile()
    except ConfigError:
        return None


def print_debug_environment() -> None:
    console.print("[dim]Debug mode enabled[/dim]")
    console.print(f"[dim]  {ENV_API_URL}: {os.getenv(ENV_API_URL) or 'not set'}[/dim]")
    console.print(f"[dim]  {ENV_API_KEY}: {'set' if os.getenv(ENV_API_KEY) else 'not set'}[/dim]")


@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Configuration profile to use",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print requests and full error details",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be sent without calling the API",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (table, json, yaml)",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds",
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        envvar="BYTEBARDCTL_CONFIG_DIR",
        help="Configuration directory (default: ~/.bytebardctl)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """bytebardctl - manage a ByteBard blog from the command line.

    Examples:
        # List the first page of posts
        bytebardctl posts list --limit 10

        # Create a post without auto-publishing it
        bytebardctl posts create --title "My Post" --file post.md --no-autopost

        # Upload an image
        bytebardctl files upload cover.webp

        # Reindex the whole site
        bytebardctl site reindex
    """
    if output_format and output_format.lower() not in FORMATS:
        console.print(f"[red]Unknown output format: {output_format}. Choose from {', '.join(FORMATS)}[/red]")
        raise typer.Exit(EXIT_USAGE)

    try:
        config_manager = ConfigManager(config_dir)
        selected = resolve_profile(config_manager, profile)
    except ConfigError as e:
        console.print(f"[red]{format_error_for_user(e, debug)}[/red]")
        raise typer.Exit(EXIT_ERROR)

    ctx.ensure_object(dict)
    ctx.obj.update(
        debug=debug,
        dry_run=dry_run,
        output_format=output_format.lower() if output_format else None,
        timeout=timeout,
        console=console,
        config_manager=config_manager,
        output_formatter=output_formatter,
        client_factory=ClientFactory(console),
        profile=selected,
    )

    if debug:
        print_debug_environment()


def handle_exceptions(func):
    """Turn BytebardError and Ctrl-C into a message and an exit code."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BytebardError as e:
            obj = click.get_current_context().obj or {}
            debug = obj.get("debug", False)
            console.print(f"[red]{format_error_for_user(e, debug)}[/red]")
            if not debug and not isinstance(e, ConfigError):
                console.print("[dim]Run again with --debug for details[/dim]")
            raise typer.Exit(EXIT_ERROR)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted[/yellow]")
            raise typer.Exit(EXIT_INTERRUPTED)
    return wrapper


_registered = False


def register_commands() -> None:
    """Attach the command groups to ``app``. Safe to call more than once."""
    global _registered
    if _registered:
        return

    from .cmds import posts_app, files_app, site_app, config_app

    app.add_typer(posts_app, name="posts", help="List, create, update, import and remove posts")
    app.add_typer(files_app, name="files", help="List, upload and remove files")
    app.add_typer(site_app, name="site", help="Site-wide operations")
    app.add_typer(config_app, name="config", help="Manage configuration profiles")
    _registered = True


def cli():
    """Console script entry point."""
    register_commands()

    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    cli()
