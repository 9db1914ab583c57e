"""Profile commands for the bytebardctl CLI.

Profiles are stored by ConfigManager under the configuration directory.
These commands only add, switch, remove and inspect them.
"""

import os
from typing import Any, Dict, Optional

import typer
from rich.prompt import Prompt
from rich.table import Table

from ..app import handle_exceptions
from ..client import BytebardClient
from ..config import DEFAULT_TIMEOUT, ENV_API_KEY, ENV_API_URL, Profile
from ..executor import DEFAULT_BASE_URL, mask_key
from ..exceptions import BytebardError

app = typer.Typer()

PROFILE_COLUMNS = ["name", "base_url", "timeout", "active"]


def check_connection(profile: Profile) -> str:
    """List a single post with the profile and describe the outcome."""
    try:
        with BytebardClient(profile=profile) as client:
            result = client.list_posts(limit=1)
    except BytebardError as e:
        return f"[yellow]⚠ Could not reach ByteBard: {e.message}[/yellow]"

    if isinstance(result, dict) and result.get("success") is False:
        return f"[yellow]⚠ ByteBard rejected the key: {result.get('error')}[/yellow]"
    return "[green]✓ API key accepted[/green]"


@app.command()
@handle_exceptions
def init(
    ctx: typer.Context,
    profile_name: str = typer.Option("default", "--name", help="Profile name"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="ByteBard API key (prompted if omitted)"),
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="API base URL"),
    timeout: int = typer.Option(DEFAULT_TIMEOUT, "--request-timeout", help="Request timeout in seconds"),
    test_connection: bool = typer.Option(False, "--test", help="List one post to check the key"),
    force: bool = typer.Option(False, "--force", help="Replace a profile with the same name"),
) -> None:
    """Save an API key as a named profile.

    Examples:
        # Prompt for the key
        bytebardctl config init

        # Non-interactive setup of a named profile
        bytebardctl config init --name work --api-key "$KEY"
    """
    manager = ctx.obj["config_manager"]
    console = ctx.obj["console"]

    if ctx.obj["dry_run"]:
        source = "from --api-key" if api_key else "from a prompt"
        console.print(f"[yellow]DRY RUN: Would save profile '{profile_name}' for {base_url}, key {source}[/yellow]")
        return

    api_key = api_key or Prompt.ask("ByteBard API key", password=True, show_default=False)
    profile = manager.create_profile(
        profile_name,
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        overwrite=force,
    )

    if test_connection:
        console.print(check_connection(profile))

    suffix = " and set as default" if profile.active else ""
    console.print(f"[green]Profile '{profile_name}' saved{suffix}.[/green]")


@app.command("list-profiles")
@handle_exceptions
def list_profiles(ctx: typer.Context) -> None:
    """Show every profile, without API keys.

    Examples:
        bytebardctl config list-profiles
        bytebardctl -o json config list-profiles
    """
    manager = ctx.obj["config_manager"]
    profiles = manager.list_profiles()

    if not profiles:
        ctx.obj["console"].print("[yellow]No profiles yet. Create one with 'bytebardctl config init'.[/yellow]")
        return

    output_format = ctx.obj["output_formatter"].determine_format(ctx.obj["output_format"])
    data: Any = profiles
    if output_format != "table":
        data = {"profiles": profiles, "default_profile": manager.get_active_profile()}

    ctx.obj["output_formatter"].render(data, format=output_format, columns=PROFILE_COLUMNS, title="Profiles")


@app.command("set-default")
@handle_exceptions
def set_default(
    ctx: typer.Context,
    profile_name: str = typer.Argument(..., help="Profile to use when --profile is not given"),
) -> None:
    """Choose the default profile."""
    if ctx.obj["dry_run"]:
        ctx.obj["console"].print(f"[yellow]DRY RUN: Would make '{profile_name}' the default profile[/yellow]")
        return

    ctx.obj["config_manager"].set_active_profile(profile_name)
    ctx.obj["console"].print(f"[green]'{profile_name}' is now the default profile.[/green]")


@app.command("delete")
@handle_exceptions
def delete_profile(
    ctx: typer.Context,
    profile_name: str = typer.Argument(..., help="Profile to delete"),
    force: bool = typer.Option(False, "--force", help="Skip the confirmation prompt"),
) -> None:
    """Delete a profile and its stored key."""
    manager = ctx.obj["config_manager"]
    console = ctx.obj["console"]

    was_default = manager.get_profile(profile_name).name == manager.get_active_profile()

    if ctx.obj["dry_run"]:
        console.print(f"[yellow]DRY RUN: Would delete profile '{profile_name}'[/yellow]")
        return

    if not force and not typer.confirm(f"Delete profile '{profile_name}' and its API key?"):
        console.print("[yellow]Delete cancelled[/yellow]")
        return

    manager.delete_profile(profile_name)
    console.print(f"[green]Profile '{profile_name}' deleted.[/green]")
    if was_default:
        console.print("[yellow]No default profile now. Pick one with 'bytebardctl config set-default'.[/yellow]")


@app.command("show")
@handle_exceptions
def show_config(ctx: typer.Context) -> None:
    """Show where configuration lives and what is active."""
    manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    env_key = os.getenv(ENV_API_KEY)
    status: Dict[str, Any] = {
        "config_file": str(manager.config_file),
        "config_exists": manager.config_file.exists(),
        "active_profile": manager.get_active_profile(),
        "environment_variables": {
            ENV_API_KEY: mask_key(env_key) if env_key else None,
            ENV_API_URL: os.getenv(ENV_API_URL),
        },
    }

    output_format = formatter.determine_format(ctx.obj["output_format"])
    if output_format != "table":
        formatter.render(status, format=output_format)
        return

    table = Table(title="bytebardctl configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Config file", status["config_file"])
    table.add_row("Exists", "✓" if status["config_exists"] else "✗")
    table.add_row("Default profile", status["active_profile"] or "[dim]none[/dim]")
    for name, value in status["environment_variables"].items():
        table.add_row(name, value or "[dim]not set[/dim]")

    formatter.console.print(table)
