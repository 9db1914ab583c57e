"""Command output helpers.

Commands hand their API responses to ``emit`` so every command honours
the global ``--output`` option the same way.
"""

from typing import Any, List, Optional

import typer

from .utils.exceptions import check_response


def emit(
    ctx: typer.Context,
    data: Any,
    columns: Optional[List[str]] = None,
    title: Optional[str] = None,
) -> None:
    """Render a decoded API response, failing on ``success: false``.

    Args:
        ctx: Typer context holding the formatter and output format
        data: Decoded JSON response
        columns: Table columns to show
        title: Table title
    """
    check_response(data)

    formatter = ctx.obj["output_formatter"]
    formatter.render(data, format=ctx.obj.get("output_format"), columns=columns, title=title)


def dry_run_notice(ctx: typer.Context, method: str, path: str, body: Any = None) -> bool:
    """Print the request a command would send when --dry-run is active.

    Returns:
        True if the command should stop without calling the API
    """
    if not ctx.obj.get("dry_run"):
        return False

    console = ctx.obj["console"]
    console.print(f"[yellow]DRY RUN: Would send {method} {path}[/yellow]")
    if body is not None:
        console.print(f"  Body: {body}")
    return True
