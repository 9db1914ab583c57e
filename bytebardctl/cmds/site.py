"""Site-wide commands for the bytebardctl CLI."""

import json
from typing import List, Optional

import typer

from ..app import handle_exceptions
from ..client import blog_path
from ..output import emit, dry_run_notice
from ..utils.client_factory import get_client_and_formatter

app = typer.Typer()


@app.command()
@handle_exceptions
def reindex(
    ctx: typer.Context,
    urls: Optional[List[str]] = typer.Argument(None, help="URLs to reindex (default: the whole site)"),
) -> None:
    """Ask ByteBard to reindex the site or specific URLs.

    Examples:
        # Reindex everything
        bytebardctl site reindex

        # Reindex two pages
        bytebardctl site reindex https://blog.example.com/a https://blog.example.com/b
    """
    urls = urls or None
    body = json.dumps({"urls": urls}) if urls else None
    if dry_run_notice(ctx, "POST", blog_path("reindex"), body):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        result = client.reindex(urls)

    emit(ctx, result, title="Reindex")
