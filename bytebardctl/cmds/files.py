"""File management commands for the bytebardctl CLI.

This module provides commands for listing, uploading and removing files
stored in a ByteBard account (images, users and icons folders).
"""

import mimetypes
from pathlib import Path
from typing import Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..app import handle_exceptions
from ..client import blog_path
from ..exceptions import ValidationError
from ..models.query import ListFilesQuery, UploadFileQuery, RemoveFileQuery
from ..output import emit, dry_run_notice
from ..utils.client_factory import get_client_and_formatter

app = typer.Typer()

FOLDERS = ("images", "users", "icons")
UPLOAD_TYPES = {"image/webp", "image/jpeg"}


def validate_folder(folder: Optional[str]) -> Optional[str]:
    if folder is not None and folder not in FOLDERS:
        raise ValidationError(f"Unknown folder '{folder}'. Choose from {', '.join(FOLDERS)}")
    return folder


def validate_upload_file(file_path: Path) -> None:
    """Check the file exists and is a WebP or JPEG image."""
    if not file_path.is_file():
        raise ValidationError(f"File not found: {file_path}")

    mime_type, _ = mimetypes.guess_type(str(file_path))
    if mime_type not in UPLOAD_TYPES:
        raise ValidationError(f"Unsupported file type: {mime_type or file_path.suffix}. Upload WebP or JPEG.")


@app.command("list")
@handle_exceptions
def list_files(
    ctx: typer.Context,
    folder: Optional[str] = typer.Option(None, "--folder", help="images, users or icons"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Number of files per page"),
    next_file: Optional[str] = typer.Option(None, "--next-file", help="Cursor from a previous page"),
    all_pages: bool = typer.Option(False, "--all", help="Follow the cursor through every page"),
) -> None:
    """List files.

    Examples:
        # First page of images
        bytebardctl files list --folder images

        # Continue from a previous page
        bytebardctl files list --folder images --next-file "images/b.webp"
    """
    validate_folder(folder)
    query = ListFilesQuery(folder=folder, limit=limit, next_file=next_file)
    if dry_run_notice(ctx, "GET", blog_path("list-files", query)):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        if all_pages:
            result = {"files": list(client.iter_files(folder=folder, limit=limit))}
        else:
            result = client.list_files(folder=folder, limit=limit, next_file=next_file)

    emit(ctx, result, title="Files")

    if not all_pages and isinstance(result, dict) and result.get("nextFile"):
        ctx.obj["console"].print(f"[dim]More files: --next-file {result['nextFile']}[/dim]")


@app.command()
@handle_exceptions
def upload(
    ctx: typer.Context,
    file_path: Path = typer.Argument(..., help="WebP or JPEG file"),
    name: Optional[str] = typer.Option(None, "--name", help="File name to store (default: local name)"),
) -> None:
    """Upload a WebP or JPEG file.

    Examples:
        bytebardctl files upload cover.webp
        bytebardctl files upload photo.jpg --name hero.jpg
    """
    validate_upload_file(file_path)
    file_name = name or file_path.name

    if dry_run_notice(ctx, "POST", blog_path("upload-file", UploadFileQuery(file_name=file_name))):
        ctx.obj["console"].print(f"  Size: {file_path.stat().st_size:,} bytes")
        return

    client, _ = get_client_and_formatter(ctx)
    with client, Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=ctx.obj["console"],
        transient=True,
    ) as progress:
        progress.add_task(f"Uploading {file_path.name}...", total=None)
        result = client.upload_path(file_path, file_name=file_name)

    emit(ctx, result, title="Uploaded File")


@app.command("delete")
@handle_exceptions
def delete(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="images, users or icons"),
    name: str = typer.Argument(..., help="File name"),
    force: bool = typer.Option(False, "--force", help="Delete without confirmation"),
) -> None:
    """Remove a file.

    Examples:
        bytebardctl files delete images old.webp --force
    """
    validate_folder(folder)
    if dry_run_notice(ctx, "DELETE", blog_path("remove-file", RemoveFileQuery(folder=folder, name=name))):
        return

    if not force and not typer.confirm(f"Are you sure you want to delete '{folder}/{name}'?"):
        ctx.obj["console"].print("[yellow]Delete cancelled[/yellow]")
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        result = client.remove_file(folder, name)

    emit(ctx, result, title="Delete")
