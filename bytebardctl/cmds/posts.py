"""Post management commands for the bytebardctl CLI.

This module provides commands for listing, reading, creating, updating,
importing and removing ByteBard posts.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from ..app import handle_exceptions
from ..client import blog_path
from ..exceptions import ValidationError
from ..models.post import PostData
from ..models.query import ListPostsQuery, PostLookupQuery
from ..output import emit, dry_run_notice
from ..utils.client_factory import get_client_and_formatter
from ..utils.exceptions import BulkOperationError

app = typer.Typer()

LIST_COLUMNS = ["id", "slug", "title"]

# The API rejects imports of more than 100 posts per call
IMPORT_BATCH_LIMIT = 100


def read_content(content: Optional[str], file: Optional[Path]) -> Optional[str]:
    """Return post content from --content or --file."""
    if file is None:
        return content
    try:
        return file.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"Cannot read {file}: {e}")


def load_posts_file(file: Path) -> List[Dict[str, Any]]:
    """Load posts to import from a JSON file.

    Accepts either a list of posts or an object with a ``posts`` list.
    """
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValidationError(f"Cannot read {file}: {e}")
    except ValueError as e:
        raise ValidationError(f"{file} is not valid JSON: {e}")

    if isinstance(data, dict):
        data = data.get("posts")
    if not isinstance(data, list) or not all(isinstance(post, dict) for post in data):
        raise ValidationError(f"{file} must contain a list of post objects")
    return data


@app.command("list")
@handle_exceptions
def list_posts(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", help="Number of posts per page"),
    page: Optional[int] = typer.Option(None, "--page", help="Page number"),
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page"),
) -> None:
    """List posts.

    Examples:
        # First page with the server's default size
        bytebardctl posts list

        # Second page of ten
        bytebardctl posts list --limit 10 --page 2

        # Everything, as JSON
        bytebardctl -o json posts list --all
    """
    if dry_run_notice(ctx, "GET", blog_path("list-posts", ListPostsQuery(limit=limit, page=page))):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        if all_pages:
            result = {"posts": list(client.iter_posts(limit=limit, start_page=page or 1))}
        else:
            result = client.list_posts(limit=limit, page=page)

    emit(ctx, result, columns=LIST_COLUMNS, title="Posts")


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    post_id: Optional[str] = typer.Argument(None, help="Post ID"),
    slug: Optional[str] = typer.Option(None, "--slug", help="Look the post up by slug instead"),
) -> None:
    """Get a post by ID or slug.

    Examples:
        bytebardctl posts get 64f1c2
        bytebardctl posts get --slug hello-world
    """
    if (post_id is None) == (slug is None):
        raise ValidationError("Pass either a post ID or --slug")

    query = PostLookupQuery(id=post_id) if post_id is not None else PostLookupQuery(slug=slug)
    if dry_run_notice(ctx, "GET", blog_path("get-post", query)):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        if post_id is not None:
            result = client.get_post_by_id(post_id)
        else:
            result = client.get_post_by_slug(slug)

    emit(ctx, result, title="Post")


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Post title"),
    content: Optional[str] = typer.Option(None, "--content", help="Post content"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read content from file"),
    slug: Optional[str] = typer.Option(None, "--slug", help="Post slug"),
    description: Optional[str] = typer.Option(None, "--description", help="Post description"),
    keywords: Optional[str] = typer.Option(None, "--keywords", help="Comma-separated keywords"),
    image: Optional[str] = typer.Option(None, "--image", help="Cover image URL or file name"),
    image_credit: Optional[str] = typer.Option(None, "--image-credit", help="Cover image credit"),
    author_name: Optional[str] = typer.Option(None, "--author-name", help="Author name"),
    author_picture: Optional[str] = typer.Option(None, "--author-picture", help="Author picture URL"),
    no_autopost: bool = typer.Option(False, "--no-autopost", help="Do not publish automatically"),
) -> None:
    """Create a new post.

    Examples:
        # Create a post from a file
        bytebardctl posts create --title "From File" --file post.md

        # Create without auto-publishing
        bytebardctl posts create --title "Draft" --content "Hi" --no-autopost
    """
    fields = {
        "title": title,
        "content": read_content(content, file),
        "slug": slug,
        "description": description,
        "keywords": keywords,
        "image": image,
        "image_credit": image_credit,
        "author_name": author_name,
        "author_picture": author_picture,
    }
    post = PostData(**{key: value for key, value in fields.items() if value is not None})

    if dry_run_notice(ctx, "POST", blog_path("create-post"), post.to_payload()):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        result = client.create_post(post, disable_autopost=no_autopost)

    emit(ctx, result, title="Created Post")


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    post_id: str = typer.Argument(..., help="Post ID"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", help="New content"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read new content from file"),
    slug: Optional[str] = typer.Option(None, "--slug", help="New slug"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    keywords: Optional[str] = typer.Option(None, "--keywords", help="New comma-separated keywords"),
    image: Optional[str] = typer.Option(None, "--image", help="New cover image"),
) -> None:
    """Update an existing post.

    Examples:
        bytebardctl posts update 64f1c2 --title "Better Title"
        bytebardctl posts update 64f1c2 --file post.md
    """
    fields = {
        "title": title,
        "content": read_content(content, file),
        "slug": slug,
        "description": description,
        "keywords": keywords,
        "image": image,
    }
    changes = {key: value for key, value in fields.items() if value is not None}
    if not changes:
        raise ValidationError("Nothing to update. Pass at least one field option.")

    if dry_run_notice(ctx, "POST", blog_path("update-post"), {"id": post_id, **changes}):
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        result = client.update_post(post_id, PostData(**changes))

    emit(ctx, result, title="Update")


@app.command("import")
@handle_exceptions
def import_posts(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with a list of posts"),
    batch_size: int = typer.Option(
        IMPORT_BATCH_LIMIT,
        "--batch-size",
        min=1,
        max=IMPORT_BATCH_LIMIT,
        help="Posts sent per request",
    ),
) -> None:
    """Import posts from a JSON file, in batches.

    Examples:
        bytebardctl posts import export.json
        bytebardctl posts import export.json --batch-size 25
    """
    posts = load_posts_file(file)
    batches = [posts[i:i + batch_size] for i in range(0, len(posts), batch_size)]

    if ctx.obj["dry_run"]:
        ctx.obj["console"].print(
            f"[yellow]DRY RUN: Would import {len(posts)} posts in {len(batches)} "
            f"request(s) to {blog_path('import-posts')}[/yellow]"
        )
        return

    client, _ = get_client_and_formatter(ctx)
    inserted = 0
    failures = []

    with client, Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=ctx.obj["console"],
        transient=True,
    ) as progress:
        task = progress.add_task("Importing posts", total=len(posts))

        for index, batch in enumerate(batches):
            result = client.import_posts(batch)
            if isinstance(result, dict) and result.get("success") is False:
                failures.append({"batch": index, "error": result.get("error")})
            elif isinstance(result, dict):
                inserted += int(result.get("inserted") or 0)
            progress.update(task, advance=len(batch))

    if failures:
        raise BulkOperationError(
            f"{len(failures)} of {len(batches)} batches were rejected",
            accepted_batches=len(batches) - len(failures),
            rejected_batches=len(failures),
            failures=failures,
        )

    emit(
        ctx,
        {"success": True, "batches": len(batches), "inserted": inserted},
        title="Import",
    )


@app.command("delete")
@handle_exceptions
def delete(
    ctx: typer.Context,
    post_id: str = typer.Argument(..., help="Post ID"),
    force: bool = typer.Option(False, "--force", help="Delete without confirmation"),
) -> None:
    """Remove a post.

    Examples:
        bytebardctl posts delete 64f1c2
        bytebardctl posts delete 64f1c2 --force
    """
    if dry_run_notice(ctx, "DELETE", blog_path("remove-post", PostLookupQuery(id=post_id))):
        return

    if not force and not typer.confirm(f"Are you sure you want to delete post '{post_id}'?"):
        ctx.obj["console"].print("[yellow]Delete cancelled[/yellow]")
        return

    client, _ = get_client_and_formatter(ctx)
    with client:
        result = client.remove_post(post_id)

    emit(ctx, result, title="Delete")
