"""ByteBard API client.

This module provides the client for the ByteBard blogging API. Each method
maps to one endpoint and performs a single request; pagination cursors and
page numbers are always passed in by the caller, never stored.
"""

import json
import mimetypes
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, Iterator, List, Mapping, Optional, Union
from urllib.parse import urlencode

from .config import DEFAULT_TIMEOUT, Profile
from .executor import API_KEY_HEADER, DEFAULT_BASE_URL, RequestExecutor
from .models.post import PostData
from .models.query import (
    QueryModel,
    ListPostsQuery,
    ListFilesQuery,
    UploadFileQuery,
    PostLookupQuery,
    RemoveFileQuery,
)
from .transport import Body, RequestsTransport, Transport

PostInput = Union[PostData, Mapping[str, Any]]


def blog_path(action: str, query: Optional[QueryModel] = None) -> str:
    """Build the relative path of a blog endpoint.

    Args:
        action: Endpoint action, e.g. ``list-posts``
        query: Query parameters appended after the action

    Returns:
        Path such as ``/blog?action=list-posts&limit=10&page=2``
    """
    path = f"/blog?action={action}"
    if query is not None:
        pairs = query.to_pairs()
        if pairs:
            path += "&" + urlencode(pairs)
    return path


def post_payload(data: Optional[PostInput]) -> Dict[str, Any]:
    """Copy post fields into a new dict so the caller's data is never mutated."""
    if data is None:
        return {}
    if isinstance(data, PostData):
        return data.to_payload()
    return dict(data)


class BytebardClient:
    """Client for ByteBard blog operations."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        *,
        transport: Optional[Transport] = None,
        executor: Optional[RequestExecutor] = None,
        profile: Optional[Profile] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        debug: bool = False,
    ) -> None:
        """Initialize the client.

        Settings resolve in order: explicit arguments, then the profile, then
        defaults. The environment is never read here; use
        ConfigManager.get_environment_config for a profile built from
        BYTEBARD_API_KEY. A missing key is not an error here; every request
        fails with AuthenticationError instead.

        Args:
            api_key: ByteBard API key
            options: Free-form options kept for the client's lifetime
            transport: HTTP transport (ignored when executor is given)
            executor: Prebuilt request executor
            profile: Configuration profile
            base_url: API base URL
            timeout: Request timeout in seconds for the default transport
            debug: Print request details to stderr
        """
        self._api_key = (
            api_key
            or (profile.api_key if profile else None)
        )
        self._options = dict(options or {})

        resolved_url = (
            base_url
            or (profile.base_url if profile else DEFAULT_BASE_URL)
        )
        resolved_timeout = timeout or (profile.timeout if profile else DEFAULT_TIMEOUT)

        if executor is None:
            executor = RequestExecutor(
                transport=transport or RequestsTransport(timeout=resolved_timeout),
                base_url=resolved_url,
                debug=debug,
            )
        self.executor = executor

    @property
    def api_key(self) -> Optional[str]:
        """API key sent with every request."""
        return self._api_key

    @property
    def options(self) -> Dict[str, Any]:
        """Options supplied at construction."""
        return dict(self._options)

    def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> Any:
        """Make an authenticated request to the API.

        Caller headers are laid over the API key header.

        Args:
            path: Path relative to the API base URL
            method: HTTP method
            headers: Extra request headers
            body: Request body

        Returns:
            Decoded JSON response
        """
        merged: Dict[str, str] = {}
        if self._api_key:
            merged[API_KEY_HEADER] = self._api_key
        if headers:
            merged.update(headers)

        return self.executor.execute(path, method=method, headers=merged, body=body)

    # Posts
    def list_posts(self, limit: Optional[int] = None, page: Optional[int] = None) -> Any:
        """Return a page of posts for the account.

        Args:
            limit: Number of posts returned
            page: Page number

        Returns:
            ``{"posts": [...]}``
        """
        return self.request(blog_path("list-posts", ListPostsQuery(limit=limit, page=page)))

    def iter_posts(self, limit: Optional[int] = None, start_page: int = 1) -> Iterator[Dict[str, Any]]:
        """Yield posts page by page until a page comes back empty."""
        page = start_page
        while True:
            response = self.list_posts(limit=limit, page=page)
            posts = response.get("posts") if isinstance(response, dict) else None
            if not posts:
                break

            yield from posts
            page += 1

    def get_post_by_id(self, id: Union[str, int]) -> Any:
        """Return the post with the given ID."""
        return self.request(blog_path("get-post", PostLookupQuery(id=id)))

    def get_post_by_slug(self, slug: str) -> Any:
        """Return the post with the given slug."""
        return self.request(blog_path("get-post", PostLookupQuery(slug=slug)))

    def create_post(self, data: Optional[PostInput] = None, disable_autopost: bool = False) -> Any:
        """Create a new post.

        Args:
            data: Post fields (slug, title, content, description, keywords,
                image, image_credit, author_name, author_picture, ...)
            disable_autopost: Send ``autopost: false`` so the post is not
                published automatically

        Returns:
            The created post
        """
        payload = post_payload(data)
        if disable_autopost:
            payload["autopost"] = False

        return self.request(
            blog_path("create-post"),
            method="POST",
            body=json.dumps(payload),
        )

    def update_post(self, id: Union[str, int], data: Optional[PostInput] = None) -> Any:
        """Update an existing post.

        Fields in ``data`` are laid over ``id``.

        Returns:
            ``{"success": true}``
        """
        payload: Dict[str, Any] = {"id": id}
        payload.update(post_payload(data))

        return self.request(
            blog_path("update-post"),
            method="POST",
            body=json.dumps(payload),
        )

    def import_posts(self, posts: List[PostInput]) -> Any:
        """Import a list of posts.

        The API accepts at most 100 posts per call and rejects larger
        batches itself.

        Returns:
            ``{"success": true, "error": "no errors", "inserted": n}``
        """
        return self.request(
            blog_path("import-posts"),
            method="POST",
            body=json.dumps({"posts": [post_payload(post) for post in posts]}),
        )

    def remove_post(self, id: Union[str, int]) -> Any:
        """Remove a post."""
        return self.request(
            blog_path("remove-post", PostLookupQuery(id=id)),
            method="DELETE",
        )

    # Files
    def list_files(
        self,
        folder: Optional[str] = None,
        limit: Optional[int] = None,
        next_file: Optional[str] = None,
    ) -> Any:
        """Return a page of files for the account.

        Args:
            folder: ``images``, ``users`` or ``icons``
            limit: Number of files returned
            next_file: ``nextFile`` cursor from the previous call

        Returns:
            ``{"files": [...], "nextFile": "..."}``
        """
        query = ListFilesQuery(folder=folder, limit=limit, next_file=next_file)
        return self.request(blog_path("list-files", query))

    def iter_files(self, folder: Optional[str] = None, limit: Optional[int] = None) -> Iterator[Any]:
        """Yield files across pages by following the ``nextFile`` cursor."""
        next_file = None
        while True:
            response = self.list_files(folder=folder, limit=limit, next_file=next_file)
            if not isinstance(response, dict):
                break

            files = response.get("files") or []
            yield from files

            next_file = response.get("nextFile")
            if not files or not next_file:
                break

    def upload_file(
        self,
        file_name: str,
        stream: Union[bytes, BinaryIO, Iterable[bytes]],
        file_length: int,
        content_type: Optional[str] = None,
    ) -> Any:
        """Upload a WebP or JPEG file as a raw body. Multipart is not supported.

        Args:
            file_name: Name to store the file under
            stream: File contents, an open binary stream or an iterable of chunks
            file_length: Total size in bytes
            content_type: Overrides the default JSON content type

        Returns:
            ``{"success": true, "fileName": "..."}``
        """
        headers = {"Content-Length": str(file_length)}
        if content_type:
            headers["Content-Type"] = content_type

        return self.request(
            blog_path("upload-file", UploadFileQuery(file_name=file_name)),
            method="POST",
            headers=headers,
            body=stream,
        )

    def upload_path(self, path: Union[str, Path], file_name: Optional[str] = None) -> Any:
        """Upload a local file, sizing and typing it from the filesystem."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(str(path))

        with open(path, "rb") as stream:
            return self.upload_file(
                file_name or path.name,
                stream,
                path.stat().st_size,
                content_type=content_type,
            )

    def remove_file(self, folder: str, name: str) -> Any:
        """Remove a file."""
        return self.request(
            blog_path("remove-file", RemoveFileQuery(folder=folder, name=name)),
            method="DELETE",
        )

    # Site
    def reindex(self, urls: Optional[List[str]] = None) -> Any:
        """Reindex the site.

        Args:
            urls: URLs to reindex. If None, all site URLs are reindexed.
        """
        body = json.dumps({"urls": list(urls)}) if urls is not None else None
        return self.request(blog_path("reindex"), method="POST", body=body)

    def close(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self.executor.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "BytebardClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # camelCase aliases
    listPosts = list_posts
    listFiles = list_files
    uploadFile = upload_file
    getPostByID = get_post_by_id
    getPostBySlug = get_post_by_slug
    createPost = create_post
    updatePost = update_post
    importPosts = import_posts
    removePost = remove_post
    removeFile = remove_file
