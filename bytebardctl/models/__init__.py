"""Data models for bytebardctl.

This package contains Pydantic records for the request side of the
ByteBard API: post fields and the query parameters of each endpoint.
Responses stay plain decoded JSON.
"""

from .post import PostData
from .query import (
    QueryModel,
    ListPostsQuery,
    ListFilesQuery,
    UploadFileQuery,
    PostLookupQuery,
    RemoveFileQuery,
)

__all__ = [
    "PostData",
    "QueryModel",
    "ListPostsQuery",
    "ListFilesQuery",
    "UploadFileQuery",
    "PostLookupQuery",
    "RemoveFileQuery",
]
