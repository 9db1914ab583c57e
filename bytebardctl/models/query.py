"""Query parameter records for ByteBard API endpoints.

Each endpoint that takes query parameters has its own record. Values are
not validated: whatever the caller passes is turned into text and sent, and
the API decides whether it is acceptable. Rendering keeps the declared field
order, uses the wire name of each field and drops parameters left as None.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class QueryModel(BaseModel):
    """Base class for query parameter records."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_pairs(self) -> List[Tuple[str, str]]:
        """Return ``(key, value)`` pairs ready for URL encoding.

        A list or tuple value repeats its key once per item.
        """
        pairs = []
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue

            key = field.alias or name
            values = value if isinstance(value, (list, tuple)) else [value]
            pairs.extend((key, _format_value(item)) for item in values)
        return pairs


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ListPostsQuery(QueryModel):
    """Parameters of list-posts."""

    limit: Optional[Any] = None
    page: Optional[Any] = None


class ListFilesQuery(QueryModel):
    """Parameters of list-files."""

    folder: Optional[Any] = None
    limit: Optional[Any] = None
    next_file: Optional[Any] = Field(default=None, alias="nextFile")


class UploadFileQuery(QueryModel):
    """Parameters of upload-file."""

    file_name: Any = Field(alias="fileName")


class PostLookupQuery(QueryModel):
    """Parameters of get-post and remove-post: one of id or slug."""

    id: Optional[Any] = None
    slug: Optional[Any] = None


class RemoveFileQuery(QueryModel):
    """Parameters of remove-file."""

    folder: Optional[Any] = None
    name: Optional[Any] = None
