"""Post model for the ByteBard API."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class PostData(BaseModel):
    """Fields of a post sent to create-post, update-post and import-posts.

    The API accepts fields beyond the documented ones, so extras are kept
    and forwarded. Only fields that were set end up in the request body.
    """

    model_config = ConfigDict(extra="allow")

    slug: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[Union[str, List[str]]] = None
    image: Optional[str] = None
    image_credit: Optional[str] = None
    author_name: Optional[str] = None
    author_picture: Optional[str] = None
    autopost: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        """Return the fields the caller set, extras included."""
        return self.model_dump(exclude_unset=True)
