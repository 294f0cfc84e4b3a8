"""Post and comment data models.

Pushshift returns every record as one flat JSON object. The models below
regroup the flat fields into ``author``, ``subreddit`` and ``attrs`` blocks
shared by both content kinds.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import Resource


class Attrs(BaseModel):
    """Attributes common to posts and comments."""

    id: str = Field(..., min_length=1)
    score: int = 0
    permalink: str | None = None
    # Pagination cursor key; whole-second UTC.
    date: datetime = Field(..., alias="created_utc")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Author(BaseModel):
    """The author of a post or comment."""

    id: str | None = Field(default=None, alias="author_fullname")
    name: str = Field(..., alias="author")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Subreddit(BaseModel):
    """The community a post or comment belongs to."""

    id: str | None = Field(default=None, alias="subreddit_id")
    name: str = Field(..., alias="subreddit")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ContentBase(BaseModel):
    """Shared shape of a content record."""

    resource: ClassVar[Resource]

    author: Author
    subreddit: Subreddit
    attrs: Attrs

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _group_flat_record(cls, data: Any) -> Any:
        if isinstance(data, dict) and "attrs" not in data:
            return {**data, "author": data, "subreddit": data, "attrs": data}
        return data

    @property
    def id(self) -> str:
        return self.attrs.id

    @property
    def created(self) -> datetime:
        """Creation timestamp (the pagination cursor key)."""
        return self.attrs.date


class Post(ContentBase):
    """A single reddit post (submission)."""

    resource: ClassVar[Resource] = Resource.SUBMISSION

    title: str = ""
    # URL of the linked content.
    content_url: str = Field(..., alias="url")
    # URL of the comment page for this post.
    comment_url: str | None = Field(default=None, alias="full_link")
    # Body of a self-post.
    self_text: str | None = Field(default=None, alias="selftext")
    num_comments: int = 0


class Comment(ContentBase):
    """A single comment on a post."""

    resource: ClassVar[Resource] = Resource.COMMENT

    body: str
    parent_id: str
    link_id: str | None = None


Content = Post | Comment
