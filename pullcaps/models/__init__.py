"""Data models for Pushshift content.

Architecture:
    All models are Pydantic v2 models and immutable (frozen=True). Content
    records are parsed from the flat wire format into nested attribute
    blocks so posts and comments share one ``attrs`` shape, which the
    retrieval engine reads its pagination cursor from.

Model Categories:
    - Content: Post, Comment (and the ``Content`` union)
    - Attribute blocks: Attrs, Author, Subreddit
    - Envelope: Page, PageMetadata
"""

from .content import Attrs, Author, Comment, Content, ContentBase, Post, Subreddit
from .page import Page, PageMetadata

__all__ = [
    "Attrs",
    "Author",
    "Comment",
    "Content",
    "ContentBase",
    "Page",
    "PageMetadata",
    "Post",
    "Subreddit",
]
