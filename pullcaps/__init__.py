"""pullcaps - an opinionated async client for the Pushshift API."""

from .api import Filter
from .client import Client
from .config import BASE_URL, ClientConfig
from .core import (
    DataError,
    ProviderError,
    RateLimitError,
    Resource,
    SortOrder,
    SortType,
    ValidationError,
)
from .models import (
    Attrs,
    Author,
    Comment,
    Content,
    Page,
    PageMetadata,
    Post,
    Subreddit,
)
from .runtime import LazyRateLimiter, Quota, RateLimiter
from .runtime.chunking import BucketPolicy
from .runtime.rest import RESTTransport

__version__ = "0.2.0"

__all__ = [
    "BASE_URL",
    "Attrs",
    "Author",
    "BucketPolicy",
    "Client",
    "ClientConfig",
    "Comment",
    "Content",
    "DataError",
    "Filter",
    "LazyRateLimiter",
    "Page",
    "PageMetadata",
    "Post",
    "ProviderError",
    "Quota",
    "RESTTransport",
    "RateLimitError",
    "RateLimiter",
    "Resource",
    "SortOrder",
    "SortType",
    "Subreddit",
    "ValidationError",
]
