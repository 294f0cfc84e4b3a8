"""Core components."""

from .enums import Resource, SortOrder, SortType
from .exceptions import DataError, ProviderError, RateLimitError, ValidationError

__all__ = [
    "Resource",
    "SortOrder",
    "SortType",
    "DataError",
    "ProviderError",
    "RateLimitError",
    "ValidationError",
]
