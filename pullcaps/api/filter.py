"""Fluent query filter for the search endpoints.

Architecture:
    ``Filter`` is an immutable value with chainable setters. Each setter
    returns a new Filter, so a filter can be shared between queries and
    cloned per time bucket by the retrieval engine without copying by hand.

Design Decisions:
    - Whole seconds: ``before``/``after`` are normalized to second-precision
      UTC datetimes on the way in and serialized as integer epoch seconds.
    - Eager validation: invalid values raise ``ValidationError`` from the
      setter, never later during retrieval.
    - Result cap is client-side: ``limit`` bounds how many items a query
      yields, it is not sent to the server (the page size is).

Example:
    >>> query = (Filter()
    ...     .subreddit("askreddit")
    ...     .after(datetime(2020, 1, 1, tzinfo=UTC))
    ...     .sort_type(SortType.SCORE)
    ...     .limit(100))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from ..core.enums import SortType
from ..core.exceptions import ValidationError

__all__ = ["Filter", "to_epoch_seconds", "to_utc_datetime"]


def to_utc_datetime(value: datetime | int | float) -> datetime:
    """Normalize a timestamp to a whole-second, timezone-aware UTC datetime.

    Args:
        value: Aware or naive datetime (naive is taken as UTC), or epoch seconds

    Returns:
        UTC datetime with microseconds dropped

    Raises:
        ValidationError: If the value is not a datetime or a number
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if isinstance(value, int | float):
        return datetime.fromtimestamp(int(value), tz=UTC)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(microsecond=0)
    raise ValidationError(f"Invalid timestamp: {value!r}")


def to_epoch_seconds(value: datetime) -> int:
    """Serialize a datetime as integer epoch seconds."""
    return int(to_utc_datetime(value).timestamp())


@dataclass(frozen=True)
class Filter:
    """Narrows a search query down by author, community and time range."""

    author_name: str | None = None
    subreddit_name: str | None = None
    before_time: datetime | None = None
    after_time: datetime | None = None
    sort_key: SortType | None = None
    max_results: int | None = None

    def author(self, author: str) -> Filter:
        """Only match content by ``author``."""
        author = author.strip() if isinstance(author, str) else author
        if not author or not isinstance(author, str):
            raise ValidationError("author must be a non-empty string")
        return replace(self, author_name=author)

    def subreddit(self, subreddit: str) -> Filter:
        """Only match content posted in ``subreddit``."""
        subreddit = subreddit.strip() if isinstance(subreddit, str) else subreddit
        if not subreddit or not isinstance(subreddit, str):
            raise ValidationError("subreddit must be a non-empty string")
        return replace(self, subreddit_name=subreddit)

    def before(self, before: datetime | int | float | None) -> Filter:
        """Only match content created strictly before ``before``.

        Passing ``None`` clears the bound.
        """
        return replace(self, before_time=None if before is None else to_utc_datetime(before))

    def after(self, after: datetime | int | float | None) -> Filter:
        """Only match content created strictly after ``after``.

        Passing ``None`` clears the bound.
        """
        return replace(self, after_time=None if after is None else to_utc_datetime(after))

    def sort_type(self, sort_type: SortType | str) -> Filter:
        """Sort matches by ``sort_type`` instead of creation time."""
        try:
            key = SortType(sort_type)
        except ValueError as e:
            raise ValidationError(f"Unknown sort type: {sort_type!r}") from e
        return replace(self, sort_key=key)

    def limit(self, limit: int | None) -> Filter:
        """Stop a query after ``limit`` items. ``None`` removes the cap."""
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
            raise ValidationError(f"limit must be a positive integer, got {limit!r}")
        return replace(self, max_results=limit)

    @property
    def effective_sort(self) -> SortType:
        return self.sort_key or SortType.CREATED_UTC

    @property
    def sorts_by_creation(self) -> bool:
        """Whether the query is ordered by creation time (partitionable)."""
        return self.effective_sort is SortType.CREATED_UTC

    def to_params(self) -> dict[str, Any]:
        """Serialize the server-side part of the filter to query parameters."""
        params: dict[str, Any] = {}
        if self.author_name is not None:
            params["author"] = self.author_name
        if self.subreddit_name is not None:
            params["subreddit"] = self.subreddit_name
        if self.before_time is not None:
            params["before"] = to_epoch_seconds(self.before_time)
        if self.after_time is not None:
            params["after"] = to_epoch_seconds(self.after_time)
        if self.sort_key is not None:
            params["sort_type"] = self.sort_key.value
        return params
