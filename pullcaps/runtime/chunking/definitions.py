"""Partitioning metadata definitions and policy structures.

This module defines the data structures used to describe how a query's
time span is split into buckets and retrieved in parallel.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ...api.filter import Filter

# Items requested per page fetch.
BATCH_SIZE = 25
# Target number of matches per bucket.
DESIRED_BUCKET_VOLUME = 25
MAX_BUCKETS = 200

_ONE_SECOND = timedelta(seconds=1)


@dataclass(frozen=True)
class BucketPolicy:
    """Partitioning policy.

    Attributes:
        desired_volume: Matches each bucket should hold, assuming matches are
            spread uniformly over the span (an approximation)
        max_buckets: Upper bound on concurrently paginated buckets
    """

    desired_volume: int = DESIRED_BUCKET_VOLUME
    max_buckets: int = MAX_BUCKETS

    def __post_init__(self) -> None:
        if self.desired_volume <= 0:
            raise ValueError("desired_volume must be positive")
        if self.max_buckets <= 0:
            raise ValueError("max_buckets must be positive")


@dataclass(frozen=True)
class Bounds:
    """Result of a successful bounds probe.

    Attributes:
        total: Number of matches reported by the server
        oldest: Creation time of the oldest match
        newest: Creation time of the newest match
    """

    total: int
    oldest: datetime
    newest: datetime

    @property
    def span_seconds(self) -> int:
        return int((self.newest - self.oldest).total_seconds())


@dataclass(frozen=True)
class Bucket:
    """Inclusive time range ``[start, end]`` retrieved by one paginator.

    Attributes:
        start: First second covered
        end: Last second covered
        index: Zero-based position of this bucket in its plan
    """

    start: datetime
    end: datetime
    index: int = 0

    def apply(self, query: Filter) -> Filter:
        """Bound ``query`` to this bucket.

        The server's ``after``/``before`` are exclusive, so the inclusive
        range is widened by one second on each side.
        """
        return query.after(self.start - _ONE_SECOND).before(self.end + _ONE_SECOND)
