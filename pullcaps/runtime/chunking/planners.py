"""Bounds probing and bucket planning.

``BoundsProbe`` learns how many items a query matches and the time span they
cover; ``BucketPlanner`` turns that into disjoint buckets sized for parallel
retrieval.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from typing import TYPE_CHECKING

from ...api.filter import Filter
from ...core.enums import SortOrder
from .definitions import BATCH_SIZE, Bounds, Bucket, BucketPolicy
from .telemetry import log_bucket_plan

if TYPE_CHECKING:
    from ..rest.fetcher import PageFetcher
    from ..rest.runner import Endpoint


class BoundsProbe:
    """Issues the priming requests that decide whether to partition a query.

    Probing is opportunistic: every failure returns ``None`` and the query is
    walked by a single paginator instead.
    """

    def __init__(self, fetcher: PageFetcher, *, batch_size: int = BATCH_SIZE) -> None:
        self._fetcher = fetcher
        self._batch_size = batch_size

    async def probe(self, endpoint: Endpoint, query: Filter) -> Bounds | None:
        """Probe a query's match count and time span.

        Args:
            endpoint: Search endpoint to probe
            query: Query filter; must sort by creation time

        Returns:
            Bounds if the query matches more than one batch, None otherwise
        """
        if not query.sorts_by_creation:
            return None

        newest_page = await self._fetcher.fetch(endpoint, self._probe_params(query, SortOrder.DESC))
        if newest_page is None or newest_page.last is None or newest_page.total is None:
            return None
        total = newest_page.total
        if total <= self._batch_size:
            return None

        oldest_page = await self._fetcher.fetch(endpoint, self._probe_params(query, SortOrder.ASC))
        if oldest_page is None or oldest_page.last is None:
            return None

        oldest = oldest_page.last.created
        newest = newest_page.last.created
        if oldest >= newest:
            return None
        return Bounds(total=total, oldest=oldest, newest=newest)

    @staticmethod
    def _probe_params(query: Filter, order: SortOrder) -> dict:
        return {**query.to_params(), "sort": order.value, "limit": 1, "metadata": True}


class BucketPlanner:
    """Partitions a probed time span into contiguous buckets.

    The bucket count targets ``policy.desired_volume`` matches per bucket
    assuming matches are spread uniformly over time. Real activity is rarely
    uniform, so bucket volume is approximate; coverage is exact.
    """

    def __init__(self, policy: BucketPolicy | None = None, *, endpoint_id: str = "unknown") -> None:
        self._policy = policy or BucketPolicy()
        self._endpoint_id = endpoint_id

    def bucket_count(self, bounds: Bounds) -> int:
        count = min(bounds.total // self._policy.desired_volume, self._policy.max_buckets)
        # Every bucket must be at least one second wide.
        return max(1, min(count, bounds.span_seconds - 1))

    def plan(self, bounds: Bounds) -> Iterator[Bucket]:
        """Lazily yield the buckets covering ``[bounds.oldest, bounds.newest]``.

        Bucket ``i`` spans ``[oldest + i*width + 1s, oldest + (i+1)*width]``;
        the first bucket starts exactly at ``oldest`` and the last ends
        exactly at ``newest``, absorbing the rounding remainder.

        Raises:
            ValueError: If ``oldest`` is not strictly before ``newest``
        """
        if bounds.oldest >= bounds.newest:
            raise ValueError("Cannot plan buckets: oldest must be before newest")

        count = self.bucket_count(bounds)
        width = bounds.span_seconds // (count + 1)
        log_bucket_plan(
            endpoint_id=self._endpoint_id,
            total_matches=bounds.total,
            total_buckets=count,
            bucket_width_seconds=width,
            oldest=bounds.oldest,
            newest=bounds.newest,
        )
        return self._iter_buckets(bounds, count, width)

    @staticmethod
    def _iter_buckets(bounds: Bounds, count: int, width: int) -> Iterator[Bucket]:
        for i in range(count):
            start = bounds.oldest if i == 0 else bounds.oldest + timedelta(seconds=i * width + 1)
            end = (
                bounds.newest
                if i == count - 1
                else bounds.oldest + timedelta(seconds=(i + 1) * width)
            )
            yield Bucket(start=start, end=end, index=i)
