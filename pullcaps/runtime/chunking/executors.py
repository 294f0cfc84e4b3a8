"""Page stream execution: cursor pagination and concurrent fan-in.

This module provides the ``Paginator``, which walks one contiguous time range
with a ``before`` cursor, and the ``FanInMerger``, which runs one paginator
per bucket concurrently and merges their pages into one unordered stream.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator, Callable, Iterable
from contextlib import aclosing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...api.filter import Filter
from .definitions import BATCH_SIZE, Bucket
from .telemetry import log_fanin_complete, log_paginator_finished

if TYPE_CHECKING:
    from ...models import Page
    from ..rest.fetcher import PageFetcher
    from ..rest.runner import Endpoint


class Paginator:
    """Forward-only cursor walk over one time range.

    Each request substitutes the cursor into ``before``; the cursor then moves
    to the creation time of the last item received. The walk ends on a failed
    fetch, an empty page, or a page shorter than the batch size. A paginator
    is not resumable: iterate ``pages()`` again to restart from the original
    bounds.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        endpoint: Endpoint,
        query: Filter,
        *,
        batch_size: int = BATCH_SIZE,
        bucket_index: int | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._endpoint = endpoint
        self._query = query
        self._batch_size = batch_size
        self._bucket_index = bucket_index

    async def pages(self) -> AsyncIterator[Page]:
        cursor = self._query.before_time
        pages = 0
        items = 0
        reason = "short_page"

        while True:
            params = {**self._query.before(cursor).to_params(), "limit": self._batch_size}
            page = await self._fetcher.fetch(self._endpoint, params)
            if page is None:
                reason = "fetch_failed"
                break
            if not page.data:
                reason = "empty_page"
                break

            cursor = page.data[-1].created
            pages += 1
            items += len(page.data)
            yield page

            if len(page.data) < self._batch_size:
                break

        log_paginator_finished(
            endpoint_id=self._endpoint.id,
            bucket_index=self._bucket_index,
            pages=pages,
            items=items,
            reason=reason,
        )


@dataclass(frozen=True)
class _ProducerFailed:
    error: BaseException


_PRODUCER_DONE = object()


class FanInMerger:
    """Merges the page streams of many concurrent paginators.

    One task per bucket pushes pages into a shared queue as they arrive; the
    consumer receives them in arrival order, so cross-bucket order is
    unspecified. The queue holds one page per bucket; once it is full,
    producers wait for the consumer, so at most about two pages per bucket
    are read ahead. Closing the merged stream cancels the producers that are
    still running.
    """

    def __init__(
        self,
        paginator_factory: Callable[[Bucket], Paginator],
        *,
        endpoint_id: str = "unknown",
    ) -> None:
        self._paginator_factory = paginator_factory
        self._endpoint_id = endpoint_id

    async def pages(self, buckets: Iterable[Bucket]) -> AsyncIterator[Page]:
        paginators = [self._paginator_factory(b) for b in buckets]
        # One slot per bucket; a full queue blocks producers until the consumer catches up.
        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max(1, len(paginators)))

        async def pump(paginator: Paginator) -> None:
            try:
                async for page in paginator.pages():
                    await queue.put(page)
            except Exception as e:
                await queue.put(_ProducerFailed(e))
            else:
                await queue.put(_PRODUCER_DONE)

        tasks = [asyncio.create_task(pump(p)) for p in paginators]
        active = len(tasks)
        delivered = 0
        try:
            while active:
                item = await queue.get()
                if item is _PRODUCER_DONE:
                    active -= 1
                    continue
                if isinstance(item, _ProducerFailed):
                    raise item.error
                delivered += 1
                yield item
        finally:
            pending = [t for t in tasks if not t.done()]
            for t in pending:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            log_fanin_complete(
                endpoint_id=self._endpoint_id,
                buckets=len(tasks),
                pages=delivered,
                cancelled=len(pending),
            )


async def flatten(pages: AsyncGenerator[Page, None]) -> AsyncIterator[Any]:
    """Yield the items of each page in turn.

    Closing the flattened stream also closes ``pages``.
    """
    async with aclosing(pages) as stream:
        async for page in stream:
            for item in page.data:
                yield item
