"""High-level async client for the Pushshift API.

Architecture:
    ``Client`` is the public facade. It owns a REST transport and a lazily
    resolved rate limiter, and composes the retrieval engine per query:

        BoundsProbe -> BucketPlanner -> FanInMerger -> Paginator (per bucket)

    or, when the query is not partitionable or too small to benefit,
    a single Paginator over the whole range.

Design Decisions:
    - Lazy streams: ``get_posts``/``get_comments`` return a fresh async
      iterator per call; nothing is requested until it is iterated.
    - Shared limiter: every request of every query issued through a client,
      and through clients created with ``share()``, passes one limiter.
    - Failures end streams: transport, status and parse errors terminate the
      affected page stream silently (see ``on_error`` for diagnostics). The
      worst case of any query is an empty result.

Example:
    >>> async with Client() as client:
    ...     query = Filter().subreddit("askreddit").limit(5)
    ...     async for post in client.get_posts(query):
    ...         print(post.content_url)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from functools import partial

import aiohttp

from .api.filter import Filter
from .config import ClientConfig
from .endpoints import COMMENTS, SUBMISSIONS, fetch_quota
from .models import Comment, ContentBase, Page, Post
from .runtime.chunking import BoundsProbe, Bucket, BucketPlanner, FanInMerger, Paginator, flatten
from .runtime.ratelimit import LazyRateLimiter, RateLimiter
from .runtime.rest import Endpoint, ErrorHook, PageFetcher, RESTTransport, Transport

logger = logging.getLogger(__name__)


class Client:
    """Opinionated async client for Pushshift searches.

    Create one client and reuse it; ``share()`` returns a second facade over
    the same transport and rate limiter.

    Every search request waits on the rate limiter. The one exception is the
    ``/meta`` request that learns the server quota (``config.probe_quota``):
    it is sent once, before the limiter exists, to decide its rate.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        config: ClientConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        rate_limiter: RateLimiter | LazyRateLimiter | None = None,
        on_error: ErrorHook | None = None,
    ) -> None:
        """Initialize client.

        Args:
            transport: Pre-configured transport; built from ``config`` if omitted
            config: Client settings (defaults to ``ClientConfig()``)
            session: aiohttp session backing the default transport, for pool sharing;
                mutually exclusive with ``transport``
            rate_limiter: Limiter to share with other clients; built lazily if omitted
            on_error: Called with (endpoint_id, params, error) for every failed fetch

        Raises:
            ValueError: If both ``transport`` and ``session`` are given
        """
        if transport is not None and session is not None:
            raise ValueError("Pass either transport or session, not both")
        self.config = config or ClientConfig()
        self._owns_transport = transport is None
        if transport is None:
            transport = RESTTransport(
                self.config.base_url, timeout=self.config.timeout, session=session
            )
        self._transport = transport

        if isinstance(rate_limiter, RateLimiter):
            rate_limiter = LazyRateLimiter.fixed(rate_limiter)
        elif rate_limiter is None:
            resolve = partial(fetch_quota, transport) if self.config.probe_quota else None
            rate_limiter = LazyRateLimiter(resolve, default=self.config.default_quota)
        self._rate_limiter = rate_limiter
        self._on_error = on_error

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def rate_limiter(self) -> LazyRateLimiter:
        return self._rate_limiter

    def share(self, transport: Transport | None = None) -> Client:
        """Return a client sharing this client's rate limiter.

        The new client reuses this client's transport unless another one is
        given, and never closes a transport it did not create.
        """
        return Client(
            transport or self._transport,
            config=self.config,
            rate_limiter=self._rate_limiter,
            on_error=self._on_error,
        )

    def get_posts(self, query: Filter | None = None) -> AsyncIterator[Post]:
        """Stream posts matching ``query``.

        Items are unordered when a large creation-time query is retrieved in
        parallel buckets.
        """
        return self._search(SUBMISSIONS, query or Filter())

    def get_comments(self, query: Filter | None = None) -> AsyncIterator[Comment]:
        """Stream comments matching ``query``.

        Items are unordered when a large creation-time query is retrieved in
        parallel buckets.
        """
        return self._search(COMMENTS, query or Filter())

    async def _search(self, endpoint: Endpoint, query: Filter) -> AsyncIterator[ContentBase]:
        limiter = await self._rate_limiter.get()
        fetcher = PageFetcher(self._transport, limiter, on_error=self._on_error)

        count = 0
        async with aclosing(flatten(self._pages(fetcher, endpoint, query))) as items:
            async for item in items:
                yield item
                count += 1
                if query.max_results is not None and count >= query.max_results:
                    return

    async def _pages(
        self, fetcher: PageFetcher, endpoint: Endpoint, query: Filter
    ) -> AsyncGenerator[Page, None]:
        batch_size = self.config.batch_size

        if self.config.partition and query.sorts_by_creation:
            bounds = await BoundsProbe(fetcher, batch_size=batch_size).probe(endpoint, query)
            if bounds is not None:
                buckets = BucketPlanner(self.config.bucket_policy, endpoint_id=endpoint.id).plan(
                    bounds
                )

                def paginator_for(bucket: Bucket) -> Paginator:
                    return Paginator(
                        fetcher,
                        endpoint,
                        bucket.apply(query),
                        batch_size=batch_size,
                        bucket_index=bucket.index,
                    )

                merger = FanInMerger(paginator_for, endpoint_id=endpoint.id)
                async with aclosing(merger.pages(buckets)) as pages:
                    async for page in pages:
                        yield page
                return

        paginator = Paginator(fetcher, endpoint, query, batch_size=batch_size)
        async with aclosing(paginator.pages()) as pages:
            async for page in pages:
                yield page

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
