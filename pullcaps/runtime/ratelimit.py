"""Token-bucket rate limiting for outbound API requests.

Architecture:
    ``RateLimiter`` is the single gate every request passes through
    (``await limiter.until_ready()``); it wraps ``aiolimiter.AsyncLimiter``
    and is safe to share between any number of concurrent tasks.

    ``LazyRateLimiter`` owns quota resolution. The first caller of ``get()``
    resolves the quota (optionally with a network probe) and builds the
    limiter; every later or concurrent caller receives that same instance.
    A client owns one ``LazyRateLimiter`` and hands it to the clients it
    shares with, so the limiter is an injected resource rather than a
    hidden module global.

Design Decisions:
    - Best-effort resolution: a failing probe falls back to the default
      quota instead of failing the client.
    - At-most-once: resolution runs under an ``asyncio.Lock``, so a burst of
      first queries triggers a single probe.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import aiohttp
from aiolimiter import AsyncLimiter

from ..core.exceptions import DataError

logger = logging.getLogger(__name__)

DEFAULT_REQUESTS_PER_MINUTE = 120


@dataclass(frozen=True)
class Quota:
    """``max_rate`` requests per ``time_period`` seconds."""

    max_rate: int
    time_period: float = 60.0

    def __post_init__(self) -> None:
        if self.max_rate <= 0:
            raise ValueError(f"max_rate must be positive, got {self.max_rate}")
        if self.time_period <= 0:
            raise ValueError(f"time_period must be positive, got {self.time_period}")

    @classmethod
    def per_second(cls, max_rate: int) -> Quota:
        return cls(max_rate=max_rate, time_period=1.0)

    @classmethod
    def per_minute(cls, max_rate: int) -> Quota:
        return cls(max_rate=max_rate, time_period=60.0)


DEFAULT_QUOTA = Quota.per_minute(DEFAULT_REQUESTS_PER_MINUTE)

QuotaResolver = Callable[[], Awaitable[Quota]]


class RateLimiter:
    """Shared request gate."""

    def __init__(self, quota: Quota = DEFAULT_QUOTA) -> None:
        self.quota = quota
        self._limiter = AsyncLimiter(quota.max_rate, quota.time_period)

    async def until_ready(self) -> None:
        """Wait until a request may be sent, consuming one token."""
        await self._limiter.acquire()

    def has_capacity(self) -> bool:
        """Whether a token is available right now."""
        return self._limiter.has_capacity()

    def __repr__(self) -> str:
        return f"RateLimiter({self.quota.max_rate}/{self.quota.time_period:g}s)"


class LazyRateLimiter:
    """Builds a ``RateLimiter`` on first use and hands out that one instance."""

    def __init__(
        self,
        resolve: QuotaResolver | None = None,
        *,
        default: Quota = DEFAULT_QUOTA,
    ) -> None:
        """Initialize lazy limiter.

        Args:
            resolve: Optional coroutine function returning the server quota
            default: Quota used when ``resolve`` is missing or fails
        """
        self._resolve = resolve
        self._default = default
        self._limiter: RateLimiter | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def fixed(cls, limiter: RateLimiter) -> LazyRateLimiter:
        """Wrap an already-built limiter."""
        lazy = cls(default=limiter.quota)
        lazy._limiter = limiter
        return lazy

    @property
    def resolved(self) -> bool:
        return self._limiter is not None

    async def get(self) -> RateLimiter:
        if self._limiter is not None:
            return self._limiter
        async with self._lock:
            if self._limiter is None:
                quota = await self._resolve_quota()
                logger.info(
                    "rate_limiter_ready",
                    extra={"max_rate": quota.max_rate, "time_period": quota.time_period},
                )
                self._limiter = RateLimiter(quota)
        return self._limiter

    async def _resolve_quota(self) -> Quota:
        if self._resolve is None:
            return self._default
        try:
            return await self._resolve()
        except (aiohttp.ClientError, asyncio.TimeoutError, DataError, ValueError) as e:
            logger.warning(
                "Quota probe failed (%s), using default of %d requests per %gs",
                e,
                self._default.max_rate,
                self._default.time_period,
            )
            return self._default
