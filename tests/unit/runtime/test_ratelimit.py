"""Unit tests for rate limiting and quota resolution."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest
from fakes import FakePushshift

from pullcaps.core import ProviderError
from pullcaps.endpoints import fetch_quota
from pullcaps.runtime.ratelimit import DEFAULT_QUOTA, LazyRateLimiter, Quota, RateLimiter


class TestQuota:
    """Test Quota construction."""

    def test_per_minute(self):
        quota = Quota.per_minute(120)
        assert quota.max_rate == 120
        assert quota.time_period == 60.0

    def test_per_second(self):
        assert Quota.per_second(1) == Quota(max_rate=1, time_period=1.0)

    def test_default_quota_is_conservative(self):
        assert DEFAULT_QUOTA == Quota.per_minute(120)

    @pytest.mark.parametrize("max_rate,time_period", [(0, 60.0), (-1, 60.0), (10, 0.0)])
    def test_invalid_quota_rejected(self, max_rate, time_period):
        with pytest.raises(ValueError):
            Quota(max_rate=max_rate, time_period=time_period)


class TestRateLimiter:
    """Test the request gate."""

    @pytest.mark.asyncio
    async def test_until_ready_consumes_token(self):
        limiter = RateLimiter(Quota.per_minute(1))
        assert limiter.has_capacity()

        await limiter.until_ready()

        assert not limiter.has_capacity()

    @pytest.mark.asyncio
    async def test_until_ready_blocks_when_exhausted(self):
        limiter = RateLimiter(Quota.per_minute(1))
        await limiter.until_ready()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(limiter.until_ready(), timeout=0.05)

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_capacity(self):
        limiter = RateLimiter(Quota.per_minute(3))

        await asyncio.gather(*(limiter.until_ready() for _ in range(3)))

        assert not limiter.has_capacity()


class TestLazyRateLimiter:
    """Test at-most-once quota resolution."""

    @pytest.mark.asyncio
    async def test_without_resolver_uses_default(self):
        lazy = LazyRateLimiter(default=Quota.per_second(5))
        assert not lazy.resolved

        limiter = await lazy.get()

        assert lazy.resolved
        assert limiter.quota == Quota.per_second(5)

    @pytest.mark.asyncio
    async def test_resolves_once_and_returns_same_instance(self):
        resolve = AsyncMock(return_value=Quota.per_minute(300))
        lazy = LazyRateLimiter(resolve)

        first = await lazy.get()
        second = await lazy.get()

        assert first is second
        assert first.quota == Quota.per_minute(300)
        resolve.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_first_use_resolves_once(self):
        calls = 0

        async def resolve() -> Quota:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return Quota.per_minute(60)

        lazy = LazyRateLimiter(resolve)
        limiters = await asyncio.gather(*(lazy.get() for _ in range(10)))

        assert calls == 1
        assert all(limiter is limiters[0] for limiter in limiters)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("down"),
            asyncio.TimeoutError(),
            ProviderError("HTTP 500", status_code=500),
            ValueError("bad json"),
        ],
    )
    async def test_failed_resolution_falls_back_to_default(self, error):
        lazy = LazyRateLimiter(AsyncMock(side_effect=error), default=Quota.per_minute(90))

        limiter = await lazy.get()

        assert limiter.quota == Quota.per_minute(90)

    @pytest.mark.asyncio
    async def test_fixed_wraps_existing_limiter(self):
        existing = RateLimiter(Quota.per_second(2))
        lazy = LazyRateLimiter.fixed(existing)

        assert lazy.resolved
        assert await lazy.get() is existing


class TestFetchQuota:
    """Test the /meta quota probe."""

    @pytest.mark.asyncio
    async def test_reads_advertised_rate(self):
        api = FakePushshift(ratelimit_per_minute=240)

        quota = await fetch_quota(api)

        assert quota == Quota.per_minute(240)
        assert api.calls == [("/meta", {})]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, 0, -5, "120", True])
    async def test_invalid_advertised_rate(self, value):
        api = FakePushshift(ratelimit_per_minute=value)

        with pytest.raises(ProviderError, match="server_ratelimit_per_minute"):
            await fetch_quota(api)

    @pytest.mark.asyncio
    async def test_probe_failure_through_lazy_limiter(self):
        api = FakePushshift()
        api.fail_call(1, aiohttp.ClientConnectionError("refused"))
        lazy = LazyRateLimiter(lambda: fetch_quota(api))

        limiter = await lazy.get()

        assert limiter.quota == DEFAULT_QUOTA
