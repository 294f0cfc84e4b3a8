"""Precise unit tests for HTTPClient.

Tests focus on session management, throttling, response hooks and status
handling.
"""

from __future__ import annotations

import asyncio
import json
import time
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from pullcaps.core import ProviderError, RateLimitError
from pullcaps.runtime.rest import HTTPClient, parse_retry_after


def make_response(status: int = 200, body: object = None, headers: dict | None = None):
    response = AsyncMock()
    response.status = status
    response.headers = headers or {}
    response.json = AsyncMock(return_value=body if body is not None else {"data": []})
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def attach_session(client: HTTPClient, *responses) -> MagicMock:
    session = MagicMock()
    session.closed = False  # session property checks this
    # get() returns the response directly (not a coroutine) for async context manager
    session.get = MagicMock(side_effect=list(responses))
    client._session = session
    return session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None
        assert client._response_hooks == []
        assert client._throttle_until is None

    def test_base_url_trailing_slash_stripped(self):
        client = HTTPClient(base_url="https://api.pushshift.io/")
        assert client.base_url == "https://api.pushshift.io"

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager_closes_own_session(self):
        async with HTTPClient() as client:
            session = client.session
        assert session.closed

    @pytest.mark.asyncio
    async def test_injected_session_left_open(self):
        async with aiohttp.ClientSession() as session:
            client = HTTPClient(session=session)
            assert client.session is session

            await client.close()

            assert not session.closed


class TestHTTPClientRequests:
    """Test GET handling."""

    @pytest.mark.asyncio
    async def test_get_with_base_url(self):
        client = HTTPClient(base_url="https://api.pushshift.io")
        session = attach_session(client, make_response(body={"data": [1]}))

        result = await client.get("/reddit/comment/search/", params={"author": "alice"})

        assert result == {"data": [1]}
        session.get.assert_called_once_with(
            "https://api.pushshift.io/reddit/comment/search/",
            params={"author": "alice"},
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_get_with_absolute_url(self):
        client = HTTPClient(base_url="https://api.pushshift.io")
        session = attach_session(client, make_response())

        await client.get("https://other.example.com/meta")

        assert session.get.call_args.args[0] == "https://other.example.com/meta"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    async def test_non_success_status_raises_provider_error(self, status):
        client = HTTPClient()
        attach_session(client, make_response(status=status))

        with pytest.raises(ProviderError) as exc_info:
            await client.get("https://api.pushshift.io/meta")

        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_malformed_body_raises_provider_error(self):
        client = HTTPClient()
        response = make_response()
        response.json = AsyncMock(side_effect=json.JSONDecodeError("bad", "<html>", 0))
        attach_session(client, response)

        with pytest.raises(ProviderError, match="Malformed JSON"):
            await client.get("https://api.pushshift.io/meta")

    @pytest.mark.asyncio
    async def test_429_raises_and_opens_throttle(self):
        client = HTTPClient()
        attach_session(client, make_response(status=429, headers={"Retry-After": "5"}))

        with pytest.raises(RateLimitError) as exc_info:
            await client.get("https://api.pushshift.io/meta")

        assert exc_info.value.retry_after == 5.0
        assert exc_info.value.status_code == 429
        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_429_is_not_retried(self):
        client = HTTPClient()
        session = attach_session(
            client, make_response(status=429, headers={"Retry-After": "0"}), make_response()
        )

        with pytest.raises(RateLimitError):
            await client.get("https://api.pushshift.io/meta")

        assert session.get.call_count == 1


class TestHTTPClientThrottling:
    """Test HTTPClient throttling functionality."""

    def test_set_throttle(self):
        client = HTTPClient()
        client.set_throttle(5.0)
        assert client._throttle_until is not None

    def test_set_throttle_zero_does_nothing(self):
        client = HTTPClient()
        client.set_throttle(5.0)
        original = client._throttle_until

        client.set_throttle(0.0)
        assert client._throttle_until == original

    def test_set_throttle_never_shortens(self):
        client = HTTPClient()
        client.set_throttle(10.0)
        longer = client._throttle_until

        client.set_throttle(1.0)
        assert client._throttle_until == longer

    @pytest.mark.asyncio
    async def test_get_respects_throttle(self):
        client = HTTPClient()
        client.set_throttle(0.05)
        attach_session(client, make_response())

        start = time.monotonic()
        await client.get("https://api.pushshift.io/meta")
        elapsed = time.monotonic() - start

        # Small tolerance for timer granularity
        assert elapsed >= 0.04
        assert client._throttle_until is None

    @pytest.mark.asyncio
    async def test_window_extended_during_wait_is_honored(self):
        client = HTTPClient()
        client.set_throttle(0.05)
        waiter = asyncio.create_task(client._wait_for_throttle())

        await asyncio.sleep(0.01)
        client.set_throttle(0.2)
        extended_until = client._throttle_until

        await waiter

        assert time.monotonic() >= extended_until
        assert client._throttle_until is None

    @pytest.mark.asyncio
    async def test_concurrent_waiters_keep_longer_window(self):
        client = HTTPClient()
        client.set_throttle(0.02)
        first = asyncio.create_task(client._wait_for_throttle())
        second = asyncio.create_task(client._wait_for_throttle())

        await asyncio.sleep(0.005)
        client.set_throttle(5.0)
        await asyncio.sleep(0.05)

        assert not first.done()
        assert not second.done()
        assert client._throttle_until is not None
        first.cancel()
        second.cancel()
        await asyncio.gather(first, second, return_exceptions=True)


class TestHTTPClientResponseHooks:
    """Test HTTPClient response hooks."""

    @pytest.mark.asyncio
    async def test_response_hook_called(self):
        client = HTTPClient()
        hook = MagicMock(return_value=None)
        client.add_response_hook(hook)
        response = make_response()
        attach_session(client, response)

        await client.get("https://api.pushshift.io/meta")

        hook.assert_called_once_with(response)
        assert client._throttle_until is None

    @pytest.mark.asyncio
    async def test_response_hook_returns_delay(self):
        client = HTTPClient()
        client.add_response_hook(lambda response: 2.0)
        attach_session(client, make_response())

        await client.get("https://api.pushshift.io/meta")

        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_async_response_hook(self):
        client = HTTPClient()

        async def hook(response):
            await asyncio.sleep(0)
            return 1.0

        client.add_response_hook(hook)
        attach_session(client, make_response())

        await client.get("https://api.pushshift.io/meta")

        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_failing_hook_does_not_break_request(self):
        client = HTTPClient()

        def hook(response):
            raise RuntimeError("hook error")

        client.add_response_hook(hook)
        attach_session(client, make_response(body={"ok": True}))

        assert await client.get("https://api.pushshift.io/meta") == {"ok": True}


class TestParseRetryAfter:
    """Test Retry-After parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [("30", 30.0), ("0.5", 0.5), (None, 60.0), ("soon", 60.0), ("-3", 60.0)],
    )
    def test_parse(self, value, expected):
        assert parse_retry_after(value) == expected
