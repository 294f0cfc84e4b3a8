"""Async HTTP client wrapper around ``aiohttp``."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from ...core.exceptions import ProviderError, RateLimitError

logger = logging.getLogger(__name__)

# A hook receives every response before its status is checked. It may return
# a delay in seconds (sync or async) to throttle subsequent requests.
ResponseHook = Callable[[aiohttp.ClientResponse], "float | None | Awaitable[float | None]"]

DEFAULT_RETRY_AFTER = 60.0


def parse_retry_after(value: str | None, default: float = DEFAULT_RETRY_AFTER) -> float:
    """Parse a ``Retry-After`` header given in seconds."""
    if value is None:
        return default
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return default
    return seconds if seconds >= 0 else default


class HTTPClient:
    """Async HTTP client wrapper.

    The session is created lazily. A caller-supplied session is used as-is
    and left open on ``close()`` so one connection pool can back several
    clients.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._response_hooks: list[ResponseHook] = []
        self._throttle_until: float | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._response_hooks.append(hook)

    def set_throttle(self, delay: float) -> None:
        """Hold back every request for ``delay`` seconds from now.

        An existing, later throttle window is never shortened.
        """
        if delay <= 0:
            return
        until = time.monotonic() + delay
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until

    async def _wait_for_throttle(self) -> None:
        # The window may be extended by another task while this one sleeps.
        while self._throttle_until is not None:
            remaining = self._throttle_until - time.monotonic()
            if remaining <= 0:
                self._throttle_until = None
                return
            logger.debug("Throttled, sleeping %.2fs before request", remaining)
            await asyncio.sleep(remaining)

    async def _run_hooks(self, response: aiohttp.ClientResponse) -> None:
        for hook in self._response_hooks:
            try:
                delay = hook(response)
                if inspect.isawaitable(delay):
                    delay = await delay
            except Exception:
                logger.warning("Response hook %r failed", hook, exc_info=True)
                continue
            if delay:
                self.set_throttle(float(delay))

    def _build_url(self, url: str) -> str:
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request returning the decoded JSON body.

        Raises:
            RateLimitError: On HTTP 429; also opens a throttle window
            ProviderError: On any other non-2xx status or an undecodable body
            aiohttp.ClientError: On transport failure
        """
        await self._wait_for_throttle()
        url = self._build_url(url)

        async with self.session.get(url, params=params, headers=headers) as response:
            await self._run_hooks(response)

            if response.status == 429:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                self.set_throttle(retry_after)
                raise RateLimitError(f"Rate limited by {url}", retry_after=retry_after)
            if not 200 <= response.status < 300:
                raise ProviderError(
                    f"HTTP {response.status} from {url}", status_code=response.status
                )

            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise ProviderError(f"Malformed JSON body from {url}") from e

    async def close(self) -> None:
        """Close session (only if this client created it)."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
