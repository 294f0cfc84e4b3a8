"""Single rate-limited page fetch."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from time import perf_counter
from typing import Any

import aiohttp

from ...core.exceptions import DataError
from ...models import Page
from ..chunking.telemetry import log_page_error, log_page_fetched
from ..ratelimit import RateLimiter
from .runner import Endpoint, RestRunner, Transport

logger = logging.getLogger(__name__)

# Optional diagnostic side channel: (endpoint_id, params, error).
ErrorHook = Callable[[str, dict[str, Any], BaseException], None]

# pydantic's ValidationError subclasses ValueError.
FETCH_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    DataError,
    ValueError,
)


class PageFetcher:
    """Performs one gated GET and parses it into a ``Page``.

    Any transport, status or parse failure is collapsed into ``None``: the
    caller treats it as the end of its page stream. Nothing is retried here.
    """

    def __init__(
        self,
        transport: Transport,
        limiter: RateLimiter,
        *,
        on_error: ErrorHook | None = None,
    ) -> None:
        self._runner = RestRunner(transport)
        self._limiter = limiter
        self._on_error = on_error

    async def fetch(self, endpoint: Endpoint, params: dict[str, Any]) -> Page | None:
        await self._limiter.until_ready()

        started = perf_counter()
        try:
            page = await self._runner.run(endpoint=endpoint, params=params)
        except FETCH_ERRORS as e:
            log_page_error(
                endpoint_id=endpoint.id,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            self._report(endpoint, params, e)
            return None

        log_page_fetched(
            endpoint_id=endpoint.id,
            items=len(page),
            latency_ms=(perf_counter() - started) * 1000.0,
        )
        return page

    def _report(self, endpoint: Endpoint, params: dict[str, Any], error: BaseException) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(endpoint.id, dict(params), error)
        except Exception:
            logger.warning("Error hook failed for %s", endpoint.id, exc_info=True)
