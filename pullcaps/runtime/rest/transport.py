"""REST transport handed to the retrieval engine."""

from __future__ import annotations

from typing import Any

import aiohttp

from .http_client import HTTPClient, ResponseHook


class RESTTransport:
    """Thin facade over ``HTTPClient`` bound to one API base URL.

    Share a transport (or the ``aiohttp.ClientSession`` behind it) between
    clients to share the connection pool.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._http = HTTPClient(base_url=base_url, timeout=timeout, session=session)

    @property
    def base_url(self) -> str | None:
        return self._http.base_url

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._http.add_response_hook(hook)

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._http.get(path, params=params, headers=headers)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> RESTTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
