"""REST request runner using endpoint specs and response adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol


class Transport(Protocol):
    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...


@dataclass(frozen=True)
class RestEndpointSpec:
    id: str
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    build_headers: Callable[[dict[str, Any]], dict[str, str]] | None = None


class ResponseAdapter:
    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return response


@dataclass(frozen=True)
class Endpoint:
    """An endpoint spec paired with the adapter that parses its responses."""

    spec: RestEndpointSpec
    adapter: ResponseAdapter

    @property
    def id(self) -> str:
        return self.spec.id


class RestRunner:
    def __init__(self, transport: Transport) -> None:
        self._t = transport

    async def run(self, *, endpoint: Endpoint, params: dict[str, Any]) -> Any:
        spec = endpoint.spec
        path = spec.build_path(params)
        query = spec.build_query(params) if spec.build_query else None
        headers = spec.build_headers(params) if spec.build_headers else None

        data = await self._t.get(path, params=query, headers=headers)
        return endpoint.adapter.parse(data, params)
