"""Server metadata endpoint, used to learn the advertised rate limit."""

from __future__ import annotations

from typing import Any

from pullcaps.core import ProviderError
from pullcaps.runtime.ratelimit import Quota
from pullcaps.runtime.rest import Endpoint, ResponseAdapter, RestEndpointSpec, RestRunner, Transport

SPEC = RestEndpointSpec(
    id="meta",
    build_path=lambda params: "/meta",
)


class Adapter(ResponseAdapter):
    """Extracts the per-minute quota from the ``/meta`` response."""

    def parse(self, response: Any, params: dict[str, Any]) -> Quota:
        value = response.get("server_ratelimit_per_minute") if isinstance(response, dict) else None
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ProviderError(f"Invalid server_ratelimit_per_minute: {value!r}")
        return Quota.per_minute(value)


ENDPOINT = Endpoint(spec=SPEC, adapter=Adapter())


async def fetch_quota(transport: Transport) -> Quota:
    """Ask the server for its advertised per-minute quota."""
    return await RestRunner(transport).run(endpoint=ENDPOINT, params={})
