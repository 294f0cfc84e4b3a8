"""Submission and comment search endpoint definitions and adapters.

Both resources share one wire shape: ``GET /reddit/<kind>/search/`` with
filter parameters, answered by ``{"data": [...], "metadata": {...}}``.
"""

from __future__ import annotations

from typing import Any

from pullcaps.core import ProviderError, Resource
from pullcaps.models import Comment, ContentBase, Page, Post
from pullcaps.runtime.rest import Endpoint, ResponseAdapter, RestEndpointSpec


def build_query(params: dict[str, Any]) -> dict[str, Any]:
    """Drop unset parameters and render booleans the way the API expects."""
    query: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = value
    return query


class SearchAdapter(ResponseAdapter):
    """Parses a search response into a typed ``Page``."""

    def __init__(self, model: type[ContentBase]) -> None:
        self.model = model

    def parse(self, response: Any, params: dict[str, Any]) -> Page:
        """Parse a search response.

        Args:
            response: Decoded JSON body
            params: Request parameters (unused)

        Returns:
            Page of ``self.model`` items

        Raises:
            ProviderError: If the body is not a JSON object
            pydantic.ValidationError: If the records do not match the model
        """
        if not isinstance(response, dict):
            raise ProviderError(f"Unexpected search response type: {type(response).__name__}")
        return Page[self.model].model_validate(response)


def search_spec(resource: Resource) -> RestEndpointSpec:
    return RestEndpointSpec(
        id=f"{resource.value}_search",
        build_path=lambda params: resource.search_path,
        build_query=build_query,
    )


SUBMISSIONS = Endpoint(spec=search_spec(Resource.SUBMISSION), adapter=SearchAdapter(Post))
COMMENTS = Endpoint(spec=search_spec(Resource.COMMENT), adapter=SearchAdapter(Comment))
