"""REST runtime abstractions."""

from .fetcher import ErrorHook, PageFetcher
from .http_client import HTTPClient, parse_retry_after
from .runner import Endpoint, ResponseAdapter, RestEndpointSpec, RestRunner, Transport
from .transport import RESTTransport

__all__ = [
    "Endpoint",
    "ErrorHook",
    "HTTPClient",
    "PageFetcher",
    "RESTTransport",
    "ResponseAdapter",
    "RestEndpointSpec",
    "RestRunner",
    "Transport",
    "parse_retry_after",
]
