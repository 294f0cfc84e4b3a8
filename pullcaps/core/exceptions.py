"""Custom exception hierarchy."""

from __future__ import annotations


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class ProviderError(DataError):
    """Error returned by the Pushshift API or its transport."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Server-side rate limit exceeded (HTTP 429)."""

    def __init__(self, message: str, retry_after: float = 60.0) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ValidationError(DataError):
    """Invalid query value supplied by the caller."""

    pass
