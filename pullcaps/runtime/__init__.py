"""Runtime components: rate limiting, REST transport and the retrieval engine."""

from .ratelimit import DEFAULT_QUOTA, LazyRateLimiter, Quota, RateLimiter

__all__ = [
    "DEFAULT_QUOTA",
    "LazyRateLimiter",
    "Quota",
    "RateLimiter",
]
