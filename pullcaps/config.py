"""Client configuration and Pushshift constants."""

from __future__ import annotations

from dataclasses import dataclass, field

from .runtime.chunking import BATCH_SIZE, BucketPolicy
from .runtime.ratelimit import DEFAULT_QUOTA, Quota

BASE_URL = "https://api.pushshift.io"


@dataclass(frozen=True)
class ClientConfig:
    """Settings for a ``Client``.

    Attributes:
        base_url: API root
        timeout: Total timeout per HTTP request, in seconds
        batch_size: Items requested per page
        bucket_policy: How large result sets are split into time buckets
        default_quota: Rate limit used when not probing, or when the probe fails
        probe_quota: Ask ``/meta`` for the server's advertised rate limit
        partition: Retrieve large creation-time queries in parallel buckets
    """

    base_url: str = BASE_URL
    timeout: float = 30.0
    batch_size: int = BATCH_SIZE
    bucket_policy: BucketPolicy = field(default_factory=BucketPolicy)
    default_quota: Quota = DEFAULT_QUOTA
    probe_quota: bool = True
    partition: bool = True

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
