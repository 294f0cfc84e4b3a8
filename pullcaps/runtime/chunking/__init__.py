"""Adaptive retrieval layer: probing, partitioning and page streaming.

Architecture:
    The chunking layer consists of:
    - definitions.py: Policy and range structures (BucketPolicy, Bounds, Bucket)
    - planners.py: BoundsProbe (priming requests) and BucketPlanner (partitioning)
    - executors.py: Paginator (cursor walk) and FanInMerger (concurrent merge)
    - telemetry.py: Structured logging

Usage:
    A query sorted by creation time is probed first. If it matches more than
    one batch, its span is split into buckets that are paginated
    concurrently; otherwise a single paginator walks the whole range.
"""

from __future__ import annotations

from .definitions import (
    BATCH_SIZE,
    DESIRED_BUCKET_VOLUME,
    MAX_BUCKETS,
    Bounds,
    Bucket,
    BucketPolicy,
)
from .executors import FanInMerger, Paginator, flatten
from .planners import BoundsProbe, BucketPlanner

__all__ = [
    "BATCH_SIZE",
    "DESIRED_BUCKET_VOLUME",
    "MAX_BUCKETS",
    "Bounds",
    "Bucket",
    "BucketPolicy",
    "BoundsProbe",
    "BucketPlanner",
    "FanInMerger",
    "Paginator",
    "flatten",
]
