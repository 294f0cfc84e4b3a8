"""Structured logging for the retrieval engine.

Every event is logged under a stable event name with its fields in
``extra`` so log processors can index them.
"""

from __future__ import annotations

import logging
from datetime import datetime

logger = logging.getLogger(__name__)


def log_bucket_plan(
    *,
    endpoint_id: str,
    total_matches: int,
    total_buckets: int,
    bucket_width_seconds: int,
    oldest: datetime,
    newest: datetime,
) -> None:
    """Log creation of a bucket plan.

    Args:
        endpoint_id: Endpoint identifier
        total_matches: Match count reported by the probe
        total_buckets: Number of buckets planned
        bucket_width_seconds: Nominal width of each bucket
        oldest: Creation time of the oldest match
        newest: Creation time of the newest match
    """
    logger.info(
        "bucket_plan_created",
        extra={
            "endpoint_id": endpoint_id,
            "total_matches": total_matches,
            "total_buckets": total_buckets,
            "bucket_width_seconds": bucket_width_seconds,
            "oldest": oldest.isoformat(),
            "newest": newest.isoformat(),
        },
    )


def log_page_fetched(
    *,
    endpoint_id: str,
    items: int,
    latency_ms: float | None = None,
) -> None:
    logger.debug(
        "page_fetched",
        extra={"endpoint_id": endpoint_id, "items": items, "latency_ms": latency_ms},
    )


def log_page_error(
    *,
    endpoint_id: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a fetch failure that ended a page stream.

    Args:
        endpoint_id: Endpoint identifier
        error_type: Exception class name
        error_message: Exception message
    """
    logger.warning(
        "page_fetch_failed",
        extra={
            "endpoint_id": endpoint_id,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_paginator_finished(
    *,
    endpoint_id: str,
    bucket_index: int | None,
    pages: int,
    items: int,
    reason: str,
) -> None:
    logger.debug(
        "paginator_finished",
        extra={
            "endpoint_id": endpoint_id,
            "bucket_index": bucket_index,
            "pages": pages,
            "items": items,
            "reason": reason,
        },
    )


def log_fanin_complete(
    *,
    endpoint_id: str,
    buckets: int,
    pages: int,
    cancelled: int = 0,
) -> None:
    """Log the end of a fan-in merge.

    Args:
        endpoint_id: Endpoint identifier
        buckets: Number of bucket paginators started
        pages: Pages delivered to the consumer
        cancelled: Producers still running when the consumer stopped
    """
    logger.info(
        "fanin_complete",
        extra={
            "endpoint_id": endpoint_id,
            "buckets": buckets,
            "pages": pages,
            "cancelled": cancelled,
        },
    )
