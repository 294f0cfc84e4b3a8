"""Public query-building API."""

from .filter import Filter, to_epoch_seconds, to_utc_datetime

__all__ = ["Filter", "to_epoch_seconds", "to_utc_datetime"]
