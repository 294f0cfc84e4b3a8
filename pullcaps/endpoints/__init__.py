"""Pushshift endpoint definitions."""

from .meta import fetch_quota
from .search import COMMENTS, SUBMISSIONS

__all__ = ["COMMENTS", "SUBMISSIONS", "fetch_quota"]
