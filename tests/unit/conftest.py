"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest
from fakes import BASE_TIME, FakePushshift, comment_record, post_record


@pytest.fixture
def api() -> FakePushshift:
    """Empty in-memory API."""
    return FakePushshift()


@pytest.fixture
def small_api() -> FakePushshift:
    """Ten posts and ten comments, one minute apart."""
    return FakePushshift(
        posts=[post_record(i, BASE_TIME + 60 * i) for i in range(10)],
        comments=[comment_record(i, BASE_TIME + 60 * i) for i in range(10)],
    )


@pytest.fixture
def large_api() -> FakePushshift:
    """500 posts spread over one day, each at a distinct second."""
    return FakePushshift(
        posts=[post_record(i, BASE_TIME + 172 * i + (i % 3)) for i in range(500)],
    )
