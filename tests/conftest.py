"""
Shared fixtures for the swr-cache tests.
"""

import pytest

from swr_cache import QueryDescriptor
from swr_cache.repositories import InMemoryQueryTransport, MemorySlotStorage

TTL_MS = 5 * 60 * 1000


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """Create a manual clock."""
    return ManualClock()


@pytest.fixture
def storage():
    """Create empty in-memory slot storage."""
    return MemorySlotStorage()


@pytest.fixture
def transport():
    """Create an in-process live-query transport."""
    return InMemoryQueryTransport()


def user_query(username: str) -> QueryDescriptor:
    return QueryDescriptor.of("getUserByUsername", username=username)


def follower_query(user_id: str) -> QueryDescriptor:
    return QueryDescriptor.of("getFollowerCount", user_id=user_id)


def following_query(user_id: str) -> QueryDescriptor:
    return QueryDescriptor.of("getFollowingCount", user_id=user_id)


def is_following_query(viewer_id: str, user_id: str) -> QueryDescriptor:
    return QueryDescriptor.of("isFollowing", follower_id=viewer_id, following_id=user_id)
