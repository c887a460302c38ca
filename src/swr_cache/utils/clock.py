"""Millisecond wall clock shared by TTL checks."""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)
