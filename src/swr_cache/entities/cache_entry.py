"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the moment it was written.

    Entries belong to exactly one keyed cache instance. An entry whose age
    exceeds the cache TTL when read is treated as absent.

    Attributes:
        value: The cached snapshot
        timestamp: Write time in Unix milliseconds
    """

    value: T
    timestamp: int

    def age_ms(self, now_ms: int) -> int:
        """Milliseconds elapsed since the entry was written."""
        return now_ms - self.timestamp

    def is_expired(self, now_ms: int, ttl_ms: int) -> bool:
        """Whether the entry is older than ``ttl_ms`` at ``now_ms``."""
        return self.age_ms(now_ms) > ttl_ms
