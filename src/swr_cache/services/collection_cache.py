"""Collection cache provider.

Named lists of entity summaries ("feed", "profile:<id>", ...) under the same
TTL discipline as the keyed cache. One provider is built by the composition
root and handed to every component that reads or writes lists, so they all
share the same table.
"""

import copy
from typing import Any

from swr_cache.protocols import SlotStorage
from swr_cache.utils.clock import Clock, now_ms

from .keyed_cache import PersistentKeyedCache


class CollectionCacheProvider:
    """Shared cache of named post lists, persisted to origin-scoped storage.

    Example:
        ```python
        posts = CollectionCacheProvider(storage=RedisSlotStorage.create(), slot="hello_uni_posts_cache")
        posts.set_posts("feed", feed)
        cached = posts.get_posts("feed")  # None once older than the TTL
        ```
    """

    def __init__(
        self,
        storage: SlotStorage,
        slot: str,
        ttl_ms: int | None = None,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize the provider and load persisted lists.

        Args:
            storage: Origin-scoped slot storage (required).
            slot: Slot holding every list.
            ttl_ms: List lifetime. Defaults to settings.
            clock: Millisecond clock.
        """
        self._cache: PersistentKeyedCache[list[Any]] = PersistentKeyedCache(
            storage=storage,
            slot=slot,
            ttl_ms=ttl_ms,
            value_type=list[Any],
            clock=clock,
        )

    def set_posts(self, label: str, posts: list[Any]) -> None:
        """Cache a copy of ``posts`` under ``label``, replacing any previous list."""
        self._cache.set(label, copy.deepcopy(list(posts)))

    def get_posts(self, label: str) -> list[Any] | None:
        """Copy of the cached list for ``label``, or None when missing or expired."""
        entry = self._cache.get(label)
        return copy.deepcopy(entry.value) if entry is not None else None

    def clear_cache(self) -> None:
        """Forget every list and remove the storage slot."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
