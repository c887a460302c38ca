"""Persistent keyed cache.

A TTL-bounded key -> value table kept in memory and mirrored, in full, into
one storage slot after every write. Expiry is lazy: an entry is checked
when it is read, and nothing sweeps the table in the background.

Storage and serialization failures stop at this boundary. A failed load
yields an empty cache, a failed flush leaves the in-memory write in place,
and both are logged.
"""

from typing import Any, Generic, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from swr_cache.config import settings
from swr_cache.dto import PersistedEntry, raw_table_adapter, table_adapter
from swr_cache.entities import CacheEntry
from swr_cache.exceptions import StorageError
from swr_cache.protocols import SlotStorage
from swr_cache.utils.clock import Clock, now_ms

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class PersistentKeyedCache(Generic[T]):
    """TTL-bounded key/value cache persisted as a single storage slot.

    Values must be representable by pydantic in JSON mode. Pass
    ``value_type`` to get typed values (e.g. a pydantic model) back after a
    reload; with the default ``Any`` they come back as plain JSON data.

    Example:
        ```python
        from swr_cache.repositories import FileSlotStorage
        from swr_cache.services import PersistentKeyedCache
        from swr_cache.dto import CompositeProfile

        profiles = PersistentKeyedCache(
            storage=FileSlotStorage.create(),
            slot="hellouni_profile_cache",
            value_type=CompositeProfile,
        )
        profiles.set("anna:anon", profile)
        entry = profiles.get("anna:anon")
        ```
    """

    def __init__(
        self,
        storage: SlotStorage,
        slot: str,
        ttl_ms: int | None = None,
        value_type: Any = Any,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize the cache and load any persisted table.

        Args:
            storage: Slot storage backend (required).
            slot: Slot holding the serialized table.
            ttl_ms: Entry lifetime in milliseconds. Defaults to settings.
            value_type: Type used to validate values read back from storage.
            clock: Millisecond clock.
        """
        self._storage = storage
        self._slot = slot
        self._ttl_ms = settings.cache_ttl_ms if ttl_ms is None else ttl_ms
        self._clock = clock
        self._value_adapter: TypeAdapter[Any] = TypeAdapter(value_type)
        self._entries: dict[str, CacheEntry[T]] = {}

        self._load()

    @classmethod
    def create(
        cls,
        storage: SlotStorage,
        slot: str,
        value_type: Any = Any,
        ttl_ms: int | None = None,
    ) -> "PersistentKeyedCache[Any]":
        """Factory method using the wall clock and configured TTL.

        Args:
            storage: Slot storage backend (required).
            slot: Slot holding the serialized table.
            value_type: Type used to validate values read back from storage.
            ttl_ms: Entry lifetime. If None, uses settings.

        Returns:
            Configured PersistentKeyedCache
        """
        return cls(storage=storage, slot=slot, ttl_ms=ttl_ms, value_type=value_type)

    def _load(self) -> None:
        try:
            raw = self._storage.read_slot(self._slot)
        except StorageError as e:
            logger.warning("cache_load_failed", slot=self._slot, error=e.message)
            return

        if raw is None:
            return

        try:
            rows = raw_table_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("cache_load_corrupt", slot=self._slot, errors=e.error_count())
            return

        now = self._clock()
        expired = invalid = 0
        for key, data in rows.items():
            try:
                row = PersistedEntry.model_validate(data)
            except ValidationError:
                invalid += 1
                continue
            if now - row.timestamp > self._ttl_ms:
                expired += 1
                continue
            try:
                value = self._value_adapter.validate_python(row.value)
            except ValidationError:
                invalid += 1
                continue
            self._entries[key] = CacheEntry(value=value, timestamp=row.timestamp)

        logger.debug(
            "cache_loaded",
            slot=self._slot,
            entries=len(self._entries),
            expired=expired,
            invalid=invalid,
        )

    def _flush(self) -> bool:
        try:
            rows = {
                key: PersistedEntry(
                    value=self._value_adapter.dump_python(entry.value, mode="json"),
                    timestamp=entry.timestamp,
                )
                for key, entry in self._entries.items()
            }
            data = table_adapter.dump_json(rows).decode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            logger.warning("cache_serialize_failed", slot=self._slot, error=str(e))
            return False

        try:
            self._storage.write_slot(self._slot, data)
        except StorageError as e:
            logger.warning(
                "cache_flush_failed",
                slot=self._slot,
                error_code=e.error_code,
                error=e.message,
            )
            return False
        return True

    def get(self, key: str) -> CacheEntry[T] | None:
        """Read an entry, evicting it if it has outlived the TTL.

        Args:
            key: A key from ``derive_key``

        Returns:
            The entry, or None when missing or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock(), self._ttl_ms):
            del self._entries[key]
            self._flush()
            logger.debug("cache_entry_expired", slot=self._slot, key=key)
            return None

        return entry

    def set(self, key: str, value: T) -> CacheEntry[T]:
        """Write an entry and persist the table.

        The in-memory write always sticks; a persistence failure is logged.

        Args:
            key: A key from ``derive_key``
            value: Snapshot to cache

        Returns:
            The entry now held in memory
        """
        entry = CacheEntry(value=value, timestamp=self._clock())
        self._entries[key] = entry
        self._flush()
        return entry

    def delete(self, key: str) -> None:
        """Remove an entry and persist the table."""
        if self._entries.pop(key, None) is not None:
            self._flush()

    def clear(self) -> None:
        """Drop every entry and remove the storage slot."""
        self._entries.clear()
        try:
            self._storage.remove_slot(self._slot)
        except StorageError as e:
            logger.warning("cache_clear_failed", slot=self._slot, error=e.message)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if not entry.is_expired(now, self._ttl_ms))

    @property
    def slot(self) -> str:
        return self._slot

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms
