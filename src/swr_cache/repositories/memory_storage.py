"""In-memory implementation of SlotStorage.

Backs caches in tests and in environments where durable storage is
disabled. An optional character quota mimics browser storage limits.
"""

from swr_cache.exceptions import StorageQuotaExceededError, StorageUnavailableError


class MemorySlotStorage:
    """Dict-backed slot storage with an optional quota.

    This class satisfies the SlotStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, quota_chars: int | None = None, available: bool = True) -> None:
        """Initialize the storage.

        Args:
            quota_chars: Maximum total characters across all slots. None = unlimited.
            available: When False every operation raises StorageUnavailableError.
        """
        self._slots: dict[str, str] = {}
        self._quota = quota_chars
        self.available = available

    def _check_available(self, name: str) -> None:
        if not self.available:
            raise StorageUnavailableError("Storage is disabled", slot=name)

    def read_slot(self, name: str) -> str | None:
        self._check_available(name)
        return self._slots.get(name)

    def write_slot(self, name: str, data: str) -> None:
        self._check_available(name)
        if self._quota is not None:
            used = sum(len(v) for k, v in self._slots.items() if k != name)
            if used + len(data) > self._quota:
                raise StorageQuotaExceededError(slot=name, size=len(data), quota=self._quota)
        self._slots[name] = data

    def remove_slot(self, name: str) -> None:
        self._check_available(name)
        self._slots.pop(name, None)

    @property
    def slots(self) -> dict[str, str]:
        """Copy of the raw slot contents (for testing)."""
        return dict(self._slots)
