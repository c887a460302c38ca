"""Slot storage protocol.

Defines the durable medium a keyed cache persists its table into: a flat
namespace of named string slots. Implementations include:
- Process memory (tests, or storage-disabled environments)
- A per-session directory on disk (session scope)
- Redis (origin scope, survives app relaunch)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SlotStorage(Protocol):
    """Protocol for slot storage backends.

    All methods are synchronous and may raise ``StorageError`` subclasses
    (quota exceeded, medium unavailable). Callers decide whether to recover.
    """

    def read_slot(self, name: str) -> str | None:
        """Read a slot.

        Args:
            name: Slot name

        Returns:
            The stored string, or None if the slot is empty
        """
        ...

    def write_slot(self, name: str, data: str) -> None:
        """Replace a slot's contents.

        Args:
            name: Slot name
            data: Full new contents
        """
        ...

    def remove_slot(self, name: str) -> None:
        """Remove a slot. Removing an empty slot is not an error.

        Args:
            name: Slot name
        """
        ...
