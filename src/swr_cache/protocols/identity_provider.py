"""Identity provider protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdentityProvider(Protocol):
    """Supplies the current viewer, once the session has been resolved."""

    def is_resolved(self) -> bool:
        """Whether the session lookup has finished."""
        ...

    def viewer_id(self) -> str | None:
        """Current viewer id, or None for an anonymous caller."""
        ...
