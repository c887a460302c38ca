"""Query descriptor and per-source state entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class QueryDescriptor:
    """Identifies one live query: a query name and its arguments.

    ``skip=True`` marks a query that must not be started yet because its
    inputs are unavailable.
    """

    name: str
    args: tuple[tuple[str, Any], ...] = ()
    skip: bool = False

    @classmethod
    def of(cls, name: str, **args: Any) -> "QueryDescriptor":
        """Build a descriptor from keyword arguments (order-insensitive)."""
        return cls(name=name, args=tuple(sorted(args.items())))

    @classmethod
    def skipped(cls, name: str) -> "QueryDescriptor":
        """Build a descriptor for a query that is not startable."""
        return cls(name=name, skip=True)

    @property
    def arguments(self) -> dict[str, Any]:
        return dict(self.args)


class SourceStatus(Enum):
    """Lifecycle of one source inside a join."""

    SKIPPED = "skipped"
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class SourceState:
    """Latest known state of one source.

    A RESOLVED source with ``value=None`` resolved to "not found".
    """

    status: SourceStatus
    value: Any = None
    descriptor: QueryDescriptor | None = field(default=None, compare=False)

    @property
    def is_resolved(self) -> bool:
        return self.status is SourceStatus.RESOLVED

    @property
    def is_applicable(self) -> bool:
        return self.status is not SourceStatus.SKIPPED


SKIPPED = SourceState(SourceStatus.SKIPPED)
