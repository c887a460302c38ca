"""Join result domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class JoinResult(Generic[T]):
    """Composite state published by a multi-source join.

    Attributes:
        ready: Every applicable source has resolved (or the root is absent)
        found: The root resolved to a value; False when it resolved to absent
        value: The composite, only set when ready and found
        resolved: Number of applicable sources that have resolved
        applicable: Number of sources currently applicable
    """

    ready: bool
    found: bool
    value: T | None = None
    resolved: int = 0
    applicable: int = 0
