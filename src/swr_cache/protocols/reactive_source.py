"""Reactive source protocol.

A reactive source runs live queries against the remote store and pushes
every new result to the subscriber. Until the first push the query is
pending; a pushed ``None`` means the query resolved to "not found".
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from swr_cache.entities import QueryDescriptor

ChangeCallback = Callable[[Any], None]


@runtime_checkable
class Subscription(Protocol):
    """Handle for a live query. After ``unsubscribe()`` no callback fires."""

    def unsubscribe(self) -> None:
        ...

    @property
    def active(self) -> bool:
        ...


@runtime_checkable
class ReactiveSource(Protocol):
    """Protocol for the live-query transport."""

    def subscribe(self, descriptor: QueryDescriptor, on_change: ChangeCallback) -> Subscription:
        """Start a live query.

        The transport may call ``on_change`` synchronously from inside
        ``subscribe`` when it already holds a result.

        Args:
            descriptor: Query name and arguments; ``skip`` descriptors are inert
            on_change: Called with each new result (None = resolved absent)

        Returns:
            Subscription handle used to cancel the query
        """
        ...
