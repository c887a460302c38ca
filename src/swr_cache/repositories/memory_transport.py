"""In-process implementation of ReactiveSource.

Holds the latest result per query descriptor and pushes every published
result to the live subscribers of that descriptor. Used for tests, demos
and offline wiring; a real deployment plugs in its live-query client.
"""

from typing import Any

import structlog

from swr_cache.entities import QueryDescriptor
from swr_cache.protocols import ChangeCallback

logger = structlog.get_logger(__name__)

_MISSING = object()


class InMemorySubscription:
    """Subscription handle returned by InMemoryQueryTransport."""

    def __init__(
        self,
        transport: "InMemoryQueryTransport | None",
        descriptor: QueryDescriptor,
        on_change: ChangeCallback,
    ) -> None:
        self._transport = transport
        self._descriptor = descriptor
        self._on_change = on_change
        self._active = transport is not None

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._transport is not None:
            self._transport._detach(self)
            self._transport = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    def _deliver(self, value: Any) -> None:
        if self._active:
            self._on_change(value)


class InMemoryQueryTransport:
    """Live-query transport backed by a dict of published results.

    This class satisfies the ReactiveSource protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self) -> None:
        self._results: dict[QueryDescriptor, Any] = {}
        self._subscribers: dict[QueryDescriptor, list[InMemorySubscription]] = {}

    def subscribe(self, descriptor: QueryDescriptor, on_change: ChangeCallback) -> InMemorySubscription:
        if descriptor.skip:
            return InMemorySubscription(None, descriptor, on_change)

        subscription = InMemorySubscription(self, descriptor, on_change)
        self._subscribers.setdefault(descriptor, []).append(subscription)
        logger.debug("query_subscribed", query=descriptor.name, args=descriptor.arguments)

        result = self._results.get(descriptor, _MISSING)
        if result is not _MISSING:
            subscription._deliver(result)
        return subscription

    def publish(self, descriptor: QueryDescriptor, value: Any) -> int:
        """Record a new result and push it to live subscribers.

        Args:
            descriptor: The query whose result changed
            value: New result; None means the query resolved to "not found"

        Returns:
            Number of subscribers notified
        """
        self._results[descriptor] = value
        subscribers = list(self._subscribers.get(descriptor, ()))
        for subscription in subscribers:
            subscription._deliver(value)
        return len(subscribers)

    def retract(self, descriptor: QueryDescriptor) -> None:
        """Forget a result so new subscribers see the query as pending."""
        self._results.pop(descriptor, None)

    def subscriber_count(self, descriptor: QueryDescriptor | None = None) -> int:
        """Count live subscriptions, for one descriptor or overall."""
        if descriptor is not None:
            return len(self._subscribers.get(descriptor, ()))
        return sum(len(subs) for subs in self._subscribers.values())

    def _detach(self, subscription: InMemorySubscription) -> None:
        subs = self._subscribers.get(subscription.descriptor)
        if not subs:
            return
        subs[:] = [s for s in subs if s is not subscription]
        if not subs:
            del self._subscribers[subscription.descriptor]
