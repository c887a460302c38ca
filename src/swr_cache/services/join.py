"""Multi-source join.

Combines several live queries that hang off one root identity into a single
composite. The join keeps an explicit table of ``{source name -> latest
state}``. Whenever any source changes, it walks the sources in declaration
order, recomputes which ones are applicable and with which arguments,
(re)subscribes or cancels as needed, and rebuilds the composite from the
table with a pure ``compose`` function.

Readiness rules:
- The first source is the root. If it resolves to absent the join is ready
  with ``found=False`` and no dependent source is started.
- A source whose arguments cannot be computed yet (``args`` returns None) is
  inapplicable and does not block readiness.
- Viewer-relative sources are inapplicable for anonymous viewers; their
  value falls back to the source's ``default``.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any, Generic, TypeVar

import structlog

from swr_cache.entities import SKIPPED, JoinResult, QueryDescriptor, SourceState, SourceStatus
from swr_cache.protocols import ReactiveSource, Subscription

logger = structlog.get_logger(__name__)

T = TypeVar("T")

JoinListener = Callable[[JoinResult[T]], None]


@dataclass(frozen=True)
class JoinContext:
    """Inputs shared by every source of one join."""

    root_id: str
    viewer_id: str | None = None


ArgsFn = Callable[[JoinContext, Mapping[str, Any]], dict[str, Any] | None]


@dataclass(frozen=True)
class SourceSpec:
    """One live query taking part in a join.

    Attributes:
        name: Field name of the source in the value table
        query: Query name sent to the transport
        args: Builds query arguments from the context and the values of
            earlier sources that have resolved; None means "skip"
        viewer_relative: Skipped when the viewer is anonymous
        default: Value used when the source is skipped or resolves to absent
    """

    name: str
    query: str
    args: ArgsFn
    viewer_relative: bool = False
    default: Any = None


class MultiSourceJoin(Generic[T]):
    """Joins independently resolving sources into one all-or-nothing composite.

    Example:
        ```python
        join = MultiSourceJoin(
            transport=transport,
            sources=[
                SourceSpec("user", "getUserByUsername", lambda ctx, _: {"username": ctx.root_id}),
                SourceSpec("follower_count", "getFollowerCount", user_id_args),
            ],
            compose=lambda values: (values["user"], values["follower_count"]),
            context=JoinContext(root_id="anna"),
        )
        join.subscribe(print)
        join.start()
        ```
    """

    def __init__(
        self,
        transport: ReactiveSource,
        sources: Sequence[SourceSpec],
        compose: Callable[[Mapping[str, Any]], T],
        context: JoinContext,
    ) -> None:
        """Initialize the join. No query starts until ``start()``.

        Args:
            transport: Live-query transport (required).
            sources: Source specs; the first one is the root.
            compose: Pure function building the composite from source values.
            context: Root identity and viewer.

        Raises:
            ValueError: If sources are empty, names repeat, or the root is viewer-relative
        """
        if not sources:
            raise ValueError("A join needs at least one source")
        names = [s.name for s in sources]
        if len(set(names)) != len(names):
            raise ValueError(f"Source names must be unique, got {names}")
        if sources[0].viewer_relative:
            raise ValueError("The root source cannot be viewer-relative")

        self._transport = transport
        self._sources = list(sources)
        self._compose = compose
        self._context = context

        self._states: dict[str, SourceState] = {name: SKIPPED for name in names}
        self._subscriptions: dict[str, Subscription] = {}
        self._listeners: list[JoinListener[T]] = []
        self._result: JoinResult[T] = JoinResult(ready=False, found=False)
        self._published: JoinResult[T] | None = None
        self._started = False
        self._evaluating = False
        self._dirty = False

    def start(self) -> None:
        """Subscribe to every applicable source."""
        if self._started:
            return
        self._started = True
        self._evaluate()

    def stop(self) -> None:
        """Cancel every subscription. No listener is called afterwards."""
        self._started = False
        for name in list(self._subscriptions):
            self._cancel(name)
        self._published = None

    def subscribe(self, listener: JoinListener[T]) -> Callable[[], None]:
        """Register a listener for ready results.

        Returns:
            Callable removing the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _cancel(self, name: str) -> None:
        subscription = self._subscriptions.pop(name, None)
        if subscription is not None:
            subscription.unsubscribe()
        self._states[name] = SKIPPED

    def _on_change(self, name: str, descriptor: QueryDescriptor, value: Any) -> None:
        if not self._started or self._states[name].descriptor != descriptor:
            return
        self._states[name] = SourceState(SourceStatus.RESOLVED, value, descriptor)
        self._evaluate()

    def _desired(self, spec: SourceSpec, resolved: Mapping[str, Any], root_absent: bool) -> QueryDescriptor | None:
        if spec is not self._sources[0] and root_absent:
            return None
        if spec.viewer_relative and self._context.viewer_id is None:
            return None
        args = spec.args(self._context, resolved)
        if args is None:
            return None
        return QueryDescriptor.of(spec.query, **args)

    def _reconcile(self) -> None:
        root = self._sources[0]
        resolved: dict[str, Any] = {}
        for spec in self._sources:
            root_state = self._states[root.name]
            root_absent = root_state.is_resolved and root_state.value is None
            desired = self._desired(spec, resolved, root_absent)
            current = self._states[spec.name]

            if desired is None:
                if current.is_applicable:
                    self._cancel(spec.name)
            elif current.descriptor != desired:
                self._cancel(spec.name)
                self._states[spec.name] = SourceState(SourceStatus.PENDING, None, desired)
                self._subscriptions[spec.name] = self._transport.subscribe(
                    desired, partial(self._on_change, spec.name, desired)
                )

            state = self._states[spec.name]
            if state.is_resolved:
                resolved[spec.name] = state.value

    def _evaluate(self) -> None:
        # Transports may deliver synchronously from inside subscribe(); nested
        # changes mark the table dirty and are picked up by the outer loop.
        if self._evaluating:
            self._dirty = True
            return

        self._evaluating = True
        try:
            while True:
                self._dirty = False
                self._reconcile()
                if not self._dirty:
                    break
        finally:
            self._evaluating = False

        self._result = self._compute()
        self._publish()

    def _compute(self) -> JoinResult[T]:
        root_state = self._states[self._sources[0].name]
        applicable = [s for s in self._states.values() if s.is_applicable]
        resolved = sum(1 for s in applicable if s.is_resolved)
        counts = {"resolved": resolved, "applicable": len(applicable)}

        if not root_state.is_resolved:
            return JoinResult(ready=False, found=False, **counts)
        if root_state.value is None:
            return JoinResult(ready=True, found=False, **counts)
        if resolved < len(applicable):
            return JoinResult(ready=False, found=True, **counts)

        values: dict[str, Any] = {}
        for spec in self._sources:
            state = self._states[spec.name]
            values[spec.name] = state.value if state.is_resolved and state.value is not None else spec.default

        return JoinResult(ready=True, found=True, value=self._compose(values), **counts)

    def _publish(self) -> None:
        if not self._started or not self._result.ready or self._result == self._published:
            return
        self._published = self._result
        logger.debug(
            "join_ready",
            root_id=self._context.root_id,
            found=self._result.found,
            sources=self._result.applicable,
        )
        for listener in list(self._listeners):
            listener(self._result)

    @property
    def result(self) -> JoinResult[T]:
        return self._result

    @property
    def ready(self) -> bool:
        return self._result.ready

    @property
    def found(self) -> bool:
        return self._result.found

    @property
    def value(self) -> T | None:
        return self._result.value

    @property
    def progress(self) -> tuple[int, int]:
        """``(resolved, applicable)`` source counts."""
        return self._result.resolved, self._result.applicable

    @property
    def states(self) -> dict[str, SourceState]:
        """Copy of the per-source state table (for testing)."""
        return dict(self._states)

    @property
    def context(self) -> JoinContext:
        return self._context
