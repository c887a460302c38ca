"""Stale-while-revalidate entity view.

Per mounted view:

1. On mount the keyed cache is read synchronously. A hit is displayed
   immediately with no loading state (SEEDED_FROM_CACHE).
2. The multi-source join is always started in the background.
3. When the join is ready and found, the composite is written to the cache
   (refreshing its TTL) and replaces the displayed value only if it is
   structurally different, so an unchanged refresh never re-renders.
4. "Not found" is reported only when the join says so and nothing is
   displayed; a stale cached value wins over a not-found result.
"""

from collections.abc import Callable
from enum import Enum
from types import TracebackType
from typing import Any, Generic, TypeVar

import structlog

from swr_cache.dto import EntityView
from swr_cache.entities import JoinResult

from .join import MultiSourceJoin
from .keyed_cache import PersistentKeyedCache

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ViewListener = Callable[[EntityView], None]


class ViewState(Enum):
    """Where a mounted view is in its revalidation cycle."""

    SEEDED_FROM_CACHE = "seeded_from_cache"
    AWAITING_SOURCES = "awaiting_sources"
    RECONCILED = "reconciled"


class RevalidatingView(Generic[T]):
    """Serves a cached entity at once and reconciles it with live sources.

    Example:
        ```python
        view = RevalidatingView(cache=profiles, key=derive_key("anna"), join=join)
        view.subscribe(render)
        first = view.mount()  # cached data or is_loading=True
        ...
        view.unmount()
        ```
    """

    def __init__(
        self,
        cache: PersistentKeyedCache[T],
        key: str,
        join: MultiSourceJoin[T],
    ) -> None:
        """Initialize the view. Nothing is read until ``mount()``.

        Args:
            cache: Keyed cache holding composites of this kind (required).
            key: Cache key for this (resource, viewer) pair.
            join: Join producing fresh composites (required).
        """
        self._cache = cache
        self._key = key
        self._join = join
        self._displayed: T | None = None
        self._not_found = False
        self._state = ViewState.AWAITING_SOURCES
        self._mounted = False
        self._listeners: list[ViewListener] = []
        self._detach_join: Callable[[], None] | None = None

    def mount(self) -> EntityView:
        """Seed from the cache and start revalidating.

        Returns:
            The first snapshot to render
        """
        if self._mounted:
            return self.snapshot()
        self._mounted = True

        entry = self._cache.get(self._key)
        if entry is not None:
            self._displayed = entry.value
            self._state = ViewState.SEEDED_FROM_CACHE
            logger.debug("view_seeded", key=self._key, cached_at=entry.timestamp)

        self._detach_join = self._join.subscribe(self._on_join_ready)
        self._join.start()
        return self.snapshot()

    def unmount(self) -> None:
        """Stop the join. Results arriving afterwards are ignored."""
        if not self._mounted:
            return
        self._mounted = False
        if self._detach_join is not None:
            self._detach_join()
            self._detach_join = None
        self._join.stop()

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a re-render callback, called only on visible changes.

        Returns:
            Callable removing the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _on_join_ready(self, result: JoinResult[T]) -> None:
        if not self._mounted:
            return

        self._state = ViewState.RECONCILED
        changed = False

        if result.found and result.value is not None:
            self._cache.set(self._key, result.value)
            if self._displayed is None or self._displayed != result.value:
                self._displayed = result.value
                changed = True
            if self._not_found:
                self._not_found = False
                changed = True
        elif self._displayed is None and not self._not_found:
            self._not_found = True
            changed = True

        if changed:
            snapshot = self.snapshot()
            for listener in list(self._listeners):
                listener(snapshot)

    def snapshot(self) -> EntityView:
        """Current ``{data, is_loading, not_found}`` for the UI."""
        return EntityView(
            data=self._displayed,
            is_loading=self._displayed is None and not self._not_found,
            not_found=self._not_found,
        )

    def __enter__(self) -> "RevalidatingView[T]":
        self.mount()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()

    @property
    def data(self) -> Any:
        return self._displayed

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def key(self) -> str:
        return self._key

    @property
    def mounted(self) -> bool:
        return self._mounted
