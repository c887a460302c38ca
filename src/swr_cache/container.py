"""Composition root.

Builds the process-wide cache instances once and hands them out explicitly:

1. Storage (session-scoped for entity caches, origin-scoped for lists)
2. Keyed caches, collection provider, image memo, visit tracker
3. View factories wiring a keyed cache to a fresh join per mount

Nothing here is module-level state; the application owns one container
for its lifetime.
"""

import structlog

from swr_cache.config import settings
from swr_cache.dto import CompositePost, CompositeProfile
from swr_cache.exceptions import IdentityPendingError
from swr_cache.protocols import IdentityProvider, ReactiveSource, SlotStorage
from swr_cache.repositories import FileSlotStorage, RecentFetchProbe, RedisSlotStorage
from swr_cache.services import (
    CollectionCacheProvider,
    ImageLoadMemo,
    PersistentKeyedCache,
    RevalidatingView,
    VisitTracker,
    post_join,
    profile_join,
)
from swr_cache.utils.clock import Clock, now_ms
from swr_cache.utils.keys import derive_key

logger = structlog.get_logger(__name__)


class CacheContainer:
    """Owns the cache singletons and builds entity views.

    Example:
        ```python
        container = CacheContainer.create(transport=client, identity=session)

        with container.full_profile_view("anna") as view:
            render(view.snapshot())
        ```
    """

    def __init__(
        self,
        transport: ReactiveSource,
        identity: IdentityProvider,
        session_storage: SlotStorage,
        origin_storage: SlotStorage,
        ttl_ms: int | None = None,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize every cache from the given storage.

        Args:
            transport: Live-query transport (required).
            identity: Session identity provider (required).
            session_storage: Storage for entity caches and visit markers.
            origin_storage: Storage for collection lists.
            ttl_ms: Entry lifetime for all caches. Defaults to settings.
            clock: Millisecond clock shared by every cache.
        """
        self.transport = transport
        self.identity = identity

        self.profile_cache: PersistentKeyedCache[CompositeProfile] = PersistentKeyedCache(
            storage=session_storage,
            slot=settings.profile_cache_slot,
            ttl_ms=ttl_ms,
            value_type=CompositeProfile,
            clock=clock,
        )
        self.post_cache: PersistentKeyedCache[CompositePost] = PersistentKeyedCache(
            storage=session_storage,
            slot=settings.post_cache_slot,
            ttl_ms=ttl_ms,
            value_type=CompositePost,
            clock=clock,
        )
        self.collections = CollectionCacheProvider(
            storage=origin_storage,
            slot=settings.posts_cache_slot,
            ttl_ms=ttl_ms,
            clock=clock,
        )
        self.image_probe = RecentFetchProbe(clock=clock)
        self.image_memo = ImageLoadMemo(probe=self.image_probe)
        self.visits = VisitTracker(storage=session_storage)

    @classmethod
    def create(
        cls,
        transport: ReactiveSource,
        identity: IdentityProvider,
        session_id: str | None = None,
    ) -> "CacheContainer":
        """Factory method with file-backed session storage and Redis origin storage.

        Args:
            transport: Live-query transport (required).
            identity: Session identity provider (required).
            session_id: Isolates this session's storage directory.

        Returns:
            Configured CacheContainer
        """
        container = cls(
            transport=transport,
            identity=identity,
            session_storage=FileSlotStorage.create(session_id=session_id),
            origin_storage=RedisSlotStorage.create(),
        )
        logger.info(
            "cache_container_ready",
            ttl_ms=settings.cache_ttl_ms,
            profile_entries=len(container.profile_cache),
            post_entries=len(container.post_cache),
            collections=len(container.collections),
        )
        return container

    def viewer_key(self, resource_id: str) -> str:
        """Cache key for ``resource_id`` as seen by the current viewer.

        Raises:
            IdentityPendingError: If the session has not resolved yet
        """
        if not self.identity.is_resolved():
            raise IdentityPendingError(resource_id)
        return derive_key(resource_id, self.identity.viewer_id())

    def full_profile_view(self, username: str) -> RevalidatingView[CompositeProfile]:
        """Profile view: user, follower/following counts and follow flag."""
        key = self.viewer_key(username)
        return RevalidatingView(
            cache=self.profile_cache,
            key=key,
            join=profile_join(self.transport, username, self.identity.viewer_id()),
        )

    def cached_post_view(self, post_id: str) -> RevalidatingView[CompositePost]:
        """Single post view, personalized for the current viewer."""
        key = self.viewer_key(post_id)
        return RevalidatingView(
            cache=self.post_cache,
            key=key,
            join=post_join(self.transport, post_id, self.identity.viewer_id()),
        )

    def reset_session(self) -> None:
        """Drop viewer-scoped caches (logout). Lists and images are kept."""
        self.profile_cache.clear()
        self.post_cache.clear()
