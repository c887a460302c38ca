"""swr-cache - stale-while-revalidate caching for live-query clients.

Previously seen data reappears instantly on re-navigation and is reconciled
in the background as fresher results stream in.

Layers:
    - protocols: Interface contracts (SlotStorage, ReactiveSource, IdentityProvider, ImageProbe)
    - repositories: Concrete collaborators (memory/file/Redis storage, in-process transport)
    - services: Cache and synchronization engine
    - dto: Pydantic models (persisted table, composites, UI views)
    - entities: Domain models (internal)

Usage:
    ```python
    from swr_cache import CacheContainer
    from swr_cache.repositories import StaticIdentityProvider

    container = CacheContainer.create(transport=client, identity=StaticIdentityProvider("u2"))
    view = container.full_profile_view("anna")
    snapshot = view.mount()
    ```
"""

from swr_cache.config import get_redis_client, settings
from swr_cache.container import CacheContainer
from swr_cache.dto import CompositePost, CompositeProfile, EntityView, UserSummary
from swr_cache.entities import CacheEntry, ImageIdentity, JoinResult, QueryDescriptor
from swr_cache.exceptions import (
    IdentityPendingError,
    InvalidCacheKeyError,
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
    SwrCacheError,
)
from swr_cache.protocols import IdentityProvider, ImageProbe, ReactiveSource, SlotStorage, Subscription
from swr_cache.services import (
    CollectionCacheProvider,
    ImageLoadMemo,
    MultiSourceJoin,
    PersistentKeyedCache,
    RevalidatingView,
)
from swr_cache.utils.keys import derive_key, parse_key

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Composition root
    "CacheContainer",
    # Protocols (interfaces)
    "IdentityProvider",
    "ImageProbe",
    "ReactiveSource",
    "SlotStorage",
    "Subscription",
    # Services
    "CollectionCacheProvider",
    "ImageLoadMemo",
    "MultiSourceJoin",
    "PersistentKeyedCache",
    "RevalidatingView",
    # Entities (domain models)
    "CacheEntry",
    "ImageIdentity",
    "JoinResult",
    "QueryDescriptor",
    # DTOs
    "CompositePost",
    "CompositeProfile",
    "EntityView",
    "UserSummary",
    # Errors
    "SwrCacheError",
    "StorageError",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
    "InvalidCacheKeyError",
    "IdentityPendingError",
    # Keys
    "derive_key",
    "parse_key",
]
