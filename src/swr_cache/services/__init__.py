"""Service layer: the cache and synchronization engine.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    View -> Join -> ReactiveSource
    View -> PersistentKeyedCache -> SlotStorage
"""

from .collection_cache import CollectionCacheProvider
from .composites import compose_post, compose_profile, post_join, profile_join
from .image_memo import ImageLoadMemo
from .join import JoinContext, MultiSourceJoin, SourceSpec
from .keyed_cache import PersistentKeyedCache
from .revalidate import RevalidatingView, ViewState
from .visit_tracker import VisitTracker

__all__ = [
    "CollectionCacheProvider",
    "ImageLoadMemo",
    "JoinContext",
    "MultiSourceJoin",
    "PersistentKeyedCache",
    "RevalidatingView",
    "SourceSpec",
    "ViewState",
    "VisitTracker",
    "compose_post",
    "compose_profile",
    "post_join",
    "profile_join",
]
