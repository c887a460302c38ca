"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT persisted directly - the dto package
holds the pydantic models for that.
"""

from .cache_entry import CacheEntry
from .image_identity import ImageIdentity
from .join_result import JoinResult
from .query import SKIPPED, QueryDescriptor, SourceState, SourceStatus

__all__ = [
    "CacheEntry",
    "ImageIdentity",
    "JoinResult",
    "QueryDescriptor",
    "SourceState",
    "SourceStatus",
    "SKIPPED",
]
