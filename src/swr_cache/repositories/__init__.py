"""Repository layer: concrete collaborators behind the protocols.

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from swr_cache.protocols import IdentityProvider, ImageProbe, ReactiveSource, SlotStorage

from .file_storage import FileSlotStorage
from .memory_storage import MemorySlotStorage
from .memory_transport import InMemoryQueryTransport, InMemorySubscription
from .recent_fetch_probe import RecentFetchProbe
from .redis_storage import RedisSlotStorage
from .static_identity import StaticIdentityProvider

__all__ = [
    "IdentityProvider",
    "ImageProbe",
    "ReactiveSource",
    "SlotStorage",
    "FileSlotStorage",
    "MemorySlotStorage",
    "InMemoryQueryTransport",
    "InMemorySubscription",
    "RecentFetchProbe",
    "RedisSlotStorage",
    "StaticIdentityProvider",
]
