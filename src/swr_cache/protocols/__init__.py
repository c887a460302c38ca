"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory → disk → Redis storage, ...)
- Unit testing with in-process fakes
- Clear separation between the cache core and its collaborators
"""

from .identity_provider import IdentityProvider
from .image_probe import ImageProbe
from .reactive_source import ChangeCallback, ReactiveSource, Subscription
from .slot_storage import SlotStorage

__all__ = [
    "ChangeCallback",
    "IdentityProvider",
    "ImageProbe",
    "ReactiveSource",
    "SlotStorage",
    "Subscription",
]
