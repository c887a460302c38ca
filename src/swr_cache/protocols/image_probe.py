"""Image probe protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageProbe(Protocol):
    """Synchronous check whether an image's bytes are already local.

    Must not touch the network. May raise; callers treat any error as
    "not cached".
    """

    def is_cached(self, url: str) -> bool:
        ...
