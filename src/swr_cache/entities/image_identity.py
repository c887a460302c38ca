"""Image identity domain entity."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageIdentity:
    """An image URL plus the content address it points at, if recognizable.

    Two identities with the same ``storage_id`` refer to the same stored
    content even when their URLs differ (e.g. rotated signed URLs).

    Attributes:
        url: The URL as handed to the UI
        storage_id: Content address parsed from the URL, or None
    """

    url: str
    storage_id: str | None = None

    @classmethod
    def from_url(cls, url: str, pattern: re.Pattern[str] | str) -> "ImageIdentity":
        """Parse the content address out of ``url`` using ``pattern``.

        URLs not matching the pattern get ``storage_id=None``.
        """
        match = re.search(pattern, url)
        return cls(url=url, storage_id=match.group(1) if match else None)
