"""Image load memo.

Remembers which images have already been displayed in this process so a
component can skip the shimmer placeholder on the next paint. Images are
recognized by URL, by the content address embedded in the URL (so a rotated
signed URL for the same stored file still counts), or by asking an
``ImageProbe`` whether the bytes are already local.
"""

import re

import structlog

from swr_cache.config import settings
from swr_cache.entities import ImageIdentity
from swr_cache.protocols import ImageProbe
from swr_cache.utils.placeholders import SHIMMER_PLACEHOLDERS

logger = structlog.get_logger(__name__)


class ImageLoadMemo:
    """Process-lifetime record of already loaded images.

    Entries are never removed; the memo is cleared only by restarting the
    process.
    """

    def __init__(
        self,
        probe: ImageProbe | None = None,
        storage_id_pattern: str | None = None,
    ) -> None:
        """Initialize the memo.

        Args:
            probe: Optional last-resort check for locally cached bytes.
            storage_id_pattern: Regex whose first group is the content address.
                Defaults to settings.
        """
        self._probe = probe
        self._pattern = re.compile(storage_id_pattern or settings.image_storage_id_pattern)
        self._loaded_urls: set[str] = set()
        self._urls_by_storage_id: dict[str, list[str]] = {}

    def identify(self, url: str) -> ImageIdentity:
        """Parse ``url`` into an ImageIdentity."""
        return ImageIdentity.from_url(url, self._pattern)

    def _record(self, identity: ImageIdentity) -> None:
        self._loaded_urls.add(identity.url)
        if identity.storage_id is None:
            return
        urls = self._urls_by_storage_id.setdefault(identity.storage_id, [])
        if identity.url not in urls:
            urls.append(identity.url)

    def _probe_cached(self, url: str) -> bool:
        if self._probe is None:
            return False
        try:
            return bool(self._probe.is_cached(url))
        except Exception as e:
            logger.debug("image_probe_failed", url=url, error=str(e))
            return False

    def is_loaded(self, url: str | None) -> bool:
        """Check whether an image can be shown without a placeholder.

        Args:
            url: Image URL; an empty URL has nothing to wait for

        Returns:
            True if the URL, its content address, or the probe says loaded
        """
        if not url:
            return True

        if url in self._loaded_urls:
            return True

        identity = self.identify(url)
        if identity.storage_id is not None and self._urls_by_storage_id.get(identity.storage_id):
            self._record(identity)
            return True

        if self._probe_cached(url):
            self._record(identity)
            return True

        return False

    def mark_loaded(self, url: str | None) -> None:
        """Record a successfully decoded image. Idempotent."""
        if url:
            self._record(self.identify(url))

    def urls_for(self, storage_id: str) -> list[str]:
        """Every URL seen so far for a content address."""
        return list(self._urls_by_storage_id.get(storage_id, ()))

    def placeholder_for(self, url: str | None, aspect: str = "square") -> str | None:
        """Placeholder to paint first, or None when the image can show at once.

        Raises:
            KeyError: If ``aspect`` is not a known placeholder shape
        """
        if self.is_loaded(url):
            return None
        return SHIMMER_PLACEHOLDERS[aspect]

    def __len__(self) -> int:
        return len(self._loaded_urls)
