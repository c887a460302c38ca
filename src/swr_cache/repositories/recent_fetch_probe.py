"""Recent-fetch implementation of ImageProbe.

Outside a browser there is no synchronous way to ask whether an image is
already in the HTTP cache. Instead the fetch layer records each completed
download here, and a URL counts as cached for a short grace window after.
"""

from swr_cache.config import settings
from swr_cache.utils.clock import Clock, now_ms


class RecentFetchProbe:
    """Timestamped index of recently fetched image URLs.

    This class satisfies the ImageProbe protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        grace_ms: int | None = None,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize the probe.

        Args:
            grace_ms: How long a fetch counts as cached. Defaults to settings.
            clock: Millisecond clock.
        """
        self._grace_ms = settings.image_probe_grace_ms if grace_ms is None else grace_ms
        self._clock = clock
        self._fetched_at: dict[str, int] = {}

    def record_fetch(self, url: str) -> None:
        """Record that ``url`` finished downloading just now."""
        self._fetched_at[url] = self._clock()

    def is_cached(self, url: str) -> bool:
        fetched_at = self._fetched_at.get(url)
        if fetched_at is None:
            return False
        if self._clock() - fetched_at > self._grace_ms:
            del self._fetched_at[url]
            return False
        return True
