"""First-visit tracking for profile pages.

A loading spinner is only worth showing the first time a profile is opened
in a session; afterwards cached data is expected to be on hand.
"""

import structlog

from swr_cache.exceptions import StorageError
from swr_cache.protocols import SlotStorage

logger = structlog.get_logger(__name__)

VISITED_MARKER = "true"


class VisitTracker:
    """Session-scoped record of visited profiles."""

    def __init__(self, storage: SlotStorage, prefix: str = "profile_visited_") -> None:
        self._storage = storage
        self._prefix = prefix

    def _slot(self, profile_id: str) -> str:
        return f"{self._prefix}{profile_id}"

    def is_first_visit(self, profile_id: str) -> bool:
        """True unless ``profile_id`` was marked visited in this session.

        Unreadable storage counts as a first visit.
        """
        try:
            return self._storage.read_slot(self._slot(profile_id)) is None
        except StorageError as e:
            logger.debug("visit_lookup_failed", profile_id=profile_id, error=e.message)
            return True

    def mark_visited(self, profile_id: str) -> None:
        try:
            self._storage.write_slot(self._slot(profile_id), VISITED_MARKER)
        except StorageError as e:
            logger.warning("visit_mark_failed", profile_id=profile_id, error=e.message)
