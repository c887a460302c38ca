"""Filesystem implementation of SlotStorage.

Each slot is one file inside a directory. Pointing the directory at a
per-session location gives session-scoped storage: a new session starts
with an empty directory and the previous session's slots are never read.
"""

import errno
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

import structlog

from swr_cache.config import settings
from swr_cache.exceptions import StorageQuotaExceededError, StorageUnavailableError

logger = structlog.get_logger(__name__)

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileSlotStorage:
    """Directory-backed slot storage with atomic writes.

    This class satisfies the SlotStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, directory: str | Path) -> None:
        """Initialize the storage.

        Args:
            directory: Directory holding one file per slot. Created on first write.
        """
        self._directory = Path(directory)

    @classmethod
    def create(cls, session_id: str | None = None) -> "FileSlotStorage":
        """Factory method using the configured session storage directory.

        Args:
            session_id: Optional sub-directory isolating one session.

        Returns:
            Configured FileSlotStorage
        """
        directory = Path(settings.session_storage_dir)
        if session_id:
            directory = directory / quote(session_id, safe="")
        return cls(directory)

    def _path(self, name: str) -> Path:
        return self._directory / f"{quote(name, safe='')}.json"

    def _translate(self, name: str, error: OSError) -> Exception:
        if error.errno in _QUOTA_ERRNOS:
            quota_error = StorageQuotaExceededError(slot=name)
            quota_error.__cause__ = error
            return quota_error
        return StorageUnavailableError(f"Slot I/O failed: {error}", slot=name, original_error=error)

    def read_slot(self, name: str) -> str | None:
        try:
            return self._path(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise StorageUnavailableError(
                f"Slot is not valid UTF-8: {e.reason}", slot=name, original_error=e
            ) from e
        except OSError as e:
            raise self._translate(name, e) from e

    def write_slot(self, name: str, data: str) -> None:
        path = self._path(name)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".slot-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise self._translate(name, e) from e

        logger.debug("slot_written", slot=name, size=len(data), path=str(path))

    def remove_slot(self, name: str) -> None:
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as e:
            raise self._translate(name, e) from e

    @property
    def directory(self) -> Path:
        return self._directory
