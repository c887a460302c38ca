"""Exceptions raised by the cache layer.

Storage backends raise ``StorageError`` subclasses; the keyed cache catches
them at its boundary so they never reach view code. Key and identity errors
are programming errors and propagate to the caller.
"""

from typing import Any


class SwrCacheError(Exception):
    """Base exception for cache-layer errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class StorageError(SwrCacheError):
    """Raised when a storage slot cannot be read, written or removed."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        slot: str | None = None,
        error_code: str = "STORAGE_ERROR",
        original_error: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if slot:
            details["slot"] = slot
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(message=message, error_code=error_code, details=details)
        if original_error:
            self.__cause__ = original_error


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the storage quota."""

    def __init__(
        self,
        slot: str | None = None,
        size: int | None = None,
        quota: int | None = None,
    ) -> None:
        super().__init__(
            message=f"Storage quota exceeded writing {size} bytes (quota {quota})",
            slot=slot,
            error_code="STORAGE_QUOTA_EXCEEDED",
        )
        self.details["size"] = size
        self.details["quota"] = quota


class StorageUnavailableError(StorageError):
    """Raised when the storage medium is disabled or unreachable."""

    def __init__(
        self,
        message: str = "Storage unavailable",
        slot: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            slot=slot,
            error_code="STORAGE_UNAVAILABLE",
            original_error=original_error,
        )


class InvalidCacheKeyError(SwrCacheError, ValueError):
    """Raised when a string is not a key produced by ``derive_key``."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid cache key {key!r}: {reason}",
            error_code="INVALID_CACHE_KEY",
            details={"key": key},
        )


class IdentityPendingError(SwrCacheError):
    """Raised when a viewer-sensitive key is requested before identity resolves."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            message=f"Viewer identity not resolved yet; cannot key {resource!r}",
            error_code="IDENTITY_PENDING",
            details={"resource": resource},
        )
