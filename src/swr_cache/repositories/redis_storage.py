"""Redis implementation of SlotStorage.

Origin-scoped storage: slots live in Redis under a shared prefix, so lists
cached by one app launch are still there for the next.
"""

import redis
import structlog

from swr_cache.config import get_redis_client, settings
from swr_cache.exceptions import StorageQuotaExceededError, StorageUnavailableError

logger = structlog.get_logger(__name__)


class RedisSlotStorage:
    """Redis string-per-slot storage.

    This class satisfies the SlotStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis slot storage.

        Args:
            redis_client: Redis client instance. If None, creates default.
            prefix: Key prefix for all slots. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = prefix or settings.origin_storage_prefix

    @classmethod
    def create(cls, prefix: str | None = None) -> "RedisSlotStorage":
        """Factory method to create RedisSlotStorage with defaults.

        Args:
            prefix: Key prefix. If None, uses settings.

        Returns:
            Configured RedisSlotStorage
        """
        return cls(prefix=prefix)

    def _key(self, name: str) -> str:
        return f"{self._prefix}:{name}"

    def _translate(self, name: str, error: redis.RedisError) -> Exception:
        if isinstance(error, redis.ResponseError) and str(error).startswith("OOM"):
            quota_error = StorageQuotaExceededError(slot=name)
            quota_error.__cause__ = error
            return quota_error
        return StorageUnavailableError(f"Redis slot operation failed: {error}", slot=name, original_error=error)

    def _undecodable(self, name: str, error: UnicodeDecodeError) -> StorageUnavailableError:
        return StorageUnavailableError(f"Slot is not valid UTF-8: {error.reason}", slot=name, original_error=error)

    def read_slot(self, name: str) -> str | None:
        try:
            raw = self._client.get(self._key(name))
        except redis.RedisError as e:
            raise self._translate(name, e) from e
        except UnicodeDecodeError as e:
            # decode_responses=True clients decode inside get()
            raise self._undecodable(name, e) from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise self._undecodable(name, e) from e
        return str(raw)

    def write_slot(self, name: str, data: str) -> None:
        try:
            self._client.set(self._key(name), data)
        except redis.RedisError as e:
            raise self._translate(name, e) from e

    def remove_slot(self, name: str) -> None:
        try:
            self._client.delete(self._key(name))
        except redis.RedisError as e:
            raise self._translate(name, e) from e

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("redis_health_check_failed", error=str(e))
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
