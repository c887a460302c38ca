import os
import re
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_ttl_ms: int = int(os.getenv("CACHE_TTL_MS", "300000"))  # 5 minutes
    profile_cache_slot: str = os.getenv("PROFILE_CACHE_SLOT", "hellouni_profile_cache")
    post_cache_slot: str = os.getenv("POST_CACHE_SLOT", "hellouni_post_cache")
    posts_cache_slot: str = os.getenv("POSTS_CACHE_SLOT", "hello_uni_posts_cache")

    # Session-scoped storage (directory per browsing session)
    session_storage_dir: str = os.getenv("SESSION_STORAGE_DIR", ".swr_cache/session")

    # Origin-scoped storage (Redis)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    origin_storage_prefix: str = os.getenv("ORIGIN_STORAGE_PREFIX", "swr_cache:origin")

    # Images
    image_storage_id_pattern: str = os.getenv("IMAGE_STORAGE_ID_PATTERN", r"/api/storage/([^/?]+)")
    image_probe_grace_ms: int = int(os.getenv("IMAGE_PROBE_GRACE_MS", "30000"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl_ms <= 0:
            raise ValueError("CACHE_TTL_MS must be a positive number of milliseconds")

        if self.image_probe_grace_ms < 0:
            raise ValueError("IMAGE_PROBE_GRACE_MS must not be negative")

        try:
            pattern = re.compile(self.image_storage_id_pattern)
        except re.error as e:
            raise ValueError(f"IMAGE_STORAGE_ID_PATTERN is not a valid regex: {e}") from e
        if pattern.groups < 1:
            raise ValueError("IMAGE_STORAGE_ID_PATTERN must capture the storage id in a group")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
