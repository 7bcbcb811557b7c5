# kbsync/cache/redis_cache.py
"""
Redis-backed answer cache.

The chat layer caches answers in Redis; after a full resync those answers may
cite documents that no longer exist, so the sync service flushes the cache
once per full pass.
"""

from __future__ import annotations

from kbsync.core.exceptions import CacheError
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import CACHE

logger = get_logger(__name__)


class RedisCache:
    """
    Usage:
        cache = RedisCache("redis://localhost:6379/0")
        cache.flush_all()
    """

    def __init__(self, url: str = "redis://localhost:6379/0", client=None) -> None:
        if client is None:
            try:
                import redis
            except ImportError:
                raise RuntimeError("redis is required for the cache. Install with: pip install redis")
            client = redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_timeout=2.0,
                socket_connect_timeout=2.0,
            )
        self.url = url
        self._client = client

    def flush_all(self) -> None:
        try:
            self._client.flushall()
        except Exception as e:
            raise CacheError(f"Redis FLUSHALL failed: {e}") from e
        logger.info(f"{CACHE} Flushed Redis cache")


__all__ = ["RedisCache"]
