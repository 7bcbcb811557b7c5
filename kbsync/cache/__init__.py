# kbsync/cache/__init__.py
from kbsync.cache.redis_cache import RedisCache

__all__ = ["RedisCache"]
