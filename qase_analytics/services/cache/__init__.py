"""Qase 응답 캐시"""

from .base import BaseCacheStore
from .factory import get_cache_store, reset_cache_store
from .memory_cache import MemoryCacheStore
from .redis_cache import RedisCacheStore

__all__ = [
    "BaseCacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "get_cache_store",
    "reset_cache_store",
]
