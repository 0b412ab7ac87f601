"""캐시 저장소 팩토리"""

from qase_analytics.settings import settings

from .base import BaseCacheStore
from .memory_cache import MemoryCacheStore
from .redis_cache import RedisCacheStore

_cache_store: BaseCacheStore | None = None


def get_cache_store() -> BaseCacheStore:
    """설정에 따라 캐시 저장소 반환 (프로세스 내 싱글톤)

    Returns:
        REDIS_URL이 있으면 RedisCacheStore, 없으면 MemoryCacheStore
    """
    global _cache_store
    if _cache_store is None:
        if settings.redis_url:
            _cache_store = RedisCacheStore(settings.redis_url)
        else:
            _cache_store = MemoryCacheStore()
    return _cache_store


def reset_cache_store() -> None:
    """싱글톤 초기화 (테스트용)"""
    global _cache_store
    _cache_store = None
