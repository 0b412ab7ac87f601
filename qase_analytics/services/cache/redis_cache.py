"""Redis 캐시 백엔드"""

import json
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from qase_analytics.utils.log import get_logger

from .base import BaseCacheStore

logger = get_logger("cache")


class RedisCacheStore(BaseCacheStore):
    """`SETEX`/`GET`/`DEL` 기반 캐시. Redis 오류는 캐시 미스로 처리."""

    def __init__(self, url: str | None = None, client: "redis.Redis | None" = None):
        if client is None and not url:
            raise ValueError("Redis URL or client is required")
        self.r = client or redis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.r.get(key)
        except RedisError as e:
            logger.warning("Redis GET 실패 (%s): %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("손상된 캐시 항목 무시: %s", key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        try:
            await self.r.setex(key, ttl_seconds, json.dumps(value, ensure_ascii=False))
            return True
        except RedisError as e:
            logger.warning("Redis SETEX 실패 (%s): %s", key, e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.r.delete(key))
        except RedisError as e:
            logger.warning("Redis DEL 실패 (%s): %s", key, e)
            return False

    async def delete_pattern(self, pattern: str) -> int:
        try:
            keys = [key async for key in self.r.scan_iter(match=pattern)]
            if not keys:
                return 0
            return int(await self.r.delete(*keys))
        except RedisError as e:
            logger.warning("Redis 패턴 삭제 실패 (%s): %s", pattern, e)
            return 0

    async def aclose(self) -> None:
        await self.r.aclose()
