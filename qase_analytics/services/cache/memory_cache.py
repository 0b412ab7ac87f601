"""프로세스 내 TTL 캐시"""

import fnmatch
import json
import threading
import time
from typing import Any, Callable

from .base import BaseCacheStore


class MemoryCacheStore(BaseCacheStore):
    """딕셔너리 기반 캐시

    값은 JSON 문자열로 보관되어 조회할 때마다 새 객체가 반환됩니다.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, raw = entry
            if expires_at <= self._clock():
                del self._data[key]
                return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        raw = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._data[key] = (self._clock() + ttl_seconds, raw)
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        with self._lock:
            keys = [k for k in self._data if fnmatch.fnmatchcase(k, pattern)]
            for key in keys:
                del self._data[key]
        return len(keys)

    def __len__(self) -> int:
        return len(self._data)
