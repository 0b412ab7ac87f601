"""세션 단위 키-값 저장소

용량(LRU)과 TTL 정책을 주입받는 좁은 get/set/delete 인터페이스.
대화 메모리, 프로젝트 컨텍스트, 에이전트 캐시가 공통으로 사용합니다.
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, Iterator, Optional, TypeVar

V = TypeVar("V")


class SessionStore(Generic[V]):
    """LRU + TTL 세션 맵

    Args:
        max_entries: 최대 엔트리 수 (초과 시 가장 오래 사용되지 않은 항목 제거, None이면 무제한)
        ttl_seconds: 마지막 사용 이후 만료 시간 (None이면 만료 없음)
        clock: 단조 시계 (테스트 주입용)
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, V]]" = OrderedDict()
        self._lock = threading.RLock()

    def _expired(self, touched_at: float) -> bool:
        return self.ttl_seconds is not None and self._clock() - touched_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            touched_at, value = entry
            if self._expired(touched_at):
                del self._entries[key]
                return None
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            self._evict()

    def get_or_create(self, key: str, factory: Callable[[], V]) -> V:
        with self._lock:
            value = self.get(key)
            if value is None:
                value = factory()
                self.set(key, value)
            return value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return [k for k, (t, _) in self._entries.items() if not self._expired(t)]

    def _evict(self) -> None:
        # 만료 항목 먼저 정리한 뒤 용량 초과분을 LRU 순으로 제거
        if self.ttl_seconds is not None:
            for key in [k for k, (t, _) in self._entries.items() if self._expired(t)]:
                del self._entries[key]
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self.keys())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
