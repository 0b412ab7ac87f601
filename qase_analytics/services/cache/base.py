"""캐시 저장소 기본 인터페이스"""

from abc import ABC, abstractmethod
from typing import Any


class BaseCacheStore(ABC):
    """JSON 직렬화 가능한 값을 TTL과 함께 저장하는 비동기 캐시

    캐시는 최적화 수단이므로 구현체는 백엔드 장애 시 예외 대신
    미스(None/False/0)로 응답합니다.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """키 조회 (없거나 만료되면 None)"""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """TTL과 함께 값 저장

        Returns:
            저장 성공 여부
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """glob 패턴(`qase:cases:user-1:*`)에 맞는 키 삭제

        Returns:
            삭제된 키 수
        """
        pass

    async def aclose(self) -> None:
        """연결 해제 (필요한 구현체만 재정의)"""
        return None
