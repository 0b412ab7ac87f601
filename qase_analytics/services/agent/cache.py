"""에이전트 인스턴스 캐시

키는 `{user_id}:{project_code or 'all'}`. 자격 증명이 바뀌면 새로 만듭니다.
"""

from typing import Callable, Optional

from qase_analytics.models.session import AgentConfig
from qase_analytics.services.memory import SessionStore
from qase_analytics.settings import settings
from qase_analytics.utils.log import get_logger

from .qase_agent import QaseAgent

logger = get_logger("agent")

AgentFactory = Callable[[AgentConfig], QaseAgent]


class AgentCache:
    def __init__(
        self,
        factory: AgentFactory = QaseAgent,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
    ):
        self._factory = factory
        self._store: SessionStore[QaseAgent] = SessionStore(
            max_entries=max_entries or settings.session_max_entries,
            ttl_seconds=ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds,
        )

    def get_or_create(self, config: AgentConfig, force_new: bool = False) -> QaseAgent:
        key = config.cache_key
        if not force_new:
            agent = self._store.get(key)
            if agent is not None and agent.config == config:
                return agent
        logger.info("에이전트 생성: %s", key)
        agent = self._factory(config)
        self._store.set(key, agent)
        return agent

    def peek(self, user_id: str, project_code: Optional[str] = None) -> Optional[QaseAgent]:
        """생성 없이 조회"""
        return self._store.get(AgentConfig("", "", user_id, project_code).cache_key)

    def remove(self, user_id: str, project_code: Optional[str] = None) -> bool:
        key = AgentConfig("", "", user_id, project_code).cache_key
        return self._store.delete(key)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


_agent_cache: Optional[AgentCache] = None


def get_agent_cache() -> AgentCache:
    global _agent_cache
    if _agent_cache is None:
        _agent_cache = AgentCache()
    return _agent_cache


def get_or_create_agent(config: AgentConfig, force_new: bool = False) -> QaseAgent:
    return get_agent_cache().get_or_create(config, force_new=force_new)


def remove_agent_from_cache(user_id: str, project_code: Optional[str] = None) -> bool:
    return get_agent_cache().remove(user_id, project_code)


def clear_agent_cache() -> None:
    get_agent_cache().clear()
