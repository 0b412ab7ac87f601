"""Qase 도구 호출 에이전트"""

from .cache import (
    AgentCache,
    clear_agent_cache,
    get_agent_cache,
    get_or_create_agent,
    remove_agent_from_cache,
)
from .errors import describe_agent_error
from .qase_agent import AgentResponse, AgentStreamCallbacks, QaseAgent

__all__ = [
    "AgentCache",
    "AgentResponse",
    "AgentStreamCallbacks",
    "QaseAgent",
    "clear_agent_cache",
    "describe_agent_error",
    "get_agent_cache",
    "get_or_create_agent",
    "remove_agent_from_cache",
]
