"""세션 메모리 및 프로젝트 컨텍스트"""

from .conversation import ConversationMemory, SessionMemoryStore, get_memory_store
from .project_context import ProjectContextStore, get_project_context
from .session_store import SessionStore

__all__ = [
    "ConversationMemory",
    "SessionMemoryStore",
    "ProjectContextStore",
    "SessionStore",
    "get_memory_store",
    "get_project_context",
]
