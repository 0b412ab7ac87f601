"""세션별 대화 메모리

최근 N개 메시지만 유지하는 슬라이딩 윈도우. 추가 직후 항상 잘라내므로
어떤 시점에도 `len(messages) <= max_messages`가 성립합니다.
"""

from typing import List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from qase_analytics.models.session import ChatTurn, Role
from qase_analytics.settings import settings

from .session_store import SessionStore


class ConversationMemory:
    """제한된 크기의 대화 기록"""

    def __init__(self, max_messages: Optional[int] = None):
        self.max_messages = max_messages or settings.memory_max_messages
        self._messages: List[ChatTurn] = []

    def _add(self, role: Role, content: str) -> None:
        self._messages.append(ChatTurn(role=role, content=content))
        if len(self._messages) > self.max_messages:
            self._messages = self._messages[-self.max_messages:]

    def add_human(self, content: str) -> None:
        self._add("user", content)

    def add_ai(self, content: str) -> None:
        self._add("assistant", content)

    def add_system(self, content: str) -> None:
        self._add("system", content)

    def get_messages(self) -> List[ChatTurn]:
        return list(self._messages)

    def get_chat_history(self) -> str:
        """프롬프트 삽입용 `Human:/AI:/System:` 텍스트"""
        labels = {"user": "Human", "assistant": "AI", "system": "System"}
        return "\n".join(f"{labels[m.role]}: {m.content}" for m in self._messages)

    def as_langchain_messages(self) -> List[BaseMessage]:
        converted: List[BaseMessage] = []
        for m in self._messages:
            if m.role == "user":
                converted.append(HumanMessage(content=m.content))
            elif m.role == "assistant":
                converted.append(AIMessage(content=m.content))
            else:
                converted.append(SystemMessage(content=m.content))
        return converted

    def clear(self) -> None:
        self._messages = []

    @property
    def message_count(self) -> int:
        return len(self._messages)


class SessionMemoryStore:
    """user_id별 ConversationMemory 관리"""

    def __init__(
        self,
        max_messages: Optional[int] = None,
        max_sessions: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
    ):
        self.max_messages = max_messages or settings.memory_max_messages
        self._sessions: SessionStore[ConversationMemory] = SessionStore(
            max_entries=max_sessions or settings.session_max_entries,
            ttl_seconds=ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds,
        )

    def get_session(self, session_id: str) -> ConversationMemory:
        """세션 메모리 반환 (없으면 생성)"""
        return self._sessions.get_or_create(session_id, lambda: ConversationMemory(self.max_messages))

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def clear_session(self, session_id: str) -> None:
        """세션 대화 내용 비우기 (세션 자체는 유지)"""
        memory = self._sessions.get(session_id)
        if memory is not None:
            memory.clear()

    def delete_session(self, session_id: str) -> bool:
        return self._sessions.delete(session_id)

    @property
    def session_ids(self) -> List[str]:
        return self._sessions.keys()

    def clear_all_sessions(self) -> None:
        self._sessions.clear()

    @property
    def session_count(self) -> int:
        return len(self._sessions)


_memory_store: Optional[SessionMemoryStore] = None


def get_memory_store() -> SessionMemoryStore:
    """프로세스 기본 메모리 저장소"""
    global _memory_store
    if _memory_store is None:
        _memory_store = SessionMemoryStore()
    return _memory_store
