"""세션별 활성 프로젝트 저장소"""

from typing import Optional

from qase_analytics.settings import settings

from .session_store import SessionStore


class ProjectContextStore:
    """user_id -> 프로젝트 코드

    동시 요청이 서로 다른 코드를 기록하면 마지막 기록이 남습니다.
    """

    def __init__(self, max_entries: Optional[int] = None, ttl_seconds: Optional[float] = None):
        self._store: SessionStore[str] = SessionStore(
            max_entries=max_entries or settings.session_max_entries,
            ttl_seconds=ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds,
        )

    def get(self, user_id: str) -> Optional[str]:
        return self._store.get(user_id)

    def set(self, user_id: str, project_code: str) -> None:
        self._store.set(user_id, project_code)

    def clear(self, user_id: str) -> bool:
        return self._store.delete(user_id)

    def clear_all(self) -> None:
        self._store.clear()


_project_context: Optional[ProjectContextStore] = None


def get_project_context() -> ProjectContextStore:
    global _project_context
    if _project_context is None:
        _project_context = ProjectContextStore()
    return _project_context
