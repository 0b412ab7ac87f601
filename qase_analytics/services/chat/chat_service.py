"""채팅 서비스 - 입력 검증과 오케스트레이터 호출을 묶는 얇은 퍼사드"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from qase_analytics.models.session import AgentConfig, ChatTurn, Project
from qase_analytics.services.agent import AgentCache, get_agent_cache
from qase_analytics.services.memory import (
    ProjectContextStore,
    SessionMemoryStore,
    get_memory_store,
    get_project_context,
)
from qase_analytics.services.orchestration import Orchestrator, OrchestratorCallbacks, get_orchestrator
from qase_analytics.settings import settings
from qase_analytics.utils.callbacks import invoke_callback
from qase_analytics.utils.log import get_logger

logger = get_logger("chat")

MAX_MESSAGE_LENGTH = 2000


@dataclass
class ChatMessage:
    """어시스턴트 응답 메시지"""

    content: str
    role: str = "assistant"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    tools_used: List[str] = field(default_factory=list)
    duration_ms: int = 0


@dataclass
class ChatResult:
    """send_message 결과 (검증 실패도 예외 대신 success=False)"""

    success: bool
    message: Optional[ChatMessage] = None
    error: Optional[str] = None
    needs_project_selection: bool = False
    projects: Optional[List[Project]] = None


class ChatService:
    """채팅 서비스

    Args:
        orchestrator: 메시지 처리기 (None이면 프로세스 기본값)
        memory_store / project_context / agent_cache: 세션 저장소 (None이면 프로세스 기본값)
    """

    def __init__(
        self,
        orchestrator: Optional[Orchestrator] = None,
        memory_store: Optional[SessionMemoryStore] = None,
        project_context: Optional[ProjectContextStore] = None,
        agent_cache: Optional[AgentCache] = None,
    ):
        self.orchestrator = orchestrator if orchestrator is not None else get_orchestrator()
        self.memory_store = memory_store if memory_store is not None else get_memory_store()
        self.project_context = project_context if project_context is not None else get_project_context()
        self.agent_cache = agent_cache if agent_cache is not None else get_agent_cache()

    @staticmethod
    def _with_default_key(config: AgentConfig) -> AgentConfig:
        if config.model_api_key or not settings.openai_api_key:
            return config
        return AgentConfig(
            model_api_key=settings.openai_api_key,
            provider_token=config.provider_token,
            user_id=config.user_id,
            project_code=config.project_code,
        )

    @staticmethod
    def validate(config: AgentConfig, message: str) -> Optional[str]:
        """입력 검증 (문제가 없으면 None)"""
        if not message or not message.strip():
            return "Message is required"
        if len(message) > MAX_MESSAGE_LENGTH:
            return f"Message is too long (max {MAX_MESSAGE_LENGTH} characters)"
        if not config.provider_token:
            return "Please connect your Qase account first"
        if not config.model_api_key:
            return "OpenAI API key is not configured"
        return None

    def _warn_if_slow(self, duration_ms: int, label: str) -> None:
        if duration_ms > settings.slow_response_threshold_ms:
            logger.warning(
                "%s 응답 지연: %dms (기준 %dms)", label, duration_ms, settings.slow_response_threshold_ms
            )

    async def send_message(self, config: AgentConfig, message: str) -> ChatResult:
        """메시지를 처리하고 어시스턴트 응답 반환"""
        config = self._with_default_key(config)
        error = self.validate(config, message)
        if error:
            return ChatResult(success=False, error=error)

        start = time.perf_counter()
        result = await self.orchestrator.run(config, message.strip())
        duration_ms = int((time.perf_counter() - start) * 1000)
        self._warn_if_slow(duration_ms, "채팅")

        return ChatResult(
            success=True,
            message=ChatMessage(
                content=result.response,
                tools_used=result.tools_used,
                duration_ms=duration_ms,
            ),
            needs_project_selection=result.needs_project_selection,
            projects=result.projects,
        )

    async def send_message_stream(
        self,
        config: AgentConfig,
        message: str,
        callbacks: OrchestratorCallbacks,
    ) -> None:
        """스트리밍 처리 (검증 오류는 on_error로 전달)"""
        config = self._with_default_key(config)
        error = self.validate(config, message)
        if error:
            await invoke_callback(callbacks.on_error, error)
            return

        start = time.perf_counter()
        await self.orchestrator.run_stream(config, message.strip(), callbacks)
        self._warn_if_slow(int((time.perf_counter() - start) * 1000), "스트리밍")

    def get_chat_history(self, user_id: str) -> List[ChatTurn]:
        """세션 대화 기록 (세션이 없으면 빈 리스트)"""
        if not self.memory_store.has_session(user_id):
            return []
        return self.memory_store.get_session(user_id).get_messages()

    def clear_chat_history(self, user_id: str, project_code: Optional[str] = None) -> None:
        """대화 기록 삭제 및 해당 에이전트 제거"""
        self.memory_store.clear_session(user_id)
        self.agent_cache.remove(user_id, project_code)
        logger.info("대화 기록 삭제: user=%s project=%s", user_id, project_code)

    def get_session_status(self, config: AgentConfig) -> Dict[str, Any]:
        project_code = config.project_code or self.project_context.get(config.user_id)
        has_session = self.memory_store.has_session(config.user_id)
        message_count = self.memory_store.get_session(config.user_id).message_count if has_session else 0
        agent = self.agent_cache.peek(config.user_id, project_code)
        return {
            "active": has_session and message_count > 0,
            "project_code": project_code,
            "message_count": message_count,
            "agent": agent.get_info() if agent else None,
        }

    def set_project(self, config: AgentConfig, project_code: str) -> Dict[str, Any]:
        """활성 프로젝트 변경: 이전 에이전트 제거, 컨텍스트 기록, 새 에이전트 생성"""
        config = self._with_default_key(config)
        if not config.provider_token:
            return {"success": False, "message": "Please connect your Qase account first"}
        if not config.model_api_key:
            return {"success": False, "message": "OpenAI API key is not configured"}

        previous = config.project_code or self.project_context.get(config.user_id)
        self.agent_cache.remove(config.user_id, previous)
        self.project_context.set(config.user_id, project_code)
        self.agent_cache.get_or_create(config.with_project(project_code), force_new=True)
        logger.info("프로젝트 변경: user=%s %s -> %s", config.user_id, previous, project_code)
        return {"success": True, "message": f"Project changed to {project_code}"}
