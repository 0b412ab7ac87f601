"""Qase 도구 호출 에이전트

LangGraph ReAct 실행기에 Qase 도구와 세션 메모리를 묶은 에이전트.
사용자/프로젝트 조합마다 하나씩 만들어 `AgentCache`에 보관합니다.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.messages import AIMessage, HumanMessage
from langchain_core.tools import BaseTool
from langgraph.errors import GraphRecursionError
from langgraph.prebuilt import create_react_agent

from qase_analytics.models.session import AgentConfig, ChatTurn
from qase_analytics.prompts import FALLBACK_RESPONSE_PROMPT, format_agent_system_prompt
from qase_analytics.services.cache import BaseCacheStore
from qase_analytics.services.llm import create_chat_model
from qase_analytics.services.memory import SessionMemoryStore, get_memory_store
from qase_analytics.services.qase import QaseClient
from qase_analytics.settings import settings
from qase_analytics.tools import create_qase_tools
from qase_analytics.utils.callbacks import invoke_callback
from qase_analytics.utils.log import get_logger, preview
from qase_analytics.utils.messages import message_text, tool_call_names

from .errors import describe_agent_error

logger = get_logger("agent")


@dataclass
class AgentResponse:
    """에이전트 실행 결과"""

    output: str
    tools_used: List[str] = field(default_factory=list)
    duration_ms: int = 0
    error: Optional[str] = None


@dataclass
class AgentStreamCallbacks:
    """스트리밍 콜백 (동기/비동기 모두 허용)"""

    on_token: Optional[Callable[[str], Any]] = None
    on_tool_start: Optional[Callable[[str, Any], Any]] = None
    on_tool_end: Optional[Callable[[str, Any], Any]] = None
    on_complete: Optional[Callable[[AgentResponse], Any]] = None
    on_error: Optional[Callable[[str], Any]] = None


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _final_ai_text(messages: List[Any]) -> str:
    for msg in reversed(messages):
        if isinstance(msg, AIMessage) and not msg.tool_calls:
            return message_text(msg.content)
    return ""


class QaseAgent:
    """Qase 지표 분석 에이전트

    Args:
        config: 자격 증명과 프로젝트 스코프
        memory_store: 세션 메모리 저장소 (user_id 기준으로 공유)
        cache: 도구 응답 캐시
        client_factory: 토큰으로 QaseClient를 만드는 함수
        llm: 채팅 모델 주입 (None이면 용도 "agent" 기본값)
        executor: 미리 만든 실행기 주입 (테스트용)
    """

    def __init__(
        self,
        config: AgentConfig,
        *,
        memory_store: Optional[SessionMemoryStore] = None,
        cache: Optional[BaseCacheStore] = None,
        client_factory: Callable[[str], QaseClient] = QaseClient,
        llm: Any = None,
        executor: Any = None,
    ):
        self.config = config
        if memory_store is None:
            memory_store = get_memory_store()
        self.memory = memory_store.get_session(config.user_id)
        self.max_iterations = settings.agent_max_iterations
        self.created_at = datetime.now()
        self._cache = cache
        self._client_factory = client_factory
        self._llm = llm
        self._executor = executor
        self._tools: Optional[List[BaseTool]] = None

    @property
    def recursion_limit(self) -> int:
        # 반복 1회 = 모델 호출 + 도구 실행 2스텝
        return self.max_iterations * 2 + 1

    @property
    def executor(self) -> Any:
        if self._executor is None:
            self._executor = self._build_executor()
        return self._executor

    @property
    def tools(self) -> List[BaseTool]:
        if self._tools is None:
            self._tools = create_qase_tools(
                self.config.provider_token,
                self.config.user_id,
                cache=self._cache,
                client_factory=self._client_factory,
            )
        return self._tools

    def _build_executor(self) -> Any:
        llm = self._llm or create_chat_model(self.config.model_api_key, purpose="agent")
        prompt = format_agent_system_prompt(self.config.user_id, self.config.project_code)
        return create_react_agent(llm, self.tools, prompt=prompt)

    def _inputs(self, message: str) -> Dict[str, Any]:
        return {"messages": [*self.memory.as_langchain_messages(), HumanMessage(content=message)]}

    def _record_turn(self, message: str, output: str) -> None:
        self.memory.add_human(message)
        self.memory.add_ai(output)

    async def chat(self, message: str) -> AgentResponse:
        """메시지 한 건 처리

        모델/도구 오류는 예외 대신 안내 문구와 `error`로 반환합니다.
        """
        start = time.perf_counter()
        inputs = self._inputs(message)
        logger.info("에이전트 실행: user=%s project=%s msg=%s",
                    self.config.user_id, self.config.project_code, preview(message))

        try:
            result = await self.executor.ainvoke(inputs, config={"recursion_limit": self.recursion_limit})
        except (GraphRecursionError, OutputParserException) as e:
            logger.warning("에이전트 응답 파싱 실패, 대체 응답 사용: %s", e)
            self._record_turn(message, FALLBACK_RESPONSE_PROMPT)
            return AgentResponse(FALLBACK_RESPONSE_PROMPT, [], _elapsed_ms(start))
        except Exception as e:
            logger.error("에이전트 실행 실패: %s", e, exc_info=True)
            return AgentResponse(describe_agent_error(e), [], _elapsed_ms(start), error=str(e))

        new_messages = result.get("messages", [])[len(inputs["messages"]):]
        output = _final_ai_text(new_messages) or FALLBACK_RESPONSE_PROMPT
        tools_used = tool_call_names(new_messages)
        self._record_turn(message, output)

        duration = _elapsed_ms(start)
        logger.info("에이전트 완료: %dms tools=%s", duration, tools_used)
        return AgentResponse(output, tools_used, duration)

    async def chat_stream(self, message: str, callbacks: Optional[AgentStreamCallbacks] = None) -> AgentResponse:
        """토큰/도구 이벤트를 콜백으로 흘려보내며 메시지 처리"""
        callbacks = callbacks or AgentStreamCallbacks()
        start = time.perf_counter()
        inputs = self._inputs(message)
        tokens: List[str] = []
        tools_used: List[str] = []
        final_state: Optional[Dict[str, Any]] = None

        try:
            async for event in self.executor.astream_events(
                inputs, config={"recursion_limit": self.recursion_limit}, version="v2"
            ):
                kind = event["event"]
                if kind == "on_chat_model_stream":
                    text = message_text(getattr(event["data"].get("chunk"), "content", None))
                    if text:
                        tokens.append(text)
                        await invoke_callback(callbacks.on_token, text)
                elif kind == "on_tool_start":
                    name = event["name"]
                    if name not in tools_used:
                        tools_used.append(name)
                        await invoke_callback(callbacks.on_tool_start, name, event["data"].get("input"))
                elif kind == "on_tool_end":
                    await invoke_callback(callbacks.on_tool_end, event["name"], event["data"].get("output"))
                elif kind == "on_chain_end" and not event.get("parent_ids"):
                    output = event["data"].get("output")
                    if isinstance(output, dict):
                        final_state = output
        except (GraphRecursionError, OutputParserException) as e:
            logger.warning("스트리밍 응답 파싱 실패, 대체 응답 사용: %s", e)
            response = AgentResponse(FALLBACK_RESPONSE_PROMPT, tools_used, _elapsed_ms(start))
            self._record_turn(message, response.output)
            await invoke_callback(callbacks.on_complete, response)
            return response
        except Exception as e:
            logger.error("에이전트 스트리밍 실패: %s", e, exc_info=True)
            text = describe_agent_error(e)
            await invoke_callback(callbacks.on_error, text)
            return AgentResponse(text, tools_used, _elapsed_ms(start), error=str(e))

        output = ""
        if final_state is not None:
            new_messages = final_state.get("messages", [])[len(inputs["messages"]):]
            output = _final_ai_text(new_messages)
            for name in tool_call_names(new_messages):
                if name not in tools_used:
                    tools_used.append(name)
        output = output or "".join(tokens) or FALLBACK_RESPONSE_PROMPT

        self._record_turn(message, output)
        response = AgentResponse(output, tools_used, _elapsed_ms(start))
        await invoke_callback(callbacks.on_complete, response)
        return response

    # ------------------------------------------------------------------
    # 세션 관리
    # ------------------------------------------------------------------

    def set_project(self, project_code: Optional[str]) -> None:
        """프로젝트 변경 (시스템 프롬프트가 바뀌므로 실행기 재생성)"""
        if project_code == self.config.project_code:
            return
        self.config = self.config.with_project(project_code)
        self._executor = None

    def clear_history(self) -> None:
        self.memory.clear()

    def get_history(self) -> List[ChatTurn]:
        return self.memory.get_messages()

    def get_info(self) -> Dict[str, Any]:
        return {
            "user_id": self.config.user_id,
            "project_code": self.config.project_code,
            "model": settings.openai_model_agent,
            "max_iterations": self.max_iterations,
            "tools_count": len(self.tools),
            "tool_names": [t.name for t in self.tools],
            "message_count": self.memory.message_count,
            "created_at": self.created_at.isoformat(),
        }
