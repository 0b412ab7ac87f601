"""대화 오케스트레이터

흐름:
    analyze_intent → (list_projects | select_project | general_response | execute_agent | resolve_project)
    resolve_project → (ask_project_selection | execute_agent | END)

한 번 컴파일한 그래프를 요청마다 새 상태로 실행합니다. 세션 간 공유 상태는
주입된 저장소(프로젝트 컨텍스트, 대화 메모리, 에이전트 캐시)에만 있습니다.
"""

import time
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langgraph.graph import END, StateGraph

from qase_analytics.models.session import AgentConfig, Project
from qase_analytics.prompts import GENERAL_RESPONSE_SYSTEM_PROMPT
from qase_analytics.services.agent import AgentCache, describe_agent_error, get_agent_cache
from qase_analytics.services.agent.errors import GENERIC_MESSAGE
from qase_analytics.services.llm import create_chat_model
from qase_analytics.services.memory import (
    ProjectContextStore,
    SessionMemoryStore,
    get_memory_store,
    get_project_context,
)
from qase_analytics.tools import list_projects_with_cache
from qase_analytics.utils.log import get_logger, preview
from qase_analytics.utils.messages import message_text

from .events import (
    DoneEvent,
    ErrorEvent,
    NeedsSelectionEvent,
    OrchestratorCallbacks,
    OrchestratorEvent,
    ProjectsFoundEvent,
    TokenEvent,
    ToolEndEvent,
    ToolStartEvent,
    dispatch_event,
)
from .intent_classifier import IntentClassifier
from .models import IntentType, OrchestratorResult, OrchestratorState, Route
from .router import route_after_intent, route_after_resolve

logger = get_logger("orchestrator")

NO_PROJECTS_MESSAGE = "Nenhum projeto foi encontrado na sua conta do Qase."
LIST_FAILED_MESSAGE = "Não foi possível listar seus projetos. Por favor, tente novamente."
EMPTY_ACCOUNT_MESSAGE = "Você ainda não tem projetos na sua conta do Qase."
EMPTY_RESPONSE_MESSAGE = "Não consegui processar sua solicitação."

NODE_NAMES = frozenset(r.value for r in Route if r is not Route.END)

ProjectLister = Callable[[str, str], Awaitable[Dict[str, Any]]]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _to_projects(result: Dict[str, Any]) -> List[Project]:
    return [Project(code=p["code"], title=p["title"]) for p in result.get("projects", [])]


def format_project_selection(projects: List[Project]) -> str:
    lines = "\n".join(f"- **{p.code}**: {p.title}" for p in projects)
    example = projects[0].code if projects else "CODIGO"
    return (
        "Para continuar, preciso saber qual projeto você quer analisar.\n\n"
        f"Seus projetos disponíveis:\n{lines}\n\n"
        f'Por favor, mencione o código do projeto (ex: "use o projeto {example}") '
        "ou reformule sua pergunta incluindo o projeto."
    )


def format_project_list(result: Dict[str, Any]) -> str:
    projects = result["projects"]
    lines = "\n".join(
        f"- **{p['code']}**: {p['title']} ({p.get('cases_count') or 0} casos de teste)" for p in projects
    )
    return (
        f"Você tem {result['total']} projeto(s) disponíveis:\n\n{lines}\n\n"
        "Para analisar um projeto específico, diga por exemplo: "
        f'"mostre os casos de teste do projeto {projects[0]["code"]}"'
    )


class Orchestrator:
    """의도 분류 기반 라우팅 상태 기계

    Args:
        classifier_factory: 모델 키 -> IntentClassifier
        chat_model_factory: 모델 키 -> 일반 대화용 채팅 모델
        agent_cache: 에이전트 캐시
        project_context: 세션별 활성 프로젝트 저장소
        memory_store: 세션별 대화 메모리
        project_lister: (토큰, user_id) -> 프로젝트 목록 결과 (캐시 우선)
    """

    def __init__(
        self,
        *,
        classifier_factory: Optional[Callable[[str], IntentClassifier]] = None,
        chat_model_factory: Optional[Callable[[str], Any]] = None,
        agent_cache: Optional[AgentCache] = None,
        project_context: Optional[ProjectContextStore] = None,
        memory_store: Optional[SessionMemoryStore] = None,
        project_lister: Optional[ProjectLister] = None,
    ):
        self.classifier_factory = classifier_factory or (
            lambda key: IntentClassifier(create_chat_model(key, purpose="intent"))
        )
        self.chat_model_factory = chat_model_factory or (lambda key: create_chat_model(key, purpose="chat"))
        self.agent_cache = agent_cache if agent_cache is not None else get_agent_cache()
        self.project_context = project_context if project_context is not None else get_project_context()
        self.memory_store = memory_store if memory_store is not None else get_memory_store()
        self.project_lister = project_lister or list_projects_with_cache
        self.graph = self._build_graph()

    # ------------------------------------------------------------------
    # 그래프 구성
    # ------------------------------------------------------------------

    def _build_graph(self) -> Any:
        graph = StateGraph(OrchestratorState)
        graph.add_node(Route.ANALYZE_INTENT.value, self.analyze_intent)
        graph.add_node(Route.RESOLVE_PROJECT.value, self.resolve_project)
        graph.add_node(Route.ASK_PROJECT_SELECTION.value, self.ask_project_selection)
        graph.add_node(Route.EXECUTE_AGENT.value, self.execute_agent)
        graph.add_node(Route.LIST_PROJECTS.value, self.list_projects)
        graph.add_node(Route.SELECT_PROJECT.value, self.select_project)
        graph.add_node(Route.GENERAL_RESPONSE.value, self.general_response)

        graph.set_entry_point(Route.ANALYZE_INTENT.value)

        graph.add_conditional_edges(
            Route.ANALYZE_INTENT.value,
            lambda state: route_after_intent(state).value,
            {
                Route.LIST_PROJECTS.value: Route.LIST_PROJECTS.value,
                Route.SELECT_PROJECT.value: Route.SELECT_PROJECT.value,
                Route.RESOLVE_PROJECT.value: Route.RESOLVE_PROJECT.value,
                Route.EXECUTE_AGENT.value: Route.EXECUTE_AGENT.value,
                Route.GENERAL_RESPONSE.value: Route.GENERAL_RESPONSE.value,
            },
        )
        graph.add_conditional_edges(
            Route.RESOLVE_PROJECT.value,
            lambda state: route_after_resolve(state).value,
            {
                Route.ASK_PROJECT_SELECTION.value: Route.ASK_PROJECT_SELECTION.value,
                Route.EXECUTE_AGENT.value: Route.EXECUTE_AGENT.value,
                Route.END.value: END,
            },
        )
        for terminal in (
            Route.ASK_PROJECT_SELECTION,
            Route.EXECUTE_AGENT,
            Route.LIST_PROJECTS,
            Route.SELECT_PROJECT,
            Route.GENERAL_RESPONSE,
        ):
            graph.add_edge(terminal.value, END)

        return graph.compile()

    # ------------------------------------------------------------------
    # 노드
    # ------------------------------------------------------------------

    async def analyze_intent(self, state: OrchestratorState) -> Dict[str, Any]:
        try:
            classifier = self.classifier_factory(state["model_api_key"])
            intent = await classifier.classify(state["input"], state.get("project_code"))
        except Exception as e:
            logger.error("의도 분류 실패: %s", e, exc_info=True)
            return {"intent": IntentType.GENERAL, "error": str(e)}

        update: Dict[str, Any] = {"intent": intent.intent_type}
        if intent.extracted_project_code:
            update["project_code"] = intent.extracted_project_code
            update["extracted_project_code"] = intent.extracted_project_code
            update["needs_project_selection"] = False
        elif state.get("project_code"):
            update["needs_project_selection"] = False
        else:
            update["needs_project_selection"] = intent.needs_project
        return update

    async def resolve_project(self, state: OrchestratorState) -> Dict[str, Any]:
        """프로젝트 자동 해석: 0개 종료, 1개 자동 선택, 2개 이상 선택 요청"""
        try:
            result = await self.project_lister(state["provider_token"], state["user_id"])
        except Exception as e:
            logger.error("프로젝트 해석 실패: %s", e, exc_info=True)
            result = {"success": False, "error": str(e)}

        projects = _to_projects(result) if result.get("success") else []
        if not projects:
            return {
                "response": NO_PROJECTS_MESSAGE,
                "error": result.get("error") or "no projects",
                "needs_project_selection": False,
                "projects": [],
            }

        if len(projects) == 1:
            logger.info("단일 프로젝트 자동 선택: %s", projects[0].code)
            return {"project_code": projects[0].code, "needs_project_selection": False, "projects": projects}

        return {"projects": projects, "needs_project_selection": True}

    async def ask_project_selection(self, state: OrchestratorState) -> Dict[str, Any]:
        return {
            "response": format_project_selection(state.get("projects") or []),
            "needs_project_selection": True,
            "tools_used": ["list_projects"],
        }

    async def execute_agent(self, state: OrchestratorState) -> Dict[str, Any]:
        start = time.perf_counter()
        config = AgentConfig(
            model_api_key=state["model_api_key"],
            provider_token=state["provider_token"],
            user_id=state["user_id"],
            project_code=state.get("project_code"),
        )
        try:
            agent = self.agent_cache.get_or_create(config)
            result = await agent.chat(state["input"])
        except Exception as e:
            logger.error("에이전트 실행 실패: %s", e, exc_info=True)
            return {
                "response": describe_agent_error(e),
                "error": str(e),
                "duration_ms": _elapsed_ms(start),
                "needs_project_selection": False,
            }

        update: Dict[str, Any] = {
            "response": result.output,
            "tools_used": result.tools_used,
            "duration_ms": result.duration_ms,
            "needs_project_selection": False,
        }
        if result.error:
            update["error"] = result.error
        return update

    async def list_projects(self, state: OrchestratorState) -> Dict[str, Any]:
        start = time.perf_counter()
        try:
            result = await self.project_lister(state["provider_token"], state["user_id"])
        except Exception as e:
            logger.error("프로젝트 목록 실패: %s", e, exc_info=True)
            result = {"success": False, "error": str(e)}

        if not result.get("success"):
            return {
                "response": LIST_FAILED_MESSAGE,
                "error": result.get("error"),
                "duration_ms": _elapsed_ms(start),
                "needs_project_selection": False,
            }
        if not result.get("projects"):
            return {
                "response": EMPTY_ACCOUNT_MESSAGE,
                "projects": [],
                "tools_used": ["list_projects"],
                "duration_ms": _elapsed_ms(start),
                "needs_project_selection": False,
            }
        return {
            "response": format_project_list(result),
            "projects": _to_projects(result),
            "tools_used": ["list_projects"],
            "duration_ms": _elapsed_ms(start),
            "needs_project_selection": False,
        }

    async def select_project(self, state: OrchestratorState) -> Dict[str, Any]:
        code = state.get("project_code")
        if code:
            return {
                "response": f"Projeto **{code}** selecionado. O que você gostaria de saber sobre ele?",
                "needs_project_selection": False,
            }
        return {"needs_project_selection": True}

    async def general_response(self, state: OrchestratorState) -> Dict[str, Any]:
        memory = self.memory_store.get_session(state["user_id"])
        messages = [
            SystemMessage(content=GENERAL_RESPONSE_SYSTEM_PROMPT),
            *memory.as_langchain_messages(),
            HumanMessage(content=state["input"]),
        ]
        try:
            llm = self.chat_model_factory(state["model_api_key"])
            response = await llm.ainvoke(messages)
        except Exception as e:
            logger.error("일반 응답 실패: %s", e, exc_info=True)
            return {"response": describe_agent_error(e), "error": str(e)}

        text = message_text(getattr(response, "content", response))
        memory.add_human(state["input"])
        memory.add_ai(text)
        return {"response": text}

    # ------------------------------------------------------------------
    # 실행
    # ------------------------------------------------------------------

    def _initial_state(self, message: str, config: AgentConfig, project_code: Optional[str]) -> OrchestratorState:
        return {
            "input": message,
            "user_id": config.user_id,
            "model_api_key": config.model_api_key,
            "provider_token": config.provider_token,
            "project_code": project_code,
            "extracted_project_code": None,
            "projects": None,
            "needs_project_selection": False,
            "intent": IntentType.GENERAL,
            "response": None,
            "tools_used": [],
            "duration_ms": 0,
            "error": None,
        }

    def _resolve_start_project(self, config: AgentConfig) -> Optional[str]:
        return config.project_code or self.project_context.get(config.user_id)

    def _finalize(self, final: Dict[str, Any], user_id: str, start_project: Optional[str], start: float) -> OrchestratorResult:
        project_code = final.get("project_code")
        if project_code and project_code != start_project:
            self.project_context.set(user_id, project_code)

        result = OrchestratorResult(
            response=final.get("response") or EMPTY_RESPONSE_MESSAGE,
            needs_project_selection=bool(final.get("needs_project_selection")),
            projects=final.get("projects"),
            tools_used=list(final.get("tools_used") or []),
            duration_ms=_elapsed_ms(start),
            intent=final.get("intent"),
            project_code=project_code,
            error=final.get("error"),
        )
        logger.info(
            "완료: intent=%s project=%s needs_selection=%s tools=%s %dms",
            result.intent.value if result.intent else None, result.project_code,
            result.needs_project_selection, result.tools_used, result.duration_ms,
        )
        return result

    async def run(self, config: AgentConfig, message: str) -> OrchestratorResult:
        """메시지 한 건을 처리하고 최종 결과 반환 (예외를 던지지 않음)"""
        start = time.perf_counter()
        start_project = self._resolve_start_project(config)
        logger.info("시작: user=%s project=%s msg=%s", config.user_id, start_project, preview(message))

        try:
            final = await self.graph.ainvoke(self._initial_state(message, config, start_project))
        except Exception as e:
            logger.error("오케스트레이션 실패: %s", e, exc_info=True)
            return OrchestratorResult(
                response=GENERIC_MESSAGE,
                duration_ms=_elapsed_ms(start),
                project_code=start_project,
                error=str(e),
            )
        return self._finalize(final, config.user_id, start_project, start)

    async def stream_events(self, config: AgentConfig, message: str) -> AsyncIterator[OrchestratorEvent]:
        """처리 과정을 이벤트로 순서대로 방출

        의도 분류 노드의 모델 토큰은 내보내지 않으며, 같은 도구의 시작/종료 이벤트는
        각각 한 번만 방출합니다. 마지막 노드가 스트리밍한 텍스트가 최종 응답으로
        끝나지 않으면 (토큰 없음, 대체 응답) 완료 직전에 응답을 통째로 보냅니다.
        """
        start = time.perf_counter()
        start_project = self._resolve_start_project(config)
        logger.info("스트리밍 시작: user=%s project=%s msg=%s", config.user_id, start_project, preview(message))

        current_node: Optional[str] = None
        node_tokens: List[str] = []  # 현재 노드가 스트리밍한 토큰
        started_tools: List[str] = []
        ended_tools: List[str] = []
        final: Dict[str, Any] = {}

        try:
            async for event in self.graph.astream_events(
                self._initial_state(message, config, start_project), version="v2"
            ):
                kind = event["event"]
                name = event.get("name", "")
                node = (event.get("metadata") or {}).get("langgraph_node")

                if kind == "on_chain_start" and name in NODE_NAMES and node == name:
                    current_node = name
                    node_tokens = []
                elif kind == "on_chat_model_stream":
                    if Route.ANALYZE_INTENT.value in (current_node, node):
                        continue
                    text = message_text(getattr(event["data"].get("chunk"), "content", None))
                    if text:
                        node_tokens.append(text)
                        yield TokenEvent(text)
                elif kind == "on_tool_start":
                    if name not in started_tools:
                        started_tools.append(name)
                        yield ToolStartEvent(name, event["data"].get("input"))
                elif kind == "on_tool_end":
                    if name not in ended_tools:
                        ended_tools.append(name)
                        yield ToolEndEvent(name, event["data"].get("output"))
                elif kind == "on_chain_end" and not event.get("parent_ids"):
                    output = event["data"].get("output")
                    if isinstance(output, dict):
                        final = output
        except Exception as e:
            logger.error("스트리밍 실패: %s", e, exc_info=True)
            yield ErrorEvent(GENERIC_MESSAGE, str(e))
            return

        result = self._finalize(final, config.user_id, start_project, start)
        for tool in started_tools:
            if tool not in result.tools_used:
                result.tools_used.append(tool)

        if not "".join(node_tokens).strip().endswith(result.response.strip()):
            yield TokenEvent(result.response)
        if result.projects:
            yield ProjectsFoundEvent(list(result.projects))
            if result.needs_project_selection:
                yield NeedsSelectionEvent(list(result.projects))
        yield DoneEvent(result)

    async def run_stream(
        self,
        config: AgentConfig,
        message: str,
        callbacks: OrchestratorCallbacks,
    ) -> Optional[OrchestratorResult]:
        """`stream_events`를 콜백으로 전달하는 어댑터 (오류 시 None)"""
        result = None
        async for event in self.stream_events(config, message):
            await dispatch_event(event, callbacks)
            if isinstance(event, DoneEvent):
                result = event.result
        return result


_orchestrator: Optional[Orchestrator] = None


def get_orchestrator() -> Orchestrator:
    """프로세스 기본 오케스트레이터 (기본 저장소 사용)"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = Orchestrator()
    return _orchestrator
