"""그래프 분기 규칙

의도별 분기는 `INTENT_ROUTES`에 모든 IntentType이 빠짐없이 등록되어야 합니다.
"""

from typing import Callable, Dict

from .models import IntentType, OrchestratorState, Route


def _route_query_data(state: OrchestratorState) -> Route:
    if state.get("needs_project_selection") and not state.get("project_code"):
        return Route.RESOLVE_PROJECT
    return Route.EXECUTE_AGENT


def _route_select_project(state: OrchestratorState) -> Route:
    return Route.SELECT_PROJECT if state.get("extracted_project_code") else Route.RESOLVE_PROJECT


INTENT_ROUTES: Dict[IntentType, Callable[[OrchestratorState], Route]] = {
    IntentType.QUERY_DATA: _route_query_data,
    IntentType.LIST_PROJECTS: lambda state: Route.LIST_PROJECTS,
    IntentType.SELECT_PROJECT: _route_select_project,
    IntentType.GENERAL: lambda state: Route.GENERAL_RESPONSE,
}


def route_after_intent(state: OrchestratorState) -> Route:
    """의도 분석 이후 분기 (분석 중 오류는 일반 응답으로)"""
    if state.get("error"):
        return Route.GENERAL_RESPONSE
    intent = state.get("intent") or IntentType.GENERAL
    return INTENT_ROUTES[intent](state)


def route_after_resolve(state: OrchestratorState) -> Route:
    """프로젝트 해석 이후 분기 (프로젝트가 없으면 종료)"""
    if state.get("needs_project_selection"):
        return Route.ASK_PROJECT_SELECTION
    if state.get("project_code"):
        return Route.EXECUTE_AGENT
    return Route.END


def get_route_info(route: Route) -> dict:
    """라우트 정보 반환 (디버깅/로깅용)"""
    descriptions = {
        Route.ANALYZE_INTENT: "의도 분류",
        Route.RESOLVE_PROJECT: "프로젝트 자동 해석",
        Route.ASK_PROJECT_SELECTION: "프로젝트 선택 요청",
        Route.EXECUTE_AGENT: "도구 호출 에이전트 실행",
        Route.LIST_PROJECTS: "프로젝트 목록 응답",
        Route.SELECT_PROJECT: "프로젝트 선택 확인",
        Route.GENERAL_RESPONSE: "일반 대화 응답",
        Route.END: "종료",
    }
    return {"route": route.value, "description": descriptions[route]}
