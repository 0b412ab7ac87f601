"""라우팅 규칙 테스트"""

from qase_analytics.services.orchestration import IntentType, Route
from qase_analytics.services.orchestration.models import merge_tools_used
from qase_analytics.services.orchestration.router import (
    INTENT_ROUTES,
    get_route_info,
    route_after_intent,
    route_after_resolve,
)


class TestRouteAfterIntent:
    """의도 분석 이후 분기 테스트"""

    def test_every_intent_has_route(self):
        """모든 의도에 라우팅 규칙 존재"""
        assert set(INTENT_ROUTES) == set(IntentType)

    def test_list_projects(self):
        """프로젝트 목록 라우팅"""
        assert route_after_intent({"intent": IntentType.LIST_PROJECTS}) == Route.LIST_PROJECTS

    def test_general(self):
        """일반 대화 라우팅"""
        assert route_after_intent({"intent": IntentType.GENERAL}) == Route.GENERAL_RESPONSE

    def test_query_without_project(self):
        """프로젝트 없는 조회는 해석 단계로"""
        state = {"intent": IntentType.QUERY_DATA, "needs_project_selection": True, "project_code": None}
        assert route_after_intent(state) == Route.RESOLVE_PROJECT

    def test_query_with_project(self):
        """프로젝트 있는 조회는 에이전트로"""
        state = {"intent": IntentType.QUERY_DATA, "needs_project_selection": False, "project_code": "DEMO"}
        assert route_after_intent(state) == Route.EXECUTE_AGENT

    def test_query_not_needing_project(self):
        """프로젝트가 필요 없는 조회는 에이전트로"""
        state = {"intent": IntentType.QUERY_DATA, "needs_project_selection": False}
        assert route_after_intent(state) == Route.EXECUTE_AGENT

    def test_select_project(self):
        """코드를 언급한 경우만 선택 확인"""
        state = {"intent": IntentType.SELECT_PROJECT, "extracted_project_code": "GV", "project_code": "GV"}
        assert route_after_intent(state) == Route.SELECT_PROJECT
        assert route_after_intent({"intent": IntentType.SELECT_PROJECT}) == Route.RESOLVE_PROJECT
        # 이미 바인딩된 프로젝트만으로는 선택 확인으로 가지 않음
        assert route_after_intent({"intent": IntentType.SELECT_PROJECT, "project_code": "GV"}) == Route.RESOLVE_PROJECT

    def test_error_goes_to_general(self):
        """분석 오류는 일반 응답으로"""
        state = {"intent": IntentType.QUERY_DATA, "project_code": "DEMO", "error": "classifier down"}
        assert route_after_intent(state) == Route.GENERAL_RESPONSE


class TestRouteAfterResolve:
    """프로젝트 해석 이후 분기 테스트"""

    def test_needs_selection(self):
        """선택이 필요하면 선택 요청"""
        assert route_after_resolve({"needs_project_selection": True}) == Route.ASK_PROJECT_SELECTION

    def test_bound_project(self):
        """프로젝트가 정해지면 에이전트 실행"""
        assert route_after_resolve({"needs_project_selection": False, "project_code": "DEMO"}) == Route.EXECUTE_AGENT

    def test_nothing_to_do(self):
        """할 일이 없으면 종료"""
        assert route_after_resolve({"needs_project_selection": False, "project_code": None}) == Route.END


def test_route_info():
    """라우팅 정보 조회"""
    info = get_route_info(Route.EXECUTE_AGENT)
    assert info["route"] == "execute_agent"
    assert info["description"]


def test_merge_tools_used_keeps_order():
    """도구 목록 병합 시 순서 유지, 중복 제거"""
    assert merge_tools_used(["a", "b"], ["b", "c"]) == ["a", "b", "c"]
    assert merge_tools_used([], []) == []
