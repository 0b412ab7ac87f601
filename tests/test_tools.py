"""에이전트 도구 테스트"""

import json

import pytest

from fakes import FakeQaseApi, make_project
from qase_analytics.services.qase import QaseApiError, QaseAuthError
from qase_analytics.tools import create_qase_tools, list_projects_with_cache
from qase_analytics.tools.common import AUTH_ERROR_MESSAGE, error_message, pass_rate
from qase_analytics.tools.run_results import (
    GetRunResultsInput,
    get_run_results_with_cache,
    group_by_status,
    summarize,
)
from qase_analytics.tools.test_cases import GetTestCasesInput, get_test_cases_with_cache
from qase_analytics.tools.test_runs import GetTestRunsInput, get_test_runs_with_cache


def make_result(hash_: str, status: str, case_id: int = 1) -> dict:
    return {
        "hash": hash_,
        "run_id": 7,
        "case_id": case_id,
        "status": status,
        "case": {"title": f"Case {case_id}", "severity": 2, "priority": 1},
    }


class TestCommon:
    """공용 헬퍼 테스트"""

    @pytest.mark.parametrize(
        "passed, total, expected",
        [(8, 10, 80.0), (1, 3, 33.33), (0, 5, 0.0), (0, 0, 0)],
    )
    def test_pass_rate(self, passed, total, expected):
        """통과율 계산"""
        assert pass_rate(passed, total) == expected

    def test_error_message(self):
        """도구 오류 문구"""
        assert error_message(QaseAuthError(), "list projects") == AUTH_ERROR_MESSAGE
        assert error_message(QaseApiError("Project not found", 404), "x") == "Qase API error: Project not found"
        assert error_message(RuntimeError("boom"), "get test runs") == "Failed to get test runs. Please try again."


class TestListProjects:
    """list_projects 캐시 동작 테스트"""

    async def test_warm_cache_skips_fetch(self, cache):
        """캐시가 채워져 있으면 조회 생략"""
        api = FakeQaseApi([make_project("DEMO", "Demo", 12)])

        first = await list_projects_with_cache("t", "u1", cache=cache, client_factory=api.client_factory)
        second = await list_projects_with_cache("t", "u1", cache=cache, client_factory=api.client_factory)

        assert api.count("/project") == 1
        assert first["cached"] is False
        assert second["cached"] is True
        assert second["projects"][0] == {
            "code": "DEMO", "title": "Demo", "description": None, "cases_count": 12, "suites_count": 1,
        }

    async def test_only_default_page_is_cached(self, cache):
        """기본 페이지만 캐시"""
        api = FakeQaseApi([make_project("DEMO", "Demo")])
        await list_projects_with_cache("t", "u1", limit=10, cache=cache, client_factory=api.client_factory)
        await list_projects_with_cache("t", "u1", limit=10, cache=cache, client_factory=api.client_factory)
        assert api.count("/project") == 2

    async def test_auth_failure(self, cache):
        """인증 실패 결과"""
        api = FakeQaseApi()
        api.status_override = 401
        result = await list_projects_with_cache("t", "u1", cache=cache, client_factory=api.client_factory)

        assert result["success"] is False
        assert result["error"] == AUTH_ERROR_MESSAGE
        assert len(cache) == 0


class TestGetTestCases:
    """get_test_cases 테스트"""

    async def test_code_mapping(self, cache):
        """응답 필드 매핑"""
        api = FakeQaseApi()
        api.cases = [{
            "id": 1, "title": "Login", "severity": 2, "priority": 1, "automation": 1, "status": 0,
            "suite_id": 3, "is_flaky": 1, "tags": [{"id": 1, "title": "smoke"}],
        }]
        params = GetTestCasesInput(project_code="DEMO")
        result = await get_test_cases_with_cache("t", "u1", params, cache=cache, client_factory=api.client_factory)

        case = result["cases"][0]
        assert case["severity"] == "critical"
        assert case["priority"] == "high"
        assert case["automation"] == "automated"
        assert case["status"] == "actual"
        assert case["is_flaky"] is True
        assert case["tags"] == ["smoke"]

    async def test_filters_change_cache_key(self, cache):
        """필터가 바뀌면 캐시 키도 바뀜"""
        api = FakeQaseApi()
        for severity in ("critical", "major", "critical"):
            params = GetTestCasesInput(project_code="DEMO", severity=severity)
            await get_test_cases_with_cache("t", "u1", params, cache=cache, client_factory=api.client_factory)

        assert api.count("/case/DEMO") == 2
        assert api.requests[0].url.params["severity"] == "critical"

    async def test_api_error_is_reported(self, cache):
        """API 오류를 결과로 보고"""
        api = FakeQaseApi()
        api.status_override = 400
        params = GetTestCasesInput(project_code="DEMO")
        result = await get_test_cases_with_cache("t", "u1", params, cache=cache, client_factory=api.client_factory)
        assert result["success"] is False
        assert result["error"] == "Qase API error: boom"


class TestGetTestRuns:
    """get_test_runs 테스트"""

    async def test_pass_rate_and_status(self, cache):
        """통과율과 상태 집계"""
        api = FakeQaseApi()
        api.runs = [{
            "id": 7, "title": "Regression", "status": 1,
            "stats": {"total": 10, "passed": 8, "failed": 1, "blocked": 1},
        }]
        params = GetTestRunsInput(project_code="DEMO", status="complete")
        result = await get_test_runs_with_cache("t", "u1", params, cache=cache, client_factory=api.client_factory)

        run = result["runs"][0]
        assert run["status"] == "complete"
        assert run["pass_rate"] == 80.0
        assert run["stats"]["failed"] == 1
        assert api.requests[0].url.params["status"] == "complete"


class TestGetRunResults:
    """get_run_results 테스트"""

    def test_group_by_status(self):
        """상태별 그룹화"""
        items = [
            {"status": "passed"}, {"status": "Failed"}, {"status": "in progress"}, {"status": "retest"},
        ]
        groups = group_by_status(items)
        assert len(groups["passed"]) == 1
        assert len(groups["failed"]) == 1
        assert len(groups["in_progress"]) == 1
        assert len(groups["other"]) == 1

    def test_summarize(self):
        """결과 요약"""
        groups = group_by_status([{"status": "passed"}] * 3 + [{"status": "failed"}])
        summary = summarize(groups)
        assert summary["passed"] == 3
        assert summary["failed"] == 1
        assert summary["pass_rate"] == 75.0

    async def test_results_grouped(self, cache):
        """결과를 상태별로 묶음"""
        api = FakeQaseApi()
        api.results = [make_result("a", "passed", 1), make_result("b", "failed", 2), make_result("c", "passed", 3)]
        params = GetRunResultsInput(project_code="DEMO", run_id=7)
        result = await get_run_results_with_cache("t", "u1", params, cache=cache, client_factory=api.client_factory)

        assert api.requests[0].url.params["run"] == "7"
        assert [r["hash"] for r in result["by_status"]["passed"]] == ["a", "c"]
        assert result["summary"]["pass_rate"] == 66.67
        assert result["results"][1]["case"]["severity"] == "critical"


class TestToolSet:
    """도구 세트 테스트"""

    def test_tool_names(self, cache):
        """도구 이름 목록"""
        tools = create_qase_tools("t", "u1", cache=cache)
        assert [t.name for t in tools] == [
            "list_projects", "get_test_cases", "get_test_runs", "get_run_results", "generate_chart",
        ]

    async def test_tool_returns_json(self, cache):
        """도구는 JSON 문자열 반환"""
        api = FakeQaseApi([make_project("DEMO", "Demo")])
        tools = {t.name: t for t in create_qase_tools("t", "u1", cache=cache, client_factory=api.client_factory)}

        output = await tools["list_projects"].ainvoke({})
        assert json.loads(output)["projects"][0]["code"] == "DEMO"

        output = await tools["get_test_cases"].ainvoke({"project_code": "DEMO", "severity": "major"})
        assert json.loads(output)["success"] is True
        assert api.count("/case/DEMO") == 1

    async def test_invalid_input_does_not_call_api(self, cache):
        """잘못된 입력은 API를 호출하지 않음"""
        api = FakeQaseApi()
        tools = {t.name: t for t in create_qase_tools("t", "u1", cache=cache, client_factory=api.client_factory)}

        output = await tools["get_run_results"].ainvoke({"project_code": "DEMO", "run_id": 0})
        assert isinstance(output, str)
        assert api.requests == []
