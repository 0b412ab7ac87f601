"""도구: 실행 결과 조회 (상태별 그룹 + 요약)"""

from typing import Any, Dict, List, Literal, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from qase_analytics.models.qase import QaseTestResult, QaseTestResultList
from qase_analytics.services.cache import BaseCacheStore, get_cache_store
from qase_analytics.services.cache.keys import run_results_key
from qase_analytics.services.qase import QaseClient
from qase_analytics.settings import settings

from .common import AUTOMATION_MAP, PRIORITY_MAP, SEVERITY_MAP, ClientFactory, error_message, pass_rate, to_json

STATUS_GROUPS = ("passed", "failed", "blocked", "skipped", "invalid", "in_progress")


class GetRunResultsInput(BaseModel):
    project_code: str = Field(description="The project code in Qase (e.g. 'GV', 'DEMO')")
    run_id: int = Field(gt=0, description="The test run ID to get results for")
    status: Optional[Literal["passed", "failed", "blocked", "skipped", "invalid", "in_progress"]] = Field(
        default=None, description="Filter results by status"
    )
    limit: int = Field(default=100, ge=1, le=100, description="Maximum number of results to return (1-100)")
    offset: int = Field(default=0, ge=0, description="Number of results to skip for pagination")


def transform_test_result(result: QaseTestResult) -> Dict[str, Any]:
    case = result.case
    return {
        "hash": result.hash,
        "case_id": result.case_id,
        "case_title": case.title if case else f"Case #{result.case_id}",
        "status": result.status,
        "duration": result.time_spent_ms,
        "start_time": result.start_time,
        "end_time": result.end_time,
        "comment": result.comment,
        "stacktrace": result.stacktrace,
        "steps": [{"position": s.position, "status": s.status, "comment": s.comment} for s in result.steps],
        "case": {
            "title": case.title,
            "description": case.description,
            "severity": SEVERITY_MAP.get(case.severity) if case.severity is not None else None,
            "priority": PRIORITY_MAP.get(case.priority) if case.priority is not None else None,
        } if case else None,
    }


def group_by_status(results: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """상태별 그룹 (알 수 없는 상태는 `other`)"""
    groups: Dict[str, List[Dict[str, Any]]] = {status: [] for status in STATUS_GROUPS}
    groups["other"] = []
    for item in results:
        status = item["status"].lower().replace(" ", "_")
        groups.get(status, groups["other"]).append(item)
    return groups


def summarize(groups: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    summary: Dict[str, Any] = {status: len(items) for status, items in groups.items()}
    total = sum(summary.values())
    summary["pass_rate"] = pass_rate(summary["passed"], total)
    return summary


def format_run_results(run_id: int, results: QaseTestResultList, cached: bool) -> Dict[str, Any]:
    items = [transform_test_result(r) for r in results.entities]
    groups = group_by_status(items)
    return {
        "success": True,
        "run_id": run_id,
        "total": results.total,
        "filtered": results.filtered,
        "count": results.count,
        "results": items,
        "by_status": groups,
        "summary": summarize(groups),
        "cached": cached,
    }


async def get_run_results_with_cache(
    token: str,
    user_id: str,
    params: GetRunResultsInput,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> Dict[str, Any]:
    if cache is None:
        cache = get_cache_store()
    filters = params.model_dump(exclude={"project_code", "run_id"}, exclude_none=True)
    key = run_results_key(user_id, params.project_code, params.run_id, filters)

    cached = await cache.get(key)
    if cached is not None:
        return format_run_results(params.run_id, QaseTestResultList.model_validate(cached), cached=True)

    try:
        async with client_factory(token) as client:
            results = await client.get_test_results(params.project_code, run=params.run_id, **filters)
    except Exception as e:
        empty = group_by_status([])
        return {
            "success": False, "run_id": params.run_id, "total": 0, "filtered": 0, "count": 0,
            "results": [], "by_status": empty, "summary": summarize(empty), "cached": False,
            "error": error_message(e, "get run results"),
        }

    await cache.set(key, results.model_dump(mode="json"), settings.cache_ttl_results)
    return format_run_results(params.run_id, results, cached=False)


def create_get_run_results_tool(
    token: str,
    user_id: str,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> StructuredTool:
    async def _run(**kwargs: Any) -> str:
        params = GetRunResultsInput(**kwargs)
        return to_json(await get_run_results_with_cache(
            token, user_id, params, cache=cache, client_factory=client_factory
        ))

    return StructuredTool.from_function(
        coroutine=_run,
        name="get_run_results",
        description=(
            "Gets detailed test results from a specific test run in Qase.io. "
            "Shows which cases passed, failed, blocked or were skipped, with comments and stack traces. "
            "Also returns results grouped by status and a summary with counts and pass_rate. "
            "Always provide project_code and run_id. Use the status filter to get only failed or blocked tests."
        ),
        args_schema=GetRunResultsInput,
        handle_validation_error=True,
    )
