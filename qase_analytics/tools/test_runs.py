"""도구: 테스트 실행(Run) 조회"""

from typing import Any, Dict, Literal, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from qase_analytics.models.qase import QaseTestRun, QaseTestRunList
from qase_analytics.services.cache import BaseCacheStore, get_cache_store
from qase_analytics.services.cache.keys import test_runs_key
from qase_analytics.services.qase import QaseClient
from qase_analytics.settings import settings

from .common import RUN_STATUS_MAP, ClientFactory, error_message, pass_rate, to_json


class GetTestRunsInput(BaseModel):
    project_code: str = Field(description="The project code in Qase (e.g. 'GV', 'DEMO')")
    status: Optional[Literal["active", "complete", "abort"]] = Field(default=None, description="Filter by run status")
    from_start_time: Optional[str] = Field(
        default=None, description="Filter runs started after this date (ISO 8601, e.g. '2024-01-01')"
    )
    to_start_time: Optional[str] = Field(
        default=None, description="Filter runs started before this date (ISO 8601, e.g. '2024-12-31')"
    )
    environment: Optional[int] = Field(default=None, gt=0, description="Filter by environment ID")
    milestone: Optional[int] = Field(default=None, gt=0, description="Filter by milestone ID")
    limit: int = Field(default=100, ge=1, le=100, description="Maximum number of runs to return (1-100)")
    offset: int = Field(default=0, ge=0, description="Number of runs to skip for pagination")


def transform_test_run(run: QaseTestRun) -> Dict[str, Any]:
    stats = run.stats
    return {
        "id": run.id,
        "title": run.title,
        "description": run.description,
        "status": RUN_STATUS_MAP.get(run.status, "unknown"),
        "start_time": run.start_time,
        "end_time": run.end_time,
        "stats": {
            "total": stats.total,
            "passed": stats.passed,
            "failed": stats.failed,
            "blocked": stats.blocked,
            "skipped": stats.skipped,
            "untested": stats.untested,
        },
        "pass_rate": pass_rate(stats.passed, stats.total),
        "environment_id": run.environment_id,
        "milestone_id": run.milestone_id,
        "time_spent": run.time_spent,
        "cases_count": run.cases_count or 0,
    }


def format_test_run_list(runs: QaseTestRunList, cached: bool) -> Dict[str, Any]:
    return {
        "success": True,
        "total": runs.total,
        "filtered": runs.filtered,
        "count": runs.count,
        "runs": [transform_test_run(r) for r in runs.entities],
        "cached": cached,
    }


async def get_test_runs_with_cache(
    token: str,
    user_id: str,
    params: GetTestRunsInput,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> Dict[str, Any]:
    if cache is None:
        cache = get_cache_store()
    filters = params.model_dump(exclude={"project_code"}, exclude_none=True)
    key = test_runs_key(user_id, params.project_code, filters)

    cached = await cache.get(key)
    if cached is not None:
        return format_test_run_list(QaseTestRunList.model_validate(cached), cached=True)

    try:
        async with client_factory(token) as client:
            runs = await client.get_test_runs(params.project_code, **filters)
    except Exception as e:
        return {
            "success": False, "total": 0, "filtered": 0, "count": 0, "runs": [], "cached": False,
            "error": error_message(e, "get test runs"),
        }

    await cache.set(key, runs.model_dump(mode="json"), settings.cache_ttl_test_runs)
    return format_test_run_list(runs, cached=False)


def create_get_test_runs_tool(
    token: str,
    user_id: str,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> StructuredTool:
    async def _run(**kwargs: Any) -> str:
        params = GetTestRunsInput(**kwargs)
        return to_json(await get_test_runs_with_cache(
            token, user_id, params, cache=cache, client_factory=client_factory
        ))

    return StructuredTool.from_function(
        coroutine=_run,
        name="get_test_runs",
        description=(
            "Gets test runs (test executions) from a Qase.io project. "
            "Filter by status (active, complete, abort), start date range, environment or milestone. "
            "Returns id, title, status, stats (passed/failed/blocked/total), pass_rate, start_time and end_time. "
            "Use it to calculate pass rates and execution trends."
        ),
        args_schema=GetTestRunsInput,
        handle_validation_error=True,
    )
