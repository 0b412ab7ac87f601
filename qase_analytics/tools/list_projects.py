"""도구: 프로젝트 목록 조회"""

from typing import Any, Dict, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from qase_analytics.models.qase import QaseProjectList
from qase_analytics.services.cache import BaseCacheStore, get_cache_store
from qase_analytics.services.cache.keys import projects_key
from qase_analytics.services.qase import QaseClient
from qase_analytics.settings import settings

from .common import ClientFactory, error_message, to_json

DEFAULT_LIMIT = 100


class ListProjectsInput(BaseModel):
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=100, description="Maximum number of projects to return (1-100)")
    offset: int = Field(default=0, ge=0, description="Number of projects to skip for pagination")


def format_project_list(projects: QaseProjectList, cached: bool) -> Dict[str, Any]:
    return {
        "success": True,
        "total": projects.total,
        "count": len(projects.entities),
        "projects": [
            {
                "code": p.code,
                "title": p.title,
                "description": p.description,
                "cases_count": p.counts.cases if p.counts else None,
                "suites_count": p.counts.suites if p.counts else None,
            }
            for p in projects.entities
        ],
        "cached": cached,
    }


async def list_projects_with_cache(
    token: str,
    user_id: str,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> Dict[str, Any]:
    """프로젝트 목록 조회 (기본 페이지만 캐시)

    Returns:
        success=False인 경우 `error` 키에 사유가 담긴 딕셔너리
    """
    if cache is None:
        cache = get_cache_store()
    key = projects_key(user_id)
    cacheable = limit == DEFAULT_LIMIT and offset == 0

    if cacheable:
        cached = await cache.get(key)
        if cached is not None:
            return format_project_list(QaseProjectList.model_validate(cached), cached=True)

    try:
        async with client_factory(token) as client:
            projects = await client.get_projects(limit=limit, offset=offset)
    except Exception as e:
        return {"success": False, "total": 0, "count": 0, "projects": [], "error": error_message(e, "list projects")}

    if cacheable:
        await cache.set(key, projects.model_dump(mode="json"), settings.cache_ttl_projects)
    return format_project_list(projects, cached=False)


def create_list_projects_tool(
    token: str,
    user_id: str,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> StructuredTool:
    async def _run(limit: int = DEFAULT_LIMIT, offset: int = 0) -> str:
        result = await list_projects_with_cache(
            token, user_id, limit, offset, cache=cache, client_factory=client_factory
        )
        return to_json(result)

    return StructuredTool.from_function(
        coroutine=_run,
        name="list_projects",
        description=(
            "Lists all projects available in the Qase.io account. "
            "Returns project code, name, description, and counts. "
            "Use this tool when the user asks about available projects or wants to select a project. "
            "Supports pagination with limit and offset."
        ),
        args_schema=ListProjectsInput,
        handle_validation_error=True,
    )
