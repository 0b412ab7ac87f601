"""에이전트 도구 모음"""

from typing import List, Optional

from langchain_core.tools import BaseTool

from qase_analytics.services.cache import BaseCacheStore
from qase_analytics.services.qase import QaseClient

from .chart import create_generate_chart_tool, generate_chart
from .common import ClientFactory
from .list_projects import create_list_projects_tool, list_projects_with_cache
from .run_results import create_get_run_results_tool, get_run_results_with_cache
from .test_cases import create_get_test_cases_tool, get_test_cases_with_cache
from .test_runs import create_get_test_runs_tool, get_test_runs_with_cache


def create_qase_tools(
    token: str,
    user_id: str,
    *,
    cache: Optional[BaseCacheStore] = None,
    client_factory: ClientFactory = QaseClient,
) -> List[BaseTool]:
    """사용자 토큰에 바인딩된 에이전트 도구 세트"""
    kwargs = {"cache": cache, "client_factory": client_factory}
    return [
        create_list_projects_tool(token, user_id, **kwargs),
        create_get_test_cases_tool(token, user_id, **kwargs),
        create_get_test_runs_tool(token, user_id, **kwargs),
        create_get_run_results_tool(token, user_id, **kwargs),
        create_generate_chart_tool(),
    ]


__all__ = [
    "create_qase_tools",
    "generate_chart",
    "list_projects_with_cache",
    "get_test_cases_with_cache",
    "get_test_runs_with_cache",
    "get_run_results_with_cache",
]
