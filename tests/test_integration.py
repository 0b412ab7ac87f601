"""실제 Qase / OpenAI API 연동 테스트

QASE_API_TOKEN과 OPENAI_API_KEY가 있을 때만 실행됩니다.
    pytest -m integration
"""

import os

import pytest

from qase_analytics.models.session import AgentConfig
from qase_analytics.services.agent import AgentCache
from qase_analytics.services.memory import ProjectContextStore, SessionMemoryStore
from qase_analytics.services.orchestration import IntentType, Orchestrator
from qase_analytics.services.qase import QaseClient

QASE_TOKEN = os.getenv("QASE_API_TOKEN")
OPENAI_KEY = os.getenv("OPENAI_API_KEY")

pytestmark = pytest.mark.integration


@pytest.mark.skipif(not QASE_TOKEN, reason="QASE_API_TOKEN이 없습니다")
async def test_real_token_lists_projects():
    """실제 토큰으로 프로젝트 목록 조회"""
    async with QaseClient(QASE_TOKEN) as client:
        assert await client.validate_token() is True
        projects = await client.get_projects(limit=5)
    assert projects.total >= len(projects.entities)


@pytest.mark.skipif(not (QASE_TOKEN and OPENAI_KEY), reason="QASE_API_TOKEN / OPENAI_API_KEY가 없습니다")
async def test_real_list_projects_intent():
    """실제 모델로 프로젝트 목록 의도 처리"""
    orchestrator = Orchestrator(
        agent_cache=AgentCache(),
        project_context=ProjectContextStore(),
        memory_store=SessionMemoryStore(),
    )
    config = AgentConfig(model_api_key=OPENAI_KEY, provider_token=QASE_TOKEN, user_id="integration")

    result = await orchestrator.run(config, "Liste meus projetos")

    assert result.intent == IntentType.LIST_PROJECTS
    assert result.response
    assert result.error is None
