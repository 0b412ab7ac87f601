"""테스트 픽스처 및 설정"""

import functools
from pathlib import Path

import pytest
from dotenv import load_dotenv

from fakes import FakeAgent, FakeQaseApi, chat_model_returning
from qase_analytics.models.session import AgentConfig
from qase_analytics.services.agent import AgentCache
from qase_analytics.services.cache import MemoryCacheStore
from qase_analytics.services.memory import ProjectContextStore, SessionMemoryStore
from qase_analytics.services.orchestration import IntentClassifier, Orchestrator
from qase_analytics.tools import list_projects_with_cache

# 프로젝트 루트의 .env 파일 로드
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


@pytest.fixture
def config():
    """기본 자격 증명 (프로젝트 미지정)"""
    return AgentConfig(model_api_key="sk-test", provider_token="qase-token", user_id="user-1")


@pytest.fixture
def cache():
    return MemoryCacheStore()


@pytest.fixture
def memory_store():
    return SessionMemoryStore(max_messages=20, max_sessions=100)


@pytest.fixture
def project_context():
    return ProjectContextStore(max_entries=100)


@pytest.fixture
def qase_api():
    return FakeQaseApi()


@pytest.fixture
def agents():
    """생성된 FakeAgent 목록"""
    return []


@pytest.fixture
def agent_cache(agents):
    def factory(config: AgentConfig) -> FakeAgent:
        agent = FakeAgent(config)
        agents.append(agent)
        return agent

    return AgentCache(factory=factory, max_entries=100)


@pytest.fixture
def project_lister(qase_api, cache):
    """가짜 Qase API + 테스트 캐시로 바인딩된 프로젝트 조회 함수"""
    return functools.partial(list_projects_with_cache, cache=cache, client_factory=qase_api.client_factory)


@pytest.fixture
def make_orchestrator(agent_cache, project_context, memory_store, project_lister):
    """분류기/일반 대화 모델만 바꿔 끼우는 오케스트레이터 빌더"""

    def build(classifier: IntentClassifier, chat_model=None) -> Orchestrator:
        chat_model = chat_model or chat_model_returning("Olá! Como posso ajudar?")
        return Orchestrator(
            classifier_factory=lambda key: classifier,
            chat_model_factory=lambda key: chat_model,
            agent_cache=agent_cache,
            project_context=project_context,
            memory_store=memory_store,
            project_lister=project_lister,
        )

    return build
