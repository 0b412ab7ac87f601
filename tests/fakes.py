"""테스트용 대역 객체"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
from langchain_core.messages import AIMessage

from qase_analytics.models.session import AgentConfig
from qase_analytics.services.agent import AgentResponse
from qase_analytics.services.orchestration import IntentClassifier
from qase_analytics.services.qase import QaseClient


def make_project(code: str, title: str, cases: int = 0) -> dict:
    return {"code": code, "title": title, "counts": {"cases": cases, "suites": 1, "milestones": 0}}


class FakeQaseApi:
    """httpx.MockTransport로 동작하는 Qase API 대역"""

    def __init__(self, projects=None):
        self.projects = projects if projects is not None else []
        self.cases = []
        self.runs = []
        self.results = []
        self.requests: list[httpx.Request] = []
        self.status_override: int | None = None

    def _ok(self, result) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "result": result})

    def _list(self, entities) -> httpx.Response:
        return self._ok({"total": len(entities), "filtered": len(entities), "count": len(entities), "entities": entities})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_override:
            return httpx.Response(self.status_override, json={"status": False, "errorMessage": "boom"})

        path = request.url.path.removeprefix("/v1")
        if path == "/project":
            return self._list(self.projects)
        if path.startswith("/case/"):
            return self._list(self.cases)
        if path.startswith("/run/"):
            return self._list(self.runs)
        if path.startswith("/result/"):
            return self._list(self.results)
        return httpx.Response(404, json={"status": False, "errorMessage": "Not found"})

    def client_factory(self, token: str) -> QaseClient:
        return QaseClient(token, transport=httpx.MockTransport(self.handler), max_retries=0)

    def count(self, prefix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.removeprefix("/v1").startswith(prefix))


class FakeAgent:
    """chat 호출을 기록하는 에이전트 대역"""

    def __init__(self, config: AgentConfig, output: str = "Resposta do agente", error: Exception | None = None):
        self.config = config
        self.output = output
        self.error = error
        self.calls: list[str] = []

    async def chat(self, message: str) -> AgentResponse:
        self.calls.append(message)
        if self.error:
            raise self.error
        return AgentResponse(output=self.output, tools_used=["get_test_cases"], duration_ms=5)

    def get_info(self) -> dict:
        return {"user_id": self.config.user_id, "project_code": self.config.project_code}


def classifier_returning(payload: dict | str) -> IntentClassifier:
    """고정 응답을 내는 분류기"""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    llm = Mock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return IntentClassifier(llm)


def chat_model_returning(text: str) -> Mock:
    llm = Mock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=text))
    return llm
