"""Qase REST API 비동기 클라이언트

- 인증 헤더: `Token: <api token>`
- 응답 봉투: `{"status": bool, "result": ...}`
- 5xx/408/전송 오류는 지수 백오프(+30% 지터)로 재시도
- 401/403, 429는 재시도하지 않고 즉시 예외 발생
"""

import asyncio
import random
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from qase_analytics.models.qase import (
    QaseProject,
    QaseProjectList,
    QaseTestCase,
    QaseTestCaseList,
    QaseTestResult,
    QaseTestResultList,
    QaseTestRun,
    QaseTestRunList,
)
from qase_analytics.services.qase.errors import QaseApiError, QaseAuthError, QaseRateLimitError
from qase_analytics.settings import settings
from qase_analytics.utils.log import get_logger

logger = get_logger("client")

TModel = TypeVar("TModel", bound=BaseModel)


def _is_retryable(status_code: int) -> bool:
    # 0은 전송 오류 (연결 실패, 타임아웃)
    return status_code == 0 or status_code >= 500 or status_code == 408


class QaseClient:
    """Qase API 클라이언트

    Example:
        >>> async with QaseClient(token) as client:
        ...     projects = await client.get_projects(limit=10)
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        *,
        max_retries: Optional[int] = None,
        initial_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        backoff_multiplier: Optional[float] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not token:
            raise ValueError("Qase API token is required")

        self.base_url = (base_url or settings.qase_api_base_url).rstrip("/")
        self.max_retries = settings.qase_max_retries if max_retries is None else max_retries
        self.initial_delay = settings.qase_initial_delay_seconds if initial_delay is None else initial_delay
        self.max_delay = settings.qase_max_delay_seconds if max_delay is None else max_delay
        self.backoff_multiplier = backoff_multiplier or settings.qase_backoff_multiplier

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Token": token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout or settings.qase_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "QaseClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # 내부 요청 처리
    # ------------------------------------------------------------------

    def _backoff(self, attempt: int) -> float:
        delay = self.initial_delay * (self.backoff_multiplier ** attempt)
        jitter = random.random() * 0.3 * delay
        return min(delay + jitter, self.max_delay)

    async def _send(self, endpoint: str, params: Optional[Dict[str, Any]]) -> Any:
        try:
            response = await self._client.get(endpoint, params=params)
        except httpx.TimeoutException as e:
            raise QaseApiError(f"Request timeout: {e}", 0) from e
        except httpx.TransportError as e:
            raise QaseApiError(f"Network error: {e}", 0) from e

        if response.status_code in (401, 403):
            raise QaseAuthError(status_code=response.status_code)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise QaseRateLimitError(int(retry_after) if retry_after and retry_after.isdigit() else None)

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = (body.get("errorMessage") if isinstance(body, dict) else None) or f"HTTP {response.status_code}"
            fields = body.get("errorFields") if isinstance(body, dict) else None
            raise QaseApiError(message, response.status_code, fields)

        try:
            data = response.json()
        except ValueError as e:
            raise QaseApiError("Invalid response format from Qase API", 500) from e

        if not isinstance(data, dict) or not data.get("status") or "result" not in data:
            raise QaseApiError("Invalid response format from Qase API", 500)

        return data["result"]

    async def _request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """재시도를 포함한 GET 요청 후 `result` 반환"""
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        attempt = 0
        while True:
            try:
                return await self._send(endpoint, params)
            except (QaseAuthError, QaseRateLimitError):
                raise
            except QaseApiError as e:
                if attempt >= self.max_retries or not _is_retryable(e.status_code):
                    raise
                delay = self._backoff(attempt)
                logger.warning(
                    "Qase API request failed (attempt %d/%d): %s, retrying in %.0fms",
                    attempt + 1, self.max_retries + 1, e.message, delay * 1000,
                )
                await asyncio.sleep(delay)
                attempt += 1

    @staticmethod
    def _parse(model: Type[TModel], result: Any, what: str) -> TModel:
        try:
            return model.model_validate(result)
        except ValidationError as e:
            raise QaseApiError(f"Invalid {what} response from Qase API", 500) from e

    # ------------------------------------------------------------------
    # 프로젝트
    # ------------------------------------------------------------------

    async def get_projects(self, limit: int = 100, offset: int = 0) -> QaseProjectList:
        result = await self._request("/project", {"limit": limit, "offset": offset})
        return self._parse(QaseProjectList, result, "project list")

    async def get_project(self, code: str) -> QaseProject:
        result = await self._request(f"/project/{code}")
        return self._parse(QaseProject, result, "project")

    async def validate_token(self) -> bool:
        """토큰 유효성 확인 (인증 실패 외의 오류는 그대로 전파)"""
        try:
            await self.get_projects(limit=1)
            return True
        except QaseAuthError:
            return False

    # ------------------------------------------------------------------
    # 테스트 케이스
    # ------------------------------------------------------------------

    async def get_test_cases(
        self,
        project_code: str,
        *,
        search: Optional[str] = None,
        milestone_id: Optional[int] = None,
        suite_id: Optional[int] = None,
        severity: Optional[str] = None,
        priority: Optional[str] = None,
        type: Optional[str] = None,
        behavior: Optional[str] = None,
        automation: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> QaseTestCaseList:
        """프로젝트의 테스트 케이스 목록

        Args:
            project_code: 프로젝트 코드
            severity 등 필터: 쉼표로 구분된 값 (예: "critical,major")
        """
        params = {
            "limit": limit,
            "offset": offset,
            "search": search or None,
            "milestone_id": milestone_id,
            "suite_id": suite_id,
            "severity": severity or None,
            "priority": priority or None,
            "type": type or None,
            "behavior": behavior or None,
            "automation": automation or None,
            "status": status or None,
        }
        result = await self._request(f"/case/{project_code}", params)
        return self._parse(QaseTestCaseList, result, "test cases")

    async def get_test_case(self, project_code: str, case_id: int) -> QaseTestCase:
        result = await self._request(f"/case/{project_code}/{case_id}")
        return self._parse(QaseTestCase, result, "test case")

    # ------------------------------------------------------------------
    # 테스트 실행
    # ------------------------------------------------------------------

    async def get_test_runs(
        self,
        project_code: str,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        milestone: Optional[int] = None,
        environment: Optional[int] = None,
        from_start_time: Optional[str] = None,
        to_start_time: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> QaseTestRunList:
        params = {
            "limit": limit,
            "offset": offset,
            "search": search or None,
            "status": status or None,
            "milestone": milestone,
            "environment": environment,
            "from_start_time": from_start_time or None,
            "to_start_time": to_start_time or None,
        }
        result = await self._request(f"/run/{project_code}", params)
        return self._parse(QaseTestRunList, result, "test runs")

    async def get_test_run(self, project_code: str, run_id: int) -> QaseTestRun:
        result = await self._request(f"/run/{project_code}/{run_id}")
        return self._parse(QaseTestRun, result, "test run")

    # ------------------------------------------------------------------
    # 테스트 결과
    # ------------------------------------------------------------------

    async def get_test_results(
        self,
        project_code: str,
        *,
        status: Optional[str] = None,
        run: Optional[int] = None,
        case_id: Optional[int] = None,
        member: Optional[int] = None,
        from_end_time: Optional[str] = None,
        to_end_time: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> QaseTestResultList:
        params = {
            "limit": limit,
            "offset": offset,
            "status": status or None,
            "run": run,
            "case_id": case_id,
            "member": member,
            "from_end_time": from_end_time or None,
            "to_end_time": to_end_time or None,
        }
        result = await self._request(f"/result/{project_code}", params)
        return self._parse(QaseTestResultList, result, "test results")

    async def get_test_result(self, project_code: str, result_hash: str) -> QaseTestResult:
        result = await self._request(f"/result/{project_code}/{result_hash}")
        return self._parse(QaseTestResult, result, "test result")
