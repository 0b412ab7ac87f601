"""Qase API 응답 모델

Qase REST API(v1)의 `result` 페이로드를 타입 안전하게 다루기 위한
Pydantic 모델 정의. 알 수 없는 필드는 무시합니다.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QaseModel(BaseModel):
    """Qase 응답 모델 공통 베이스"""
    model_config = ConfigDict(extra='ignore')


# =============================================================================
# 공통 모델
# =============================================================================

class QaseTag(QaseModel):
    id: int
    title: str


class QaseCustomField(QaseModel):
    id: int
    title: Optional[str] = None
    value: Optional[str] = None


# =============================================================================
# 프로젝트
# =============================================================================

class QaseRunCounts(QaseModel):
    total: int
    active: int


class QaseDefectCounts(QaseModel):
    total: int
    open: int


class QaseProjectCounts(QaseModel):
    """프로젝트 집계 정보"""
    cases: int = Field(default=0, description="테스트 케이스 수")
    suites: int = Field(default=0, description="스위트 수")
    milestones: int = Field(default=0, description="마일스톤 수")
    runs: Optional[QaseRunCounts] = None
    defects: Optional[QaseDefectCounts] = None


class QaseProject(QaseModel):
    """Qase 프로젝트"""
    code: str = Field(description="프로젝트 코드 (예: DEMO)")
    title: str = Field(description="프로젝트 이름")
    description: Optional[str] = None
    counts: Optional[QaseProjectCounts] = None


# =============================================================================
# 테스트 케이스
# =============================================================================

class QaseTestCase(QaseModel):
    """Qase 테스트 케이스 (enum 필드는 숫자 코드)"""
    id: int
    title: str
    description: Optional[str] = None
    preconditions: Optional[str] = None
    postconditions: Optional[str] = None
    severity: Optional[int] = Field(default=None, description="0=undefined, 1=blocker ... 6=trivial")
    priority: Optional[int] = Field(default=None, description="0=undefined, 1=high, 2=medium, 3=low")
    type: Optional[int] = Field(default=None, description="0=other, 1=functional, 2=smoke ...")
    layer: Optional[int] = None
    is_flaky: Optional[int] = None
    behavior: Optional[int] = None
    automation: Optional[int] = Field(default=None, description="0=manual, 1=automated, 2=to-be-automated")
    status: Optional[int] = Field(default=None, description="0=actual, 1=draft, 2=deprecated")
    suite_id: Optional[int] = None
    milestone_id: Optional[int] = None
    member_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    tags: List[QaseTag] = Field(default_factory=list)
    custom_fields: List[QaseCustomField] = Field(default_factory=list)


# =============================================================================
# 테스트 실행 (Run)
# =============================================================================

class QaseRunStats(QaseModel):
    """실행 통계"""
    total: int = 0
    untested: int = 0
    passed: int = 0
    failed: int = 0
    blocked: int = 0
    skipped: int = 0
    retest: int = 0
    in_progress: int = 0
    invalid: int = 0


class QaseTestRun(QaseModel):
    """Qase 테스트 실행"""
    id: int
    title: str
    description: Optional[str] = None
    status: int = Field(description="0=active, 1=complete, 2=abort")
    status_text: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    public: Optional[bool] = None
    stats: QaseRunStats = Field(default_factory=QaseRunStats)
    time_spent: Optional[int] = Field(default=None, description="소요 시간 (ms)")
    environment_id: Optional[int] = None
    milestone_id: Optional[int] = None
    plan_id: Optional[int] = None
    user_id: Optional[int] = None
    cases_count: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    tags: List[QaseTag] = Field(default_factory=list)


# =============================================================================
# 테스트 결과
# =============================================================================

class QaseResultCase(QaseModel):
    title: str
    description: Optional[str] = None
    severity: Optional[int] = None
    priority: Optional[int] = None
    suite_id: Optional[int] = None


class QaseResultStep(QaseModel):
    position: int
    status: str
    comment: Optional[str] = None


class QaseTestResult(QaseModel):
    """Qase 테스트 결과 (hash로 식별)"""
    hash: str
    comment: Optional[str] = None
    stacktrace: Optional[str] = None
    run_id: int
    case_id: int
    case: Optional[QaseResultCase] = None
    status: str = Field(description="passed, failed, blocked, skipped, invalid, in_progress ...")
    time_spent_ms: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_api_result: Optional[bool] = None
    author_id: Optional[int] = None
    created_at: Optional[str] = None
    steps: List[QaseResultStep] = Field(default_factory=list)
    param: Optional[Dict[str, Any]] = None


# =============================================================================
# 목록 응답
# =============================================================================

class QaseEntityList(QaseModel):
    """목록 응답 공통 필드"""
    total: int = 0
    filtered: int = 0
    count: int = 0


class QaseProjectList(QaseEntityList):
    entities: List[QaseProject] = Field(default_factory=list)


class QaseTestCaseList(QaseEntityList):
    entities: List[QaseTestCase] = Field(default_factory=list)


class QaseTestRunList(QaseEntityList):
    entities: List[QaseTestRun] = Field(default_factory=list)


class QaseTestResultList(QaseEntityList):
    entities: List[QaseTestResult] = Field(default_factory=list)


__all__ = [
    'QaseTag',
    'QaseCustomField',
    'QaseProjectCounts',
    'QaseProject',
    'QaseTestCase',
    'QaseRunStats',
    'QaseTestRun',
    'QaseResultCase',
    'QaseResultStep',
    'QaseTestResult',
    'QaseProjectList',
    'QaseTestCaseList',
    'QaseTestRunList',
    'QaseTestResultList',
]
