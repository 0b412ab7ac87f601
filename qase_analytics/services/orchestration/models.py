"""오케스트레이션 데이터 모델"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, List, Optional, TypedDict

from qase_analytics.models.session import Project


class IntentType(Enum):
    """사용자 의도 유형"""

    QUERY_DATA = "query_data"  # 테스트 데이터/지표 조회
    LIST_PROJECTS = "list_projects"  # 프로젝트 목록
    SELECT_PROJECT = "select_project"  # 활성 프로젝트 선택/변경
    GENERAL = "general"  # 인사, 잡담, 불명확


class Route(Enum):
    """그래프 노드 (의도 분석 이후 분기 대상)"""

    ANALYZE_INTENT = "analyze_intent"
    RESOLVE_PROJECT = "resolve_project"
    ASK_PROJECT_SELECTION = "ask_project_selection"
    EXECUTE_AGENT = "execute_agent"
    LIST_PROJECTS = "list_projects"
    SELECT_PROJECT = "select_project"
    GENERAL_RESPONSE = "general_response"
    END = "__end__"


@dataclass
class Intent:
    """의도 분류 결과"""

    intent_type: IntentType
    needs_project: bool = False
    extracted_project_code: str | None = None
    raw_response: str | None = None  # LLM 원본 응답 (디버깅용)
    metadata: dict = field(default_factory=dict)

    @property
    def is_data_query(self) -> bool:
        return self.intent_type == IntentType.QUERY_DATA

    @property
    def mentions_project(self) -> bool:
        return bool(self.extracted_project_code)


def merge_tools_used(left: List[str], right: List[str]) -> List[str]:
    """도구 이름 합집합 (순서 유지)"""
    merged = list(left or [])
    for name in right or []:
        if name not in merged:
            merged.append(name)
    return merged


class OrchestratorState(TypedDict, total=False):
    """그래프 상태. 노드는 바뀐 필드만 반환합니다."""

    input: str
    user_id: str
    model_api_key: str
    provider_token: str
    project_code: Optional[str]
    extracted_project_code: Optional[str]  # 이번 메시지에서 언급된 코드
    projects: Optional[List[Project]]
    needs_project_selection: bool
    intent: IntentType
    response: Optional[str]
    tools_used: Annotated[List[str], merge_tools_used]
    duration_ms: int
    error: Optional[str]


@dataclass
class OrchestratorResult:
    """오케스트레이터 실행 결과"""

    response: str
    needs_project_selection: bool = False
    projects: Optional[List[Project]] = None
    tools_used: List[str] = field(default_factory=list)
    duration_ms: int = 0
    intent: Optional[IntentType] = None
    project_code: Optional[str] = None
    error: Optional[str] = None
