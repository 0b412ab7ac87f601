"""세션 단위 공용 데이터 모델"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

Role = Literal["user", "assistant", "system"]


@dataclass(frozen=True)
class Project:
    """사용자에게 노출되는 프로젝트 요약"""

    code: str
    title: str


@dataclass(frozen=True)
class AgentConfig:
    """에이전트/분류기 구동에 필요한 자격 증명과 스코프

    Attributes:
        model_api_key: 언어 모델 API 키 (BYOK)
        provider_token: Qase API 토큰
        user_id: 세션 식별자
        project_code: 현재 바인딩된 프로젝트 코드 (없으면 None)
    """

    model_api_key: str
    provider_token: str
    user_id: str
    project_code: Optional[str] = None

    @property
    def cache_key(self) -> str:
        return f"{self.user_id}:{self.project_code or 'all'}"

    def with_project(self, project_code: Optional[str]) -> "AgentConfig":
        return AgentConfig(
            model_api_key=self.model_api_key,
            provider_token=self.provider_token,
            user_id=self.user_id,
            project_code=project_code,
        )


@dataclass(frozen=True)
class ChatTurn:
    """대화 메모리의 한 항목"""

    role: Role
    content: str
    created_at: datetime = field(default_factory=datetime.now)
