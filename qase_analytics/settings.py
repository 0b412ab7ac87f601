"""애플리케이션 설정 관리"""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env 파일 로드
load_dotenv()

# 프로젝트 루트 디렉토리
ROOT_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM 설정
    openai_api_key: str | None = Field(default=None, description="OpenAI API 키 (풀 키)")
    openai_model_intent: str = Field(default="gpt-4o-mini", description="의도 분류용 모델")
    openai_model_chat: str = Field(default="gpt-4o-mini", description="일반 대화용 모델")
    openai_model_agent: str = Field(default="gpt-4o", description="도구 호출 에이전트용 모델")

    # 에이전트 설정
    agent_temperature: float = Field(default=0.1, description="에이전트 temperature")
    agent_max_tokens: int = Field(default=2048, description="에이전트 최대 응답 토큰")
    agent_timeout_seconds: float = Field(default=60, description="모델 호출 타임아웃 (초)")
    agent_max_iterations: int = Field(default=15, description="추론/도구 호출 최대 반복 횟수")

    # 세션/메모리 설정
    memory_max_messages: int = Field(default=20, description="세션별 대화 윈도우 크기")
    session_max_entries: int = Field(default=1000, description="세션 맵 최대 엔트리 수 (LRU)")
    session_ttl_seconds: float | None = Field(default=None, description="세션 엔트리 TTL (초)")

    # Qase API 설정
    qase_api_base_url: str = Field(default="https://api.qase.io/v1", description="Qase API 주소")
    qase_max_retries: int = Field(default=3, description="최대 재시도 횟수")
    qase_initial_delay_seconds: float = Field(default=1.0, description="첫 재시도 대기 (초)")
    qase_max_delay_seconds: float = Field(default=10.0, description="재시도 대기 상한 (초)")
    qase_backoff_multiplier: float = Field(default=2.0, description="지수 백오프 배수")
    qase_timeout_seconds: float = Field(default=30, description="HTTP 요청 타임아웃 (초)")

    # 캐시 설정 (초)
    redis_url: str | None = Field(default=None, description="Redis URL (없으면 인메모리 캐시)")
    cache_ttl_projects: int = Field(default=5 * 60, description="프로젝트 목록 TTL")
    cache_ttl_test_cases: int = Field(default=2 * 60, description="테스트 케이스 TTL")
    cache_ttl_test_runs: int = Field(default=2 * 60, description="테스트 실행 TTL")
    cache_ttl_results: int = Field(default=5 * 60, description="실행 결과 TTL")

    # 앱 설정
    log_level: str = Field(default="INFO", description="로그 레벨")
    slow_response_threshold_ms: int = Field(default=10_000, description="느린 응답 경고 기준 (ms)")


# 전역 설정 인스턴스
settings = Settings()


def validate_settings() -> dict[str, str]:
    """설정 유효성 검사 및 경고 메시지 반환"""
    warnings = {}

    if not settings.openai_api_key:
        warnings["llm"] = (
            "OPENAI_API_KEY가 없습니다. 요청마다 사용자 키(BYOK)를 전달해야 합니다."
        )

    if settings.agent_max_iterations < 1:
        warnings["agent"] = "AGENT_MAX_ITERATIONS는 1 이상이어야 합니다."

    if settings.memory_max_messages < 1:
        warnings["memory"] = "MEMORY_MAX_MESSAGES는 1 이상이어야 합니다."

    return warnings
