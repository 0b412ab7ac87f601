"""도구 공용 헬퍼: 코드 매핑, 오류 변환, 직렬화"""

import json
from typing import Any, Callable, Dict

from qase_analytics.services.qase import QaseApiError, QaseAuthError, QaseClient
from qase_analytics.utils.log import get_logger

logger = get_logger("tools")

ClientFactory = Callable[[str], QaseClient]

# Qase 숫자 코드 -> 이름
SEVERITY_MAP = {0: "undefined", 1: "blocker", 2: "critical", 3: "major", 4: "normal", 5: "minor", 6: "trivial"}
PRIORITY_MAP = {0: "undefined", 1: "high", 2: "medium", 3: "low"}
AUTOMATION_MAP = {0: "is-not-automated", 1: "automated", 2: "to-be-automated"}
CASE_STATUS_MAP = {0: "actual", 1: "draft", 2: "deprecated"}
RUN_STATUS_MAP = {0: "active", 1: "complete", 2: "abort"}

AUTH_ERROR_MESSAGE = "Invalid or expired Qase API token. Please reconnect."


def pass_rate(passed: int, total: int) -> float:
    """통과율(%) 소수 둘째 자리 반올림"""
    if total <= 0:
        return 0
    return round(passed / total * 100, 2)


def error_message(error: Exception, action: str) -> str:
    """도구 실패를 모델에 전달할 문자열로 변환"""
    if isinstance(error, QaseAuthError):
        return AUTH_ERROR_MESSAGE
    if isinstance(error, QaseApiError):
        return f"Qase API error: {error.message}"
    logger.error("%s 실패: %s", action, error, exc_info=True)
    return f"Failed to {action}. Please try again."


def to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)
