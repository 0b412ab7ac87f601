"""Qase API 예외 계층"""

from typing import Dict, List, Optional


class QaseApiError(Exception):
    """Qase API 호출 실패

    Attributes:
        status_code: HTTP 상태 코드 (전송 오류는 0)
        error_fields: 필드별 검증 오류 메시지
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error_fields: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_fields = error_fields or {}


class QaseAuthError(QaseApiError):
    """토큰이 없거나 만료됨 (401/403)"""

    def __init__(self, message: str = "Invalid or expired Qase API token", status_code: int = 401):
        super().__init__(message, status_code)


class QaseRateLimitError(QaseApiError):
    """요청 한도 초과 (429)"""

    def __init__(self, retry_after: Optional[int] = None):
        super().__init__("Rate limit exceeded", 429)
        self.retry_after = retry_after
