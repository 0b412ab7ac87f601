"""Qase API 연동"""

from .client import QaseClient
from .errors import QaseApiError, QaseAuthError, QaseRateLimitError

__all__ = ["QaseClient", "QaseApiError", "QaseAuthError", "QaseRateLimitError"]
