"""모듈별 로거 설정

`qase.` 네임스페이스 아래 로거에 콘솔 핸들러를 한 번만 부착합니다.
"""

import logging

from qase_analytics.settings import settings

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """`qase.<name>` 로거 반환 (핸들러는 최초 1회만 부착)"""
    logger = logging.getLogger(f"qase.{name}")
    if not logger.handlers:
        logger.setLevel(settings.log_level.upper())
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger


def preview(text: str | None, max_len: int = 120) -> str:
    """로그 출력용 미리보기 문자열"""
    if not text:
        return ""
    return text if len(text) <= max_len else text[:max_len] + "…"
