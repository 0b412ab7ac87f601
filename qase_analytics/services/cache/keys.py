"""캐시 키 생성 규칙

- 프로젝트 목록: `qase:projects:{user}`
- 테스트 케이스: `qase:cases:{user}:{project}:{filter_hash}`
- 테스트 실행:   `qase:runs:{user}:{project}:{filter_hash}`
- 실행 결과:     `qase:results:{user}:{project}:{run_id}:{filter_hash}`
"""

import hashlib
import json
from typing import Any, Mapping


def filter_hash(filters: Mapping[str, Any]) -> str:
    """None을 제외한 필터를 정렬된 JSON으로 만든 뒤 MD5 앞 12자리"""
    cleaned = {k: v for k, v in filters.items() if v is not None}
    payload = json.dumps(cleaned, sort_keys=True, ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()[:12]


def projects_key(user_id: str) -> str:
    return f"qase:projects:{user_id}"


def test_cases_key(user_id: str, project_code: str, filters: Mapping[str, Any]) -> str:
    return f"qase:cases:{user_id}:{project_code}:{filter_hash(filters)}"


def test_runs_key(user_id: str, project_code: str, filters: Mapping[str, Any]) -> str:
    return f"qase:runs:{user_id}:{project_code}:{filter_hash(filters)}"


def run_results_key(user_id: str, project_code: str, run_id: int, filters: Mapping[str, Any]) -> str:
    return f"qase:results:{user_id}:{project_code}:{run_id}:{filter_hash(filters)}"
