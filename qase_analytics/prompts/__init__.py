"""
Prompts module.

에이전트, 의도 분류, 일반 대화에 사용되는 LLM 프롬프트를 중앙 관리합니다.
"""

from .agent import (
    FALLBACK_RESPONSE_PROMPT,
    QASE_AGENT_SYSTEM_PROMPT,
    format_agent_system_prompt,
)

from .general import (
    GENERAL_RESPONSE_SYSTEM_PROMPT,
)

from .intent_classification import (
    INTENT_CLASSIFICATION_SYSTEM_PROMPT,
    INTENT_CONTEXT_TEMPLATE,
)

__all__ = [
    # 에이전트
    "QASE_AGENT_SYSTEM_PROMPT",
    "FALLBACK_RESPONSE_PROMPT",
    "format_agent_system_prompt",
    # 일반 대화
    "GENERAL_RESPONSE_SYSTEM_PROMPT",
    # 의도 분류
    "INTENT_CLASSIFICATION_SYSTEM_PROMPT",
    "INTENT_CONTEXT_TEMPLATE",
]
