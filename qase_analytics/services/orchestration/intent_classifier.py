"""의도 분류기 (IntentClassifier)

사용자 메시지를 4가지 의도로 분류하고 프로젝트 필요 여부와
언급된 프로젝트 코드를 추출합니다. JSON 모드 경량 모델을 사용합니다.
"""

import json
import re
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from qase_analytics.prompts import INTENT_CLASSIFICATION_SYSTEM_PROMPT, INTENT_CONTEXT_TEMPLATE
from qase_analytics.utils.log import get_logger, preview
from qase_analytics.utils.messages import message_text

from .models import Intent, IntentType

logger = get_logger("orchestrator")


class IntentClassifier:
    """LLM 기반 의도 분류기"""

    def __init__(self, llm: Any):
        """
        Args:
            llm: `ainvoke`를 제공하는 채팅 모델 (temperature 0 권장)
        """
        self.llm = llm

    async def classify(self, user_input: str, prior_project_code: str | None = None) -> Intent:
        """사용자 입력의 의도를 분류

        모델 출력이 올바른 JSON이 아니면 GENERAL로 분류합니다.
        모델 호출 자체의 오류는 호출자에게 전파됩니다.

        Args:
            user_input: 사용자 메시지
            prior_project_code: 현재 선택된 프로젝트 (분류 힌트)

        Returns:
            Intent 객체
        """
        system = INTENT_CLASSIFICATION_SYSTEM_PROMPT
        if prior_project_code:
            system += "\n\n" + INTENT_CONTEXT_TEMPLATE.format(project_code=prior_project_code)

        response = await self.llm.ainvoke(
            [SystemMessage(content=system), HumanMessage(content=user_input)],
            response_format={"type": "json_object"},
        )
        raw = message_text(getattr(response, "content", response))

        intent = self._parse_response(raw)
        intent.raw_response = raw
        if intent.metadata.get("parse_error"):
            logger.warning("의도 분류 응답 파싱 실패, general로 처리: %s", preview(raw))
        else:
            logger.info(
                "의도 분류: %s needs_project=%s code=%s",
                intent.intent_type.value, intent.needs_project, intent.extracted_project_code,
            )
        return intent

    def _parse_response(self, response_text: str) -> Intent:
        """LLM 응답을 Intent 객체로 파싱"""
        try:
            # JSON 추출 (응답에 다른 텍스트가 섞여있을 수 있음)
            json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
            data = json.loads(json_match.group() if json_match else response_text)
            if not isinstance(data, dict):
                raise ValueError("JSON object expected")
        except (json.JSONDecodeError, ValueError, TypeError):
            return Intent(intent_type=IntentType.GENERAL, metadata={"parse_error": True})

        intent_str = str(data.get("intent", "general")).strip().lower()
        needs_project = data.get("needs_project", data.get("needsProject", False))
        code = data.get("extracted_project_code", data.get("extractedProjectCode"))

        intent_type = self._map_intent_type(intent_str)
        metadata = {} if intent_type.value == intent_str else {"unknown_intent": intent_str}
        return Intent(
            intent_type=intent_type,
            needs_project=needs_project is True,
            extracted_project_code=self._normalize_code(code),
            metadata=metadata,
        )

    def _map_intent_type(self, intent_str: str) -> IntentType:
        """문자열을 IntentType으로 매핑"""
        mapping = {
            "query_data": IntentType.QUERY_DATA,
            "list_projects": IntentType.LIST_PROJECTS,
            "select_project": IntentType.SELECT_PROJECT,
            "general": IntentType.GENERAL,
        }
        return mapping.get(intent_str, IntentType.GENERAL)

    @staticmethod
    def _normalize_code(code: Any) -> str | None:
        if not isinstance(code, str):
            return None
        code = code.strip().upper()
        return code or None
