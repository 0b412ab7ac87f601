"""LLM 팩토리

용도(intent/chat/agent)별 기본값으로 ChatOpenAI 인스턴스를 생성합니다.
요청마다 사용자 키(BYOK)를 받을 수 있으며, 없으면 OPENAI_API_KEY를 사용합니다.
"""

from typing import Literal

from langchain_openai import ChatOpenAI

from qase_analytics.settings import settings

Purpose = Literal["intent", "chat", "agent"]


def create_chat_model(
    api_key: str | None = None,
    purpose: Purpose = "chat",
    model: str | None = None,
    streaming: bool | None = None,
) -> ChatOpenAI:
    """용도별 채팅 모델 생성

    Args:
        api_key: 사용자 OpenAI 키 (None이면 설정값)
        purpose: "intent"(분류, temperature 0) | "chat"(일반 대화) | "agent"(도구 호출)
        model: 모델명 강제 지정
        streaming: 스트리밍 여부 (None이면 agent만 True)

    Returns:
        ChatOpenAI 인스턴스
    """
    key = api_key or settings.openai_api_key
    if not key:
        raise ValueError("OpenAI API key is required")

    if purpose == "intent":
        return ChatOpenAI(
            model=model or settings.openai_model_intent,
            temperature=0,
            api_key=key,
            streaming=bool(streaming),
        )
    if purpose == "agent":
        return ChatOpenAI(
            model=model or settings.openai_model_agent,
            temperature=settings.agent_temperature,
            max_tokens=settings.agent_max_tokens,
            timeout=settings.agent_timeout_seconds,
            api_key=key,
            streaming=True if streaming is None else streaming,
        )
    if purpose == "chat":
        return ChatOpenAI(
            model=model or settings.openai_model_chat,
            temperature=0.3,
            api_key=key,
            streaming=bool(streaming),
        )
    raise ValueError(f"지원하지 않는 LLM 용도: {purpose}")
