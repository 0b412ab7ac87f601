"""에이전트 오류 -> 사용자 안내 문구 변환

원본 오류 메시지는 로그에만 남기고 사용자에게는 고정 문구만 보여줍니다.
판별 순서: Qase 인증 > 모델 키 > 요청 한도 > 타임아웃 > Qase 기타 > 일반
"""

import asyncio

import httpx
import openai

from qase_analytics.services.qase import QaseApiError, QaseAuthError

QASE_AUTH_MESSAGE = "Seu token do Qase é inválido ou expirou. Por favor, reconecte sua conta do Qase."
INVALID_MODEL_KEY_MESSAGE = "Erro de autenticação com o provedor de IA. Verifique sua chave de API da OpenAI."
RATE_LIMIT_MESSAGE = "Muitas requisições no momento. Por favor, aguarde alguns instantes e tente novamente."
TIMEOUT_MESSAGE = "A requisição demorou muito para responder. Por favor, tente novamente."
QASE_API_MESSAGE = "Ocorreu um erro ao acessar o Qase. Por favor, tente novamente."
GENERIC_MESSAGE = "Desculpe, ocorreu um erro ao processar sua solicitação. Por favor, tente novamente."


def describe_agent_error(error: BaseException) -> str:
    """예외를 사용자용 포르투갈어 안내 문구로 변환"""
    text = str(error)
    lowered = text.lower()

    if isinstance(error, QaseAuthError):
        return QASE_AUTH_MESSAGE

    if isinstance(error, openai.AuthenticationError) or "invalid_api_key" in lowered or "401" in text:
        return INVALID_MODEL_KEY_MESSAGE

    if isinstance(error, openai.RateLimitError) or "429" in text or "rate_limit" in lowered or "rate limit" in lowered:
        return RATE_LIMIT_MESSAGE

    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException, openai.APITimeoutError)) or any(
        marker in lowered for marker in ("timeout", "timed out", "etimedout")
    ):
        return TIMEOUT_MESSAGE

    if isinstance(error, QaseApiError) or "qase" in lowered:
        return QASE_API_MESSAGE

    return GENERIC_MESSAGE
