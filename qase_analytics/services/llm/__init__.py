"""LLM 서비스"""

from .factory import create_chat_model

__all__ = ["create_chat_model"]
