"""채팅 서비스"""

from .chat_service import ChatMessage, ChatResult, ChatService

__all__ = ["ChatMessage", "ChatResult", "ChatService"]
