"""LangChain 메시지 헬퍼"""

from typing import Any, Iterable, List


def message_text(content: Any) -> str:
    """메시지 content(str 또는 content block 리스트)에서 텍스트만 추출"""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def tool_call_names(messages: Iterable[Any]) -> List[str]:
    """메시지들의 tool_calls에서 도구 이름을 순서대로 중복 없이 수집"""
    names: List[str] = []
    for msg in messages:
        for call in getattr(msg, "tool_calls", None) or []:
            name = call.get("name") if isinstance(call, dict) else getattr(call, "name", None)
            if name and name not in names:
                names.append(name)
    return names
