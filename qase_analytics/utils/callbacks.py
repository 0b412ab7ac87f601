"""동기/비동기 콜백 호출 헬퍼"""

import inspect
from typing import Any, Callable, Optional


async def invoke_callback(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    """콜백이 있으면 호출하고, 코루틴을 반환하면 기다림"""
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
