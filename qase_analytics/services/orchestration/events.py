"""오케스트레이터 스트리밍 이벤트

`Orchestrator.stream_events()`가 순서대로 내보내는 불변 이벤트와
이를 콜백으로 전달하는 어댑터.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from qase_analytics.models.session import Project
from qase_analytics.utils.callbacks import invoke_callback

from .models import OrchestratorResult


@dataclass(frozen=True)
class TokenEvent:
    text: str


@dataclass(frozen=True)
class ToolStartEvent:
    name: str
    input: Any = None


@dataclass(frozen=True)
class ToolEndEvent:
    name: str
    output: Any = None


@dataclass(frozen=True)
class ProjectsFoundEvent:
    projects: List[Project] = field(default_factory=list)


@dataclass(frozen=True)
class NeedsSelectionEvent:
    projects: List[Project] = field(default_factory=list)


@dataclass(frozen=True)
class DoneEvent:
    result: OrchestratorResult


@dataclass(frozen=True)
class ErrorEvent:
    message: str
    detail: Optional[str] = None


OrchestratorEvent = Union[
    TokenEvent, ToolStartEvent, ToolEndEvent, ProjectsFoundEvent, NeedsSelectionEvent, DoneEvent, ErrorEvent
]


@dataclass
class OrchestratorCallbacks:
    """이벤트별 콜백 (동기/비동기 모두 허용)"""

    on_token: Optional[Callable[[str], Any]] = None
    on_tool_start: Optional[Callable[[str], Any]] = None
    on_tool_end: Optional[Callable[[str], Any]] = None
    on_projects_found: Optional[Callable[[List[Project]], Any]] = None
    on_needs_project_selection: Optional[Callable[[List[Project]], Any]] = None
    on_done: Optional[Callable[[OrchestratorResult], Any]] = None
    on_error: Optional[Callable[[str], Any]] = None


async def dispatch_event(event: OrchestratorEvent, callbacks: OrchestratorCallbacks) -> None:
    """이벤트를 대응하는 콜백으로 전달"""
    if isinstance(event, TokenEvent):
        await invoke_callback(callbacks.on_token, event.text)
    elif isinstance(event, ToolStartEvent):
        await invoke_callback(callbacks.on_tool_start, event.name)
    elif isinstance(event, ToolEndEvent):
        await invoke_callback(callbacks.on_tool_end, event.name)
    elif isinstance(event, ProjectsFoundEvent):
        await invoke_callback(callbacks.on_projects_found, event.projects)
    elif isinstance(event, NeedsSelectionEvent):
        await invoke_callback(callbacks.on_needs_project_selection, event.projects)
    elif isinstance(event, DoneEvent):
        await invoke_callback(callbacks.on_done, event.result)
    elif isinstance(event, ErrorEvent):
        await invoke_callback(callbacks.on_error, event.message)
