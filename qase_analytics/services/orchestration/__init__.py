"""오케스트레이션 모듈

의도분류 → 라우팅 → 응답생성 파이프라인
"""

from .events import (
    DoneEvent,
    ErrorEvent,
    NeedsSelectionEvent,
    OrchestratorCallbacks,
    OrchestratorEvent,
    ProjectsFoundEvent,
    TokenEvent,
    ToolEndEvent,
    ToolStartEvent,
)
from .intent_classifier import IntentClassifier
from .models import Intent, IntentType, OrchestratorResult, OrchestratorState, Route
from .orchestrator import Orchestrator, get_orchestrator

__all__ = [
    "DoneEvent",
    "ErrorEvent",
    "Intent",
    "IntentClassifier",
    "IntentType",
    "NeedsSelectionEvent",
    "Orchestrator",
    "OrchestratorCallbacks",
    "OrchestratorEvent",
    "OrchestratorResult",
    "OrchestratorState",
    "ProjectsFoundEvent",
    "Route",
    "TokenEvent",
    "ToolEndEvent",
    "ToolStartEvent",
    "get_orchestrator",
]
