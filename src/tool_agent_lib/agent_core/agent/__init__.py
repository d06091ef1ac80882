"""Agent loop state machine and the events it surfaces."""

from .events import AgentEvent, AssistantTextEvent, ToolResultEvent, WarningEvent, TurnResult
from .loop import AgentLoop, AgentState, EventCallback
from .prompts import DEFAULT_SYSTEM_PROMPT

__all__ = [
    "AgentEvent",
    "AssistantTextEvent",
    "ToolResultEvent",
    "WarningEvent",
    "TurnResult",
    "AgentLoop",
    "AgentState",
    "EventCallback",
    "DEFAULT_SYSTEM_PROMPT",
]
