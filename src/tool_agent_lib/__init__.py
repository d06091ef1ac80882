"""
tool_agent_lib
==============

A conversational agent loop that lets a chat model call three tools (web
search, text transform and sandboxed code execution) until it produces a
final answer.
"""

from .agent_core import (
    AgentConfig,
    AgentLoop,
    AgentEvent,
    AssistantTextEvent,
    ToolResultEvent,
    WarningEvent,
    TurnResult,
    ConversationState,
    Turn,
    Role,
    ToolName,
    ToolCallRequest,
    ToolResult,
    CycleLimitExceededError,
    AgentLoopError,
    setup_logging,
)
from .factory import AgentSession, build_agent

__all__ = [
    "AgentConfig",
    "AgentLoop",
    "AgentEvent",
    "AssistantTextEvent",
    "ToolResultEvent",
    "WarningEvent",
    "TurnResult",
    "ConversationState",
    "Turn",
    "Role",
    "ToolName",
    "ToolCallRequest",
    "ToolResult",
    "CycleLimitExceededError",
    "AgentLoopError",
    "setup_logging",
    "AgentSession",
    "build_agent",
]
