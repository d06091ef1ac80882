"""Public exports for the agent orchestration core."""

from .agent import (
    AgentLoop,
    AgentState,
    AgentEvent,
    AssistantTextEvent,
    ToolResultEvent,
    WarningEvent,
    TurnResult,
    DEFAULT_SYSTEM_PROMPT,
)
from .base import ModelClient, ModelResponse
from .config import AgentConfig
from .exceptions import (
    AgentLoopError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolValidationError,
    SandboxError,
    ProviderError,
    ConversationError,
    CycleLimitExceededError,
)
from .logger import get_logger, setup_logging
from .messages import ConversationState, Role, Turn
from .sandbox import ConsoleEntry, ExecutionOutcome, IsolatedExecutor
from .tools import (
    ToolName,
    ToolSpec,
    ToolDefinition,
    ToolCallRequest,
    SearchHit,
    SearchResult,
    TransformResult,
    CodeResult,
    ToolError,
    ToolResult,
    serialize_tool_result,
    parse_tool_result,
    ToolRegistry,
    ToolDispatcher,
    ToolHandlers,
    build_default_registry,
)

__all__ = [
    "AgentLoop",
    "AgentState",
    "AgentEvent",
    "AssistantTextEvent",
    "ToolResultEvent",
    "WarningEvent",
    "TurnResult",
    "DEFAULT_SYSTEM_PROMPT",
    "ModelClient",
    "ModelResponse",
    "AgentConfig",
    "AgentLoopError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolValidationError",
    "SandboxError",
    "ProviderError",
    "ConversationError",
    "CycleLimitExceededError",
    "get_logger",
    "setup_logging",
    "ConversationState",
    "Role",
    "Turn",
    "ConsoleEntry",
    "ExecutionOutcome",
    "IsolatedExecutor",
    "ToolName",
    "ToolSpec",
    "ToolDefinition",
    "ToolCallRequest",
    "SearchHit",
    "SearchResult",
    "TransformResult",
    "CodeResult",
    "ToolError",
    "ToolResult",
    "serialize_tool_result",
    "parse_tool_result",
    "ToolRegistry",
    "ToolDispatcher",
    "ToolHandlers",
    "build_default_registry",
]
