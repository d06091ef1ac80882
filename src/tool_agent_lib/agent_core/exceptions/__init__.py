"""Export the exception hierarchy used across registration, dispatch and the agent loop."""

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

__all__ = [
    "AgentLoopError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolValidationError",
    "SandboxError",
    "ProviderError",
    "ConversationError",
    "CycleLimitExceededError",
]
