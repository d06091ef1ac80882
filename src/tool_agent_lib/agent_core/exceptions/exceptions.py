"""
Custom exception classes for the agent loop.

Most failures inside a conversation cycle are converted into tool results or
warnings and never reach the caller. The hierarchy below covers registration
mistakes made at wiring time, internal signalling between components, and the
one condition the loop reports to its caller: running out of cycles.
"""

from typing import Any, List


class AgentLoopError(Exception):
    """Base exception for all agent-loop errors."""

    pass


class ToolRegistrationError(AgentLoopError):
    """Raised when there is an error registering a tool."""

    pass


class ToolNotFoundError(AgentLoopError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolValidationError(AgentLoopError):
    """Raised when tool parameters or definition are invalid."""

    pass


class SandboxError(AgentLoopError):
    """Raised when the isolated code-execution worker cannot be started or reached."""

    pass


class ProviderError(AgentLoopError):
    """Raised when a search, workflow or generation provider returns an unusable response."""

    pass


class ConversationError(AgentLoopError):
    """Raised when a turn would break the append-only transcript invariants."""

    pass


class CycleLimitExceededError(AgentLoopError):
    """Raised when the model keeps requesting tools past the configured cycle limit.

    Attributes:
        cycles: Number of model/tool cycles completed before stopping.
        events: Events surfaced during the interrupted turn.
    """

    def __init__(self, cycles: int, events: List[Any] | None = None) -> None:
        super().__init__(f"Cycle limit exceeded after {cycles} cycle(s).")
        self.cycles = cycles
        self.events = list(events or [])
