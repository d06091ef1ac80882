"""Events surfaced to the caller while a user turn is processed."""

from typing import List, Literal, Union

from pydantic import BaseModel, Field

from ..tools.models import ToolResult


class AssistantTextEvent(BaseModel):
    kind: Literal["assistant_text"] = "assistant_text"
    text: str


class ToolResultEvent(BaseModel):
    kind: Literal["tool_result"] = "tool_result"
    tool_call_id: str
    tool_name: str
    result: ToolResult


class WarningEvent(BaseModel):
    """A recoverable failure the caller should make visible (e.g. the model endpoint is unreachable)."""

    kind: Literal["warning"] = "warning"
    message: str


AgentEvent = Union[AssistantTextEvent, ToolResultEvent, WarningEvent]


class TurnResult(BaseModel):
    """Outcome of one user turn.

    Attributes:
        text: The last non-empty assistant text of the turn, or an empty string.
        events: Everything surfaced during the turn, in order.
        cycles: Number of model calls made.
    """

    text: str = ""
    events: List[AgentEvent] = Field(default_factory=list)
    cycles: int = 0
