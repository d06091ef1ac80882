"""Turns of the conversation transcript."""

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ..tools.models import ToolCallRequest


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Turn(BaseModel):
    """One role-tagged entry of the transcript.

    Attributes:
        role: Who produced the turn.
        content: Text payload. For tool turns, the serialized tool result.
        tool_call_id: For tool turns, the id of the request being answered.
        tool_name: For tool turns, the requested tool name.
        tool_calls: For assistant turns, the tool calls the model emitted.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None
    tool_calls: Optional[List[ToolCallRequest]] = None

    @classmethod
    def system(cls, content: str) -> "Turn":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str, tool_calls: Optional[List[ToolCallRequest]] = None) -> "Turn":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=list(tool_calls) if tool_calls else None)

    @classmethod
    def tool(cls, content: str, tool_call_id: str, tool_name: str) -> "Turn":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id, tool_name=tool_name)


def latest_user_turn(turns: Sequence[Turn]) -> Optional[Turn]:
    """Return the most recent user turn of a transcript, if there is one."""
    for turn in reversed(turns):
        if turn.role is Role.USER:
            return turn
    return None
