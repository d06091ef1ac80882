"""Message envelopes exchanged with the sandbox worker and the normalized outcome."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConsoleEntry(BaseModel):
    """One console-style call captured inside the sandbox.

    Attributes:
        level: Console method that produced the entry (``log``, ``info``, ``warn``, ``error``, ``debug``).
        args: Positional arguments, JSON values or ``repr`` strings for anything else.
    """

    model_config = ConfigDict(extra="forbid")

    level: str
    args: List[Any] = Field(default_factory=list)


class RunMessage(BaseModel):
    """Request sent across the isolation boundary."""

    type: Literal["run"] = "run"
    id: str
    code: str
    timeout: Optional[float] = None


class ResultMessage(BaseModel):
    """Reply posted back by the worker for a single ``run`` request."""

    type: Literal["result"] = "result"
    id: str
    logs: List[ConsoleEntry] = Field(default_factory=list)
    result: Any = None
    error: Optional[str] = None


class ExecutionOutcome(BaseModel):
    """Normalized output of one sandboxed execution."""

    logs: List[ConsoleEntry] = Field(default_factory=list)
    result: Any = None
    error: Optional[str] = None
