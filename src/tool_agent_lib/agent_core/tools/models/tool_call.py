"""Tool-call requests and the result shapes produced by the tool handlers.

Every result is serialized to JSON text before it is folded into the
conversation, and can be parsed back into the same model.
"""

from __future__ import annotations

import uuid
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

from ...sandbox.protocol import ConsoleEntry


def new_call_id() -> str:
    """Generate an identifier for a tool call the model did not label."""
    return f"call_{uuid.uuid4().hex[:24]}"


class ToolCallRequest(BaseModel):
    """A model-issued instruction to invoke a tool.

    Attributes:
        id: Identifier echoed back on the matching tool turn.
        name: Requested tool name; may not be a known tool.
        arguments_json: Raw JSON text of the arguments, exactly as the model produced it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_call_id)
    name: str
    arguments_json: str = ""


class SearchHit(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    link: str = ""
    snippet: str = ""


class SearchResult(BaseModel):
    """Result of the ``search`` tool. ``provider`` names the strategy that served it."""

    model_config = ConfigDict(extra="forbid")

    provider: str
    query: str
    results: List[SearchHit] = Field(default_factory=list)


class TransformResult(BaseModel):
    """Result of the ``transform`` tool."""

    model_config = ConfigDict(extra="forbid")

    workflow: str
    output: Any
    confidence: Optional[float] = None
    raw: Optional[Any] = None


class CodeResult(BaseModel):
    """Result of the ``run_code`` tool."""

    model_config = ConfigDict(extra="forbid")

    logs: List[ConsoleEntry] = Field(default_factory=list)
    result: Any = None
    error: Optional[str] = None


class ToolError(BaseModel):
    """Result returned whenever a tool call cannot be served."""

    model_config = ConfigDict(extra="forbid")

    error: str


def _result_kind(value: Any) -> str:
    """Pick the result shape from its key set.

    ``CodeResult`` fields all have defaults, so ``{"error": ...}`` would also
    validate as a code result; a bare error key is routed to ``ToolError``.
    """
    if isinstance(value, BaseModel):
        return _KIND_BY_TYPE.get(type(value), "code")
    if not isinstance(value, dict):
        return "code"
    if "provider" in value:
        return "search"
    if "workflow" in value:
        return "transform"
    if set(value) == {"error"}:
        return "error"
    return "code"


ToolResult = Annotated[
    Union[
        Annotated[SearchResult, Tag("search")],
        Annotated[TransformResult, Tag("transform")],
        Annotated[CodeResult, Tag("code")],
        Annotated[ToolError, Tag("error")],
    ],
    Discriminator(_result_kind),
]

_KIND_BY_TYPE = {SearchResult: "search", TransformResult: "transform", CodeResult: "code", ToolError: "error"}

_TOOL_RESULT_ADAPTER: TypeAdapter[ToolResult] = TypeAdapter(ToolResult)


def serialize_tool_result(result: ToolResult) -> str:
    """Render a tool result as the JSON text stored on a tool turn."""
    return result.model_dump_json()


def parse_tool_result(text: str) -> ToolResult:
    """Parse the JSON text of a tool turn back into its result model.

    Raises:
        pydantic.ValidationError: If the text is not a known result shape.
    """
    return _TOOL_RESULT_ADAPTER.validate_json(text)
