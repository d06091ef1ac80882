"""Tool-related data models."""

from .models import ToolName, ToolSpec, ToolDefinition
from .tool_call import (
    ToolCallRequest,
    SearchHit,
    SearchResult,
    TransformResult,
    CodeResult,
    ToolError,
    ToolResult,
    new_call_id,
    serialize_tool_result,
    parse_tool_result,
)

__all__ = [
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
    "new_call_id",
    "serialize_tool_result",
    "parse_tool_result",
]
