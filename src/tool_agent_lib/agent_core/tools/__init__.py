from .models import (
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
)
from .registry import ToolRegistry
from .schema import SchemaValidator
from .execution import ToolDispatcher, ToolHandlers, build_default_registry

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
    "serialize_tool_result",
    "parse_tool_result",
    "ToolRegistry",
    "SchemaValidator",
    "ToolDispatcher",
    "ToolHandlers",
    "build_default_registry",
]
