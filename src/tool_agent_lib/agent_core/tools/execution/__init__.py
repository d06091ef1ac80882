"""Tool dispatch and the built-in tool handlers."""

from .dispatcher import ToolDispatcher, INVALID_ARGUMENTS
from .handlers import (
    ToolHandlers,
    SearchService,
    TransformService,
    CodeExecutor,
    build_default_registry,
    clamp_search_limit,
)

__all__ = [
    "ToolDispatcher",
    "INVALID_ARGUMENTS",
    "ToolHandlers",
    "SearchService",
    "TransformService",
    "CodeExecutor",
    "build_default_registry",
    "clamp_search_limit",
]
