"""Implementations of the three tools offered to the model."""

from typing import Annotated, Optional, Protocol

from pydantic import Field

from ..models import CodeResult, SearchResult, TransformResult
from ..registry import ToolRegistry
from ...logger import get_logger
from ...sandbox import ExecutionOutcome

logger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 5
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 10
DEFAULT_WORKFLOW = "summarize"


class SearchService(Protocol):
    async def search(self, query: str, limit: int) -> SearchResult: ...


class TransformService(Protocol):
    async def transform(self, workflow: str, data: str) -> TransformResult: ...


class CodeExecutor(Protocol):
    async def execute(self, code: str, timeout: Optional[float] = None) -> ExecutionOutcome: ...


def clamp_search_limit(limit: int) -> int:
    return max(MIN_SEARCH_LIMIT, min(MAX_SEARCH_LIMIT, int(limit)))


class ToolHandlers:
    """
    Binds the tool signatures exposed to the model to the services that serve them.

    The method names, docstrings and annotated parameters are what the
    registry turns into tool specs.
    """

    def __init__(self, search_service: SearchService, transform_service: TransformService, executor: CodeExecutor):
        self._search = search_service
        self._transform = transform_service
        self._executor = executor

    async def search(
        self,
        query: Annotated[str, Field(description="Search query")],
        limit: Annotated[int, Field(description="Max results (1-10)")] = DEFAULT_SEARCH_LIMIT,
    ) -> SearchResult:
        """Search the web and return top snippet results."""
        limit = clamp_search_limit(limit)
        logger.debug("search(query=%r, limit=%d)", query, limit)
        return await self._search.search(query, limit)

    async def transform(
        self,
        data: Annotated[str, Field(description="Input text or JSON string")],
        workflow: Annotated[
            Optional[str], Field(description="Workflow name (e.g., summarize, extract, outline, rewrite)")
        ] = None,
    ) -> TransformResult:
        """Apply a small text transform (summarize, extract, outline, rewrite) to the provided input only."""
        return await self._transform.transform(workflow or DEFAULT_WORKFLOW, data)

    async def run_code(
        self,
        code: Annotated[
            str,
            Field(description="Python code. Log with console.log(...) or print(...); a top-level return sets the result"),
        ],
    ) -> CodeResult:
        """Run Python code in an isolated sandbox and return console logs plus the result."""
        outcome = await self._executor.execute(code)
        return CodeResult(logs=outcome.logs, result=outcome.result, error=outcome.error)


def build_default_registry(handlers: ToolHandlers) -> ToolRegistry:
    """Register ``search``, ``transform`` and ``run_code`` from ``handlers``."""
    registry = ToolRegistry()
    registry.register(handlers.search)
    registry.register(handlers.transform)
    registry.register(handlers.run_code)
    return registry
