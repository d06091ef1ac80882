"""Maps tool-call requests onto registered handlers and normalizes their results."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models import CodeResult, SearchResult, ToolCallRequest, ToolError, ToolName, ToolResult, TransformResult
from ..registry import ToolRegistry
from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

INVALID_ARGUMENTS = "invalid arguments"

_RESULT_ADAPTER: TypeAdapter[ToolResult] = TypeAdapter(ToolResult)
_RESULT_TYPES = (SearchResult, TransformResult, CodeResult, ToolError)


class ToolDispatcher:
    """Executes tool-call requests against a registry.

    ``dispatch`` is total: malformed arguments, unknown tools, validation
    failures, handler exceptions and timeouts all come back as ``ToolError``.
    """

    def __init__(self, registry: ToolRegistry, tool_timeout: float = 60.0) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tool registry used to resolve tool definitions.
            tool_timeout: Timeout in seconds for a single handler call.
        """
        self._registry = registry
        self._tool_timeout = tool_timeout

    async def dispatch(self, request: ToolCallRequest) -> ToolResult:
        """Run one tool call.

        Args:
            request: The request as emitted by the model.

        Returns:
            The handler's result, or a ``ToolError``.
        """
        logger.debug(f"Handling tool call: {request.name} (ID: {request.id})")

        try:
            arguments = self._parse_arguments(request.arguments_json)
        except ToolValidationError as exc:
            logger.warning(f"Argument parsing failed for '{request.name}': {exc}")
            return ToolError(error=INVALID_ARGUMENTS)

        try:
            name = ToolName(request.name)
        except ValueError:
            name = None
        if name is None or name not in self._registry:
            logger.warning(f"Tool '{request.name}' not found in registry.")
            return ToolError(error=f"unknown tool: {request.name}")

        tool_def = self._registry.get(name)

        if tool_def.args_model is not None:
            try:
                arguments = tool_def.args_model(**arguments).model_dump()
            except ValidationError as exc:
                msg = f"{INVALID_ARGUMENTS}: {self._describe_validation_error(exc)}"
                logger.warning(f"Validation error for '{request.name}': {msg}")
                return ToolError(error=msg)

        try:
            logger.info(f"Executing tool '{name.value}'...")
            raw_result = await asyncio.wait_for(tool_def.func(**arguments), timeout=self._tool_timeout)
        except asyncio.TimeoutError:
            msg = f"Tool execution timed out after {self._tool_timeout} seconds."
            logger.warning(f"'{name.value}': {msg}")
            return ToolError(error=msg)
        except Exception as exc:
            logger.warning(f"Error in '{name.value}': {exc} ({type(exc).__name__})", exc_info=True)
            return ToolError(error=str(exc) or type(exc).__name__)

        return self._coerce_result(name, raw_result)

    @staticmethod
    def _parse_arguments(raw_args: str | None) -> Dict[str, Any]:
        """Decode the model's argument text into a dictionary.

        Raises:
            ToolValidationError: If the text is not JSON or not a JSON object.
        """
        if raw_args is None or not raw_args.strip():
            return {}

        try:
            parsed = json.loads(raw_args)
        except json.JSONDecodeError as exc:
            raise ToolValidationError(f"Arguments are not valid JSON: {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ToolValidationError("Function arguments must decode to a JSON object.")
        return parsed

    @staticmethod
    def _coerce_result(name: ToolName, raw_result: Any) -> ToolResult:
        if isinstance(raw_result, _RESULT_TYPES):
            return raw_result
        if isinstance(raw_result, BaseModel):
            raw_result = raw_result.model_dump()
        try:
            return _RESULT_ADAPTER.validate_python(raw_result)
        except ValidationError as exc:
            logger.error(f"Tool '{name.value}' returned an unexpected result shape: {exc}")
            return ToolError(error=f"tool '{name.value}' returned an invalid result")

    @staticmethod
    def _describe_validation_error(exc: ValidationError) -> str:
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}" for err in exc.errors()
        )
