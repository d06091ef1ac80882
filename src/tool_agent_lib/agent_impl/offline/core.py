"""Deterministic stand-in for the model endpoint, used when no credentials are configured."""

import json
import re
from typing import Optional, Sequence

from pydantic import ValidationError

from tool_agent_lib.agent_core.base import ModelClient, ModelResponse
from tool_agent_lib.agent_core.logger import get_logger
from tool_agent_lib.agent_core.messages import Role, Turn, latest_user_turn
from tool_agent_lib.agent_core.tools.models import (
    CodeResult,
    SearchResult,
    ToolCallRequest,
    ToolError,
    ToolName,
    ToolResult,
    ToolSpec,
    TransformResult,
    parse_tool_result,
)

logger = get_logger(__name__)

SEARCH_TRIGGER = re.compile(r"search|latest|look up|google|news", re.IGNORECASE)
CODE_TRIGGER = re.compile(r"run code|execute|python|calculate|compute", re.IGNORECASE)
TRANSFORM_TRIGGER = re.compile(r"summari[sz]e|pipeline|transform|outline|extract", re.IGNORECASE)

DEMO_SNIPPET = "console.log('Hello from sandbox'); return 2+2"
IDLE_REPLY = "OK. What's next?"


class OfflineModelClient(ModelClient):
    """
    Keyword-driven model stand-in for offline and demo operation.

    A fresh user turn is matched against simple triggers and may produce one
    tool call. Once a tool result is the latest turn, the stand-in replies
    with a short description of it and no tool calls, so every turn ends
    after at most one tool round.
    """

    def __init__(self, model_name: str = "offline"):
        super().__init__(model_name=model_name)

    async def _complete_impl(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        if not turns:
            return ModelResponse(text=IDLE_REPLY)

        latest = turns[-1]
        if latest.role is Role.TOOL:
            return ModelResponse(text=self._describe_tool_turn(latest))

        user_turn = latest_user_turn(turns)
        prompt = user_turn.content if user_turn else ""
        available = {spec.name for spec in tools}
        return self._plan(prompt, available)

    @staticmethod
    def _plan(prompt: str, available: set[str]) -> ModelResponse:
        if SEARCH_TRIGGER.search(prompt) and ToolName.SEARCH.value in available:
            return ModelResponse(
                text="Let me search that.",
                tool_call_requests=[
                    ToolCallRequest(name=ToolName.SEARCH.value, arguments_json=json.dumps({"query": prompt, "limit": 5}))
                ],
            )
        if CODE_TRIGGER.search(prompt) and ToolName.RUN_CODE.value in available:
            return ModelResponse(
                text="Executing code in the sandbox.",
                tool_call_requests=[
                    ToolCallRequest(name=ToolName.RUN_CODE.value, arguments_json=json.dumps({"code": DEMO_SNIPPET}))
                ],
            )
        if TRANSFORM_TRIGGER.search(prompt) and ToolName.TRANSFORM.value in available:
            return ModelResponse(
                text="Running the transform pipeline.",
                tool_call_requests=[
                    ToolCallRequest(
                        name=ToolName.TRANSFORM.value,
                        arguments_json=json.dumps({"workflow": "summarize", "data": prompt}),
                    )
                ],
            )
        return ModelResponse(text=IDLE_REPLY)

    @staticmethod
    def _describe_tool_turn(turn: Turn) -> str:
        try:
            result: Optional[ToolResult] = parse_tool_result(turn.content)
        except ValidationError:
            logger.debug("Offline model could not parse tool turn %s.", turn.tool_call_id)
            result = None

        if isinstance(result, ToolError):
            return f"The {turn.tool_name} tool failed: {result.error}"
        if isinstance(result, SearchResult):
            if not result.results:
                return f"No results found for '{result.query}'."
            lines = [f"Found {len(result.results)} result(s) via {result.provider}:"]
            lines.extend(f"- {hit.title} {hit.link}".rstrip() for hit in result.results)
            return "\n".join(lines)
        if isinstance(result, TransformResult):
            return f"{result.workflow}: {result.output}"
        if isinstance(result, CodeResult):
            if result.error:
                return f"The code raised an error: {result.error}"
            return f"The code returned {json.dumps(result.result)}."
        return f"The {turn.tool_name} tool returned: {turn.content}"
