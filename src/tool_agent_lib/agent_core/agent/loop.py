"""The agent loop: model call, tool dispatch, repeat until the model stops asking for tools."""

from __future__ import annotations

import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..base import ModelClient, ModelResponse
from ..exceptions import CycleLimitExceededError
from ..logger import get_logger
from ..messages import ConversationState, Turn
from ..tools.execution import ToolDispatcher
from ..tools.models import ToolCallRequest, serialize_tool_result
from ..tools.registry import ToolRegistry
from .events import AgentEvent, AssistantTextEvent, ToolResultEvent, TurnResult, WarningEvent
from .prompts import DEFAULT_SYSTEM_PROMPT

logger = get_logger(__name__)

EventCallback = Callable[[AgentEvent], Union[None, Awaitable[None]]]


class AgentState(str, Enum):
    AWAITING_USER = "awaiting_user"
    MODEL_CALL = "model_call"
    TOOL_DISPATCH = "tool_dispatch"
    DONE_FOR_TURN = "done_for_turn"


class AgentLoop:
    """Drives one conversation.

    Each cycle sends the full transcript and the tool specs to the model,
    records the assistant output, dispatches the requested tool calls one at a
    time in the order they were emitted and records each result, then calls
    the model again. A turn ends when a response carries no tool calls.

    The loop is strictly sequential, so one instance must not run two turns at
    once. Separate conversations use separate instances.
    """

    def __init__(
        self,
        model: ModelClient,
        dispatcher: ToolDispatcher,
        registry: ToolRegistry,
        conversation: Optional[ConversationState] = None,
        max_cycles: int = 10,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        """
        Initializes the agent loop.

        Args:
            model: The model collaborator.
            dispatcher: Executes tool-call requests.
            registry: Provides the tool specs shown to the model.
            conversation: Transcript to continue. A new one with the default
                system prompt is created when omitted.
            max_cycles: Maximum number of tool-requesting cycles per user turn.
            on_event: Optional sync or async callback receiving every surfaced event.
        """
        if max_cycles < 1:
            raise ValueError("max_cycles must be at least 1.")

        self.model = model
        self.dispatcher = dispatcher
        self.registry = registry
        self.conversation = conversation or ConversationState(DEFAULT_SYSTEM_PROMPT)
        self.max_cycles = max_cycles
        self.on_event = on_event
        self.state = AgentState.AWAITING_USER

    async def run_turn(self, user_input: str) -> TurnResult:
        """
        Processes one user message until the model stops requesting tools.

        Args:
            user_input: The user's message. Blank input is ignored.

        Returns:
            The final assistant text, the surfaced events and the cycle count.

        Raises:
            CycleLimitExceededError: If the model still requests tools after
                ``max_cycles`` cycles. Every turn recorded so far stays in the
                conversation.
        """
        text = user_input.strip()
        if not text:
            logger.debug("Ignoring blank user input.")
            return TurnResult()

        self.conversation.append(Turn.user(text))
        events: List[AgentEvent] = []
        last_text = ""
        cycles = 0

        try:
            while True:
                if cycles >= self.max_cycles:
                    logger.warning(f"Max cycles ({self.max_cycles}) reached. Stopping the turn.")
                    raise CycleLimitExceededError(cycles, events)

                cycles += 1
                self._transition(AgentState.MODEL_CALL)
                response = await self._call_model(events)

                if response.text.strip():
                    last_text = response.text
                if response.text.strip() or response.wants_tools:
                    self.conversation.append(Turn.assistant(response.text, response.tool_call_requests))
                if response.text.strip():
                    await self._emit(events, AssistantTextEvent(text=response.text))

                if not response.wants_tools:
                    self._transition(AgentState.DONE_FOR_TURN)
                    break

                logger.info(
                    f"Cycle {cycles}/{self.max_cycles}: Processing {len(response.tool_call_requests)} tool call(s)."
                )
                self._transition(AgentState.TOOL_DISPATCH)
                for request in response.tool_call_requests:
                    await self._run_tool_call(request, events)
        finally:
            self._transition(AgentState.AWAITING_USER)

        return TurnResult(text=last_text, events=events, cycles=cycles)

    async def _call_model(self, events: List[AgentEvent]) -> ModelResponse:
        try:
            return await self.model.complete(self.conversation.snapshot(), self.registry.list())
        except Exception as e:
            msg = f"Model call failed: {e}"
            logger.warning(msg)
            await self._emit(events, WarningEvent(message=msg))
            return ModelResponse()

    async def _run_tool_call(self, request: ToolCallRequest, events: List[AgentEvent]) -> None:
        result = await self.dispatcher.dispatch(request)
        # The tool turn must be recorded before any callback runs.
        self.conversation.append(Turn.tool(serialize_tool_result(result), tool_call_id=request.id, tool_name=request.name))
        await self._emit(events, ToolResultEvent(tool_call_id=request.id, tool_name=request.name, result=result))

    async def _emit(self, events: List[AgentEvent], event: AgentEvent) -> None:
        events.append(event)
        if self.on_event is None:
            return
        try:
            outcome: Any = self.on_event(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning(f"Event callback failed on {event.kind} event: {e}", exc_info=True)

    def _transition(self, state: AgentState) -> None:
        logger.debug("Agent state: %s -> %s", self.state.value, state.value)
        self.state = state
