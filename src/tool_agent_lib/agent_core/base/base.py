"""Core abstraction for model collaborators."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Coroutine, List, Sequence

from pydantic import BaseModel, Field

from ..logger import get_logger
from ..messages import Turn
from ..tools.models import ToolCallRequest, ToolSpec

logger = get_logger(__name__)


class ModelResponse(BaseModel):
    """Normalized output of one model call.

    Attributes:
        text: Assistant text, empty when the model only requested tools.
        tool_call_requests: Tool calls in the order the model emitted them.
    """

    text: str = ""
    tool_call_requests: List[ToolCallRequest] = Field(default_factory=list)

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_call_requests)


class ModelClient(ABC):
    """Abstract base class for the model endpoint the agent loop talks to.

    Implementations receive the full transcript and the tool specs on every
    call and return a ``ModelResponse``. Transport errors propagate to the
    caller after ``max_retries`` additional attempts.
    """

    def __init__(self, model_name: str, max_retries: int = 0, base_retry_delay: float = 1.0):
        self.model = model_name
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay

    async def _execute_with_retry(
        self,
        func: Callable[..., Coroutine[Any, Any, ModelResponse]],
        *args: Any,
        **kwargs: Any,
    ) -> ModelResponse:
        """
        Executes a function with retry logic.

        Args:
            func: The asynchronous function to execute.
            *args: Positional arguments for the function.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            Exception: The last encountered exception if all retries fail.
        """
        delay = self.base_retry_delay
        attempt = 0
        while True:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if attempt >= self.max_retries:
                    raise

                attempt += 1
                logger.warning(f"Model call failed (Retry: {attempt}/{self.max_retries}): {e}. Waiting {delay}s...")
                await asyncio.sleep(delay)
                delay *= 2  # Exponential backoff

    async def complete(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        """
        Sends the transcript and the tool specs to the model.

        Args:
            turns: The full conversation snapshot, system turn first.
            tools: Specs of the tools the model may call.

        Returns:
            The assistant text and any tool-call requests.
        """
        return await self._execute_with_retry(self._complete_impl, turns, tools)

    @abstractmethod
    async def _complete_impl(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        pass
