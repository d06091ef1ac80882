from typing import Any, Dict, Iterable, Optional, Sequence, cast

from openai import AsyncOpenAI

from tool_agent_lib.agent_core.base import ModelClient, ModelResponse
from tool_agent_lib.agent_core.logger import get_logger
from tool_agent_lib.agent_core.messages import Turn
from tool_agent_lib.agent_core.tools.models import ToolSpec
from .adapter import OpenAIMessageAdapter

logger = get_logger(__name__)


class OpenAIModelClient(ModelClient):
    """
    Model collaborator for OpenAI-compatible chat completion endpoints
    (OpenAI itself or the AI Pipe proxy).
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        temp: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: int = 0,
    ):
        """
        Initializes the OpenAI model client.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The model identifier (e.g., 'gpt-4.1-nano').
            temp: Optional sampling temperature. The endpoint default is used when omitted.
            max_tokens: Optional cap on generated tokens.
            max_retries: Additional attempts after a failed call.
        """
        super().__init__(model_name=model_name, max_retries=max_retries)
        self.client: AsyncOpenAI = client
        self.temperature = temp
        self.max_tokens = max_tokens

    async def _complete_impl(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": cast(Iterable[Any], OpenAIMessageAdapter.to_messages(turns)),
        }
        if tools:
            request["tools"] = self.tool_payload(tools)
            request["tool_choice"] = "auto"
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens

        logger.debug(f"Sending {len(turns)} turn(s) to model '{self.model}'.")
        response = await self.client.chat.completions.create(**request)
        return OpenAIMessageAdapter.from_completion(response)

    @staticmethod
    def tool_payload(tools: Sequence[ToolSpec]) -> list[Dict[str, Any]]:
        """Renders tool specs as the OpenAI ``tools=`` payload."""
        return [
            {
                "type": "function",
                "function": {"name": spec.name, "description": spec.description, "parameters": spec.parameters},
            }
            for spec in tools
        ]
