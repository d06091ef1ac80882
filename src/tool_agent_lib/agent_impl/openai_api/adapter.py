"""Conversion between conversation turns and OpenAI chat-completion payloads."""

from typing import Any, Dict, List, Sequence, Set

from openai.types.chat import ChatCompletion

from tool_agent_lib.agent_core.base import ModelResponse
from tool_agent_lib.agent_core.messages import Role, Turn
from tool_agent_lib.agent_core.tools.models import ToolCallRequest, new_call_id


class OpenAIMessageAdapter:
    """Translates the provider-agnostic transcript to and from the OpenAI wire format."""

    @staticmethod
    def to_messages(turns: Sequence[Turn]) -> List[Dict[str, Any]]:
        """
        Converts turns to OpenAI chat message dictionaries.

        Args:
            turns: The conversation snapshot.

        Returns:
            List of OpenAI message dictionaries.
        """
        messages: List[Dict[str, Any]] = []
        for turn in turns:
            if turn.role is Role.ASSISTANT:
                message: Dict[str, Any] = {"role": "assistant", "content": turn.content}
                if turn.tool_calls:
                    message["tool_calls"] = [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": call.arguments_json or "{}"},
                        }
                        for call in turn.tool_calls
                    ]
                messages.append(message)
            elif turn.role is Role.TOOL:
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": turn.tool_call_id,
                        "name": turn.tool_name,
                        "content": turn.content,
                    }
                )
            else:
                messages.append({"role": turn.role.value, "content": turn.content})
        return messages

    @staticmethod
    def from_completion(response: ChatCompletion) -> ModelResponse:
        """
        Extracts the assistant text and function tool calls from the first choice.

        Calls without an id, or repeating an id already seen in the same
        response, get a generated one.

        Args:
            response: The chat completion response.

        Returns:
            The normalized model response.
        """
        if not response.choices:
            return ModelResponse()

        message = response.choices[0].message
        requests: List[ToolCallRequest] = []
        seen: Set[str] = set()
        for tool_call in message.tool_calls or []:
            if tool_call.type != "function":
                continue
            call_id = tool_call.id or new_call_id()
            if call_id in seen:
                call_id = new_call_id()
            seen.add(call_id)
            requests.append(
                ToolCallRequest(
                    id=call_id,
                    name=tool_call.function.name,
                    arguments_json=tool_call.function.arguments or "",
                )
            )

        return ModelResponse(text=message.content or "", tool_call_requests=requests)
