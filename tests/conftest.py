import os
from typing import Any, List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import find_dotenv, load_dotenv
from openai import AsyncOpenAI

from tool_agent_lib.agent_core import (
    ExecutionOutcome,
    ModelClient,
    ModelResponse,
    SearchHit,
    SearchResult,
    ToolCallRequest,
    ToolDispatcher,
    ToolHandlers,
    ToolRegistry,
    ToolSpec,
    TransformResult,
    Turn,
    build_default_registry,
)

# Load environment variables from a .env file in the project root, if present
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)


class FakeSearchService:
    def __init__(self, hits: Optional[List[SearchHit]] = None) -> None:
        self.hits = hits if hits is not None else [SearchHit(title="Result", link="https://example.com", snippet="...")]
        self.calls: List[tuple[str, int]] = []

    async def search(self, query: str, limit: int) -> SearchResult:
        self.calls.append((query, limit))
        return SearchResult(provider="fake", query=query, results=self.hits[:limit])


class FakeTransformService:
    def __init__(self) -> None:
        self.calls: List[tuple[str, str]] = []

    async def transform(self, workflow: str, data: str) -> TransformResult:
        self.calls.append((workflow, data))
        return TransformResult(workflow=workflow, output=data.upper(), confidence=1.0)


class FakeExecutor:
    def __init__(self, outcome: Optional[ExecutionOutcome] = None) -> None:
        self.outcome = outcome or ExecutionOutcome(result=4)
        self.calls: List[str] = []

    async def execute(self, code: str, timeout: Optional[float] = None) -> ExecutionOutcome:
        self.calls.append(code)
        return self.outcome


class ScriptedModel(ModelClient):
    """Returns queued responses in order and records every transcript it was shown."""

    def __init__(self, responses: Sequence[Any]) -> None:
        super().__init__(model_name="scripted")
        self.responses = list(responses)
        self.seen_turns: List[List[Turn]] = []
        self.seen_tools: List[List[ToolSpec]] = []

    async def _complete_impl(self, turns: Sequence[Turn], tools: Sequence[ToolSpec]) -> ModelResponse:
        self.seen_turns.append(list(turns))
        self.seen_tools.append(list(tools))
        if not self.responses:
            return ModelResponse(text="done")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def tool_call(name: str, arguments_json: str, call_id: Optional[str] = None) -> ToolCallRequest:
    if call_id is None:
        return ToolCallRequest(name=name, arguments_json=arguments_json)
    return ToolCallRequest(id=call_id, name=name, arguments_json=arguments_json)


@pytest.fixture
def search_service() -> FakeSearchService:
    return FakeSearchService()


@pytest.fixture
def transform_service() -> FakeTransformService:
    return FakeTransformService()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def handlers(
    search_service: FakeSearchService, transform_service: FakeTransformService, fake_executor: FakeExecutor
) -> ToolHandlers:
    return ToolHandlers(search_service=search_service, transform_service=transform_service, executor=fake_executor)


@pytest.fixture
def registry(handlers: ToolHandlers) -> ToolRegistry:
    return build_default_registry(handlers)


@pytest.fixture
def dispatcher(registry: ToolRegistry) -> ToolDispatcher:
    return ToolDispatcher(registry, tool_timeout=5.0)


@pytest.fixture
def mock_openai_client() -> Any:
    client = MagicMock(spec=AsyncOpenAI)
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.responses = MagicMock()
    client.responses.create = AsyncMock()
    return client


@pytest.fixture
def openai_client() -> AsyncOpenAI:
    api_key = os.getenv("TOOL_AGENT_AIPIPE_TOKEN") or "dummy_key"
    return AsyncOpenAI(api_key=api_key, base_url=os.getenv("TOOL_AGENT_AIPIPE_BASE_URL"))
