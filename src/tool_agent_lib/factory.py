"""Wires an ``AgentLoop`` with its collaborators from an ``AgentConfig``."""

from dataclasses import dataclass, field
from typing import Optional

import httpx
from openai import AsyncOpenAI

from .agent_core import (
    AgentConfig,
    AgentLoop,
    ConversationState,
    DEFAULT_SYSTEM_PROMPT,
    IsolatedExecutor,
    ModelClient,
    ToolDispatcher,
    ToolHandlers,
    TurnResult,
    build_default_registry,
    get_logger,
)
from .agent_core.agent import EventCallback
from .agent_impl import OfflineModelClient, OpenAIModelClient, build_search_chain, build_transform_chain

logger = get_logger(__name__)


@dataclass
class AgentSession:
    """A ready agent loop plus the resources it owns.

    Close the session with ``aclose()`` (or ``async with``) to stop the sandbox
    worker and release the HTTP connections.
    """

    loop: AgentLoop
    executor: IsolatedExecutor
    http_client: httpx.AsyncClient
    openai_client: Optional[AsyncOpenAI] = field(default=None)

    async def run_turn(self, user_input: str) -> TurnResult:
        return await self.loop.run_turn(user_input)

    async def aclose(self) -> None:
        await self.executor.close()
        await self.http_client.aclose()
        if self.openai_client is not None:
            await self.openai_client.close()

    async def __aenter__(self) -> "AgentSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def build_agent(
    config: AgentConfig,
    on_event: Optional[EventCallback] = None,
    system_instruction: str = DEFAULT_SYSTEM_PROMPT,
    http_client: Optional[httpx.AsyncClient] = None,
    openai_client: Optional[AsyncOpenAI] = None,
) -> AgentSession:
    """
    Assemble an agent session.

    The OpenAI-compatible client is used when a token is configured (or a
    client is passed in); otherwise the offline stand-in model answers.

    Args:
        config: Session settings.
        on_event: Optional callback receiving every surfaced event.
        system_instruction: System prompt that opens the conversation.
        http_client: Optional HTTP client for search and workflow calls.
        openai_client: Optional pre-built OpenAI client.

    Returns:
        The assembled session.
    """
    http = http_client or httpx.AsyncClient(timeout=config.http_timeout, follow_redirects=True)
    if openai_client is None and config.has_model_credentials:
        openai_client = AsyncOpenAI(api_key=config.aipipe_token, base_url=config.aipipe_base_url)

    model: ModelClient
    if openai_client is not None:
        model = OpenAIModelClient(client=openai_client, model_name=config.model)
        logger.info(f"Using model '{config.model}' via {config.aipipe_base_url}.")
    else:
        model = OfflineModelClient()
        logger.info("No model token configured. Using the offline stand-in model.")

    executor = IsolatedExecutor(timeout=config.sandbox_timeout)
    handlers = ToolHandlers(
        search_service=build_search_chain(http, api_key=config.google_api_key, engine_id=config.google_cse_id),
        transform_service=build_transform_chain(
            http, workflow_url=config.workflow_url, openai_client=openai_client, model_name=config.model
        ),
        executor=executor,
    )
    registry = build_default_registry(handlers)

    loop = AgentLoop(
        model=model,
        dispatcher=ToolDispatcher(registry, tool_timeout=config.tool_timeout),
        registry=registry,
        conversation=ConversationState(system_instruction),
        max_cycles=config.max_cycles,
        on_event=on_event,
    )
    return AgentSession(loop=loop, executor=executor, http_client=http, openai_client=openai_client)
