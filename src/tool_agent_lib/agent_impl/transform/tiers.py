"""
Transform Tiers
===============

The ``transform`` tool tries these in order:

1. ``WorkflowEndpointTier``: a custom workflow service reached over HTTP.
2. ``GenerationTier``: a single Responses API call with a constrained prompt.
3. ``TruncationTier``: a local preview that always succeeds.
"""

import json
from typing import Any, Optional, Protocol, Sequence

import httpx
from openai import AsyncOpenAI

from tool_agent_lib.agent_core.exceptions import ProviderError
from tool_agent_lib.agent_core.logger import get_logger
from tool_agent_lib.agent_core.tools.models import TransformResult
from .prompts import build_transform_prompt

logger = get_logger(__name__)

PREVIEW_LIMIT = 160
PREVIEW_ELLIPSIS = "..."
PREVIEW_CONFIDENCE = 0.42
GENERATION_TAG = "aipipe"


class TransformTier(Protocol):
    name: str

    @property
    def available(self) -> bool: ...

    async def transform(self, workflow: str, data: str) -> TransformResult: ...


def _as_confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class WorkflowEndpointTier:
    """Posts ``{workflow, data}`` to a custom workflow endpoint."""

    name = "workflow-endpoint"

    def __init__(self, http_client: httpx.AsyncClient, url: str) -> None:
        self._http = http_client
        self.url = url

    @property
    def available(self) -> bool:
        return bool(self.url)

    async def transform(self, workflow: str, data: str) -> TransformResult:
        response = await self._http.post(self.url, json={"workflow": workflow, "data": data})
        response.raise_for_status()
        body = response.json()

        if isinstance(body, dict):
            output = body["output"] if body.get("output") is not None else body
            confidence = _as_confidence(body.get("confidence"))
        else:
            output, confidence = body, None
        return TransformResult(workflow=workflow, output=output, confidence=confidence)


class GenerationTier:
    """
    Runs the transform as one Responses API call.

    The result's workflow is tagged ``<workflow>@aipipe`` and ``raw`` carries the
    full response dump.
    """

    name = "generation"

    def __init__(self, client: Optional[AsyncOpenAI], model_name: str) -> None:
        self._client = client
        self.model_name = model_name

    @property
    def available(self) -> bool:
        return self._client is not None

    async def transform(self, workflow: str, data: str) -> TransformResult:
        if self._client is None:
            raise ProviderError("GenerationTier has no client configured.")

        response = await self._client.responses.create(
            model=self.model_name, input=build_transform_prompt(workflow, data)
        )
        raw = response.model_dump(mode="json")
        text = response.output_text or json.dumps(raw)
        return TransformResult(workflow=f"{workflow}@{GENERATION_TAG}", output=text, raw=raw)


class TruncationTier:
    """Returns the input itself, cut to a short preview."""

    name = "truncation"

    @property
    def available(self) -> bool:
        return True

    async def transform(self, workflow: str, data: str) -> TransformResult:
        return TransformResult(workflow=workflow, output=self.preview(data), confidence=PREVIEW_CONFIDENCE)

    @staticmethod
    def preview(data: str) -> str:
        if len(data) <= PREVIEW_LIMIT:
            return data
        return data[: PREVIEW_LIMIT - len(PREVIEW_ELLIPSIS)] + PREVIEW_ELLIPSIS


class TransformChain:
    """Returns the first tier's result that does not raise.

    If every configured tier fails, the local preview is returned.
    """

    def __init__(self, tiers: Sequence[TransformTier]) -> None:
        self.tiers = list(tiers)
        self._last_resort = TruncationTier()

    async def transform(self, workflow: str, data: str) -> TransformResult:
        for tier in self.tiers:
            if not tier.available:
                continue
            try:
                return await tier.transform(workflow, data)
            except Exception as e:
                logger.warning(f"Transform tier '{tier.name}' failed for workflow '{workflow}': {e}")

        return await self._last_resort.transform(workflow, data)


def build_transform_chain(
    http_client: httpx.AsyncClient,
    workflow_url: str = "",
    openai_client: Optional[AsyncOpenAI] = None,
    model_name: str = "",
) -> TransformChain:
    """Workflow endpoint, then generation, then the local preview."""
    return TransformChain(
        tiers=[
            WorkflowEndpointTier(http_client, workflow_url),
            GenerationTier(openai_client, model_name),
            TruncationTier(),
        ]
    )
