"""Runtime configuration for an agent session.

Values are read from ``TOOL_AGENT_*`` environment variables, optionally loaded
from a ``.env`` file. Empty credentials switch the corresponding collaborator
to its offline fallback instead of failing.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_ENV_PREFIX = "TOOL_AGENT_"

DEFAULT_MODEL = "gpt-4.1-nano"
DEFAULT_AIPIPE_BASE_URL = "https://aipipe.org/openai/v1"


def _env(name: str, default: str = "") -> str:
    return os.getenv(f"{_ENV_PREFIX}{name}", default).strip()


class AgentConfig(BaseModel):
    """
    Settings shared by the model client, the tool handlers and the loop.

    Attributes:
        model: Model identifier sent to the chat and generation endpoints.
        aipipe_token: Bearer token for the OpenAI-compatible AI Pipe proxy.
        aipipe_base_url: Base URL of the OpenAI-compatible proxy.
        workflow_url: Optional custom workflow endpoint used by ``transform``.
        google_cse_id: Google Custom Search engine id.
        google_api_key: Google Custom Search API key.
        max_cycles: Maximum number of model/tool cycles per user turn.
        sandbox_timeout: Seconds to wait for a sandboxed snippet.
        http_timeout: Seconds to wait for search and workflow HTTP calls.
        tool_timeout: Upper bound in seconds for any single tool handler.
    """

    model: str = DEFAULT_MODEL
    aipipe_token: str = ""
    aipipe_base_url: str = DEFAULT_AIPIPE_BASE_URL
    workflow_url: str = ""
    google_cse_id: str = ""
    google_api_key: str = ""
    max_cycles: int = Field(default=10, ge=1)
    sandbox_timeout: float = Field(default=10.0, gt=0)
    http_timeout: float = Field(default=15.0, gt=0)
    tool_timeout: float = Field(default=60.0, gt=0)

    @property
    def has_model_credentials(self) -> bool:
        return bool(self.aipipe_token)

    @property
    def has_search_credentials(self) -> bool:
        return bool(self.google_cse_id and self.google_api_key)

    @property
    def has_workflow_endpoint(self) -> bool:
        return bool(self.workflow_url)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AgentConfig":
        """Build a configuration from the environment.

        Args:
            env_file: Optional path to a ``.env`` file. When omitted, python-dotenv
                searches for one starting at the current working directory.

        Returns:
            The populated configuration.
        """
        load_dotenv(env_file)

        values = {
            "model": _env("MODEL") or DEFAULT_MODEL,
            "aipipe_token": _env("AIPIPE_TOKEN"),
            "aipipe_base_url": _env("AIPIPE_BASE_URL") or DEFAULT_AIPIPE_BASE_URL,
            "workflow_url": _env("WORKFLOW_URL"),
            "google_cse_id": _env("GOOGLE_CSE_ID"),
            "google_api_key": _env("GOOGLE_API_KEY"),
        }
        for key, env_name in (
            ("max_cycles", "MAX_CYCLES"),
            ("sandbox_timeout", "SANDBOX_TIMEOUT"),
            ("http_timeout", "HTTP_TIMEOUT"),
            ("tool_timeout", "TOOL_TIMEOUT"),
        ):
            raw = _env(env_name)
            if raw:
                values[key] = raw

        return cls.model_validate(values)
