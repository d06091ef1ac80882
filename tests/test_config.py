import os
from typing import Iterator

import pytest
from pydantic import ValidationError

from tool_agent_lib.agent_core import AgentConfig


ENV_NAMES = [
    f"TOOL_AGENT_{name}"
    for name in (
        "MODEL",
        "AIPIPE_TOKEN",
        "AIPIPE_BASE_URL",
        "WORKFLOW_URL",
        "GOOGLE_CSE_ID",
        "GOOGLE_API_KEY",
        "MAX_CYCLES",
        "SANDBOX_TIMEOUT",
        "HTTP_TIMEOUT",
        "TOOL_TIMEOUT",
    )
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    names = ENV_NAMES
    for name in names:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    # load_dotenv writes to os.environ directly
    for name in names:
        os.environ.pop(name, None)


def test_defaults() -> None:
    config = AgentConfig()

    assert config.model == "gpt-4.1-nano"
    assert config.aipipe_base_url == "https://aipipe.org/openai/v1"
    assert config.max_cycles == 10
    assert not config.has_model_credentials
    assert not config.has_search_credentials
    assert not config.has_workflow_endpoint


def test_from_env(clean_env: pytest.MonkeyPatch, tmp_path) -> None:
    clean_env.setenv("TOOL_AGENT_AIPIPE_TOKEN", " secret ")
    clean_env.setenv("TOOL_AGENT_GOOGLE_CSE_ID", "cx")
    clean_env.setenv("TOOL_AGENT_GOOGLE_API_KEY", "key")
    clean_env.setenv("TOOL_AGENT_MAX_CYCLES", "4")
    clean_env.setenv("TOOL_AGENT_SANDBOX_TIMEOUT", "2.5")

    config = AgentConfig.from_env(env_file=str(tmp_path / "missing.env"))

    assert config.aipipe_token == "secret"
    assert config.has_model_credentials
    assert config.has_search_credentials
    assert config.max_cycles == 4
    assert config.sandbox_timeout == 2.5


def test_from_env_file(clean_env: pytest.MonkeyPatch, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("TOOL_AGENT_WORKFLOW_URL=https://flows.example/run\nTOOL_AGENT_MODEL=gpt-4o-mini\n")

    config = AgentConfig.from_env(env_file=str(env_file))

    assert config.workflow_url == "https://flows.example/run"
    assert config.has_workflow_endpoint
    assert config.model == "gpt-4o-mini"


def test_invalid_cycle_limit(clean_env: pytest.MonkeyPatch, tmp_path) -> None:
    clean_env.setenv("TOOL_AGENT_MAX_CYCLES", "0")

    with pytest.raises(ValidationError):
        AgentConfig.from_env(env_file=str(tmp_path / "missing.env"))
