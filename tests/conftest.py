"""Pytest fixtures and shared test configuration.

Fixtures:
    - rag_config / unconfigured_rag_config: RAG proxy settings with and without a key
    - agent_config / unconfigured_agent_config: agent relay settings
    - async_client: HTTPX client bound to the FastAPI app
    - override_dependency: installs FastAPI dependency overrides for one test
"""

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from support_chat.agent.config import AgentConfig
from support_chat.api import app
from support_chat.rag.config import RagConfig

RAG_BASE_URL = "https://rag.test/v3"
AGENT_URL = "https://agent.test/v3/inference/chat/"


@pytest.fixture
def rag_config() -> RagConfig:
    """RAG settings with a credential configured."""
    return RagConfig(api_key="test-key", base_url=RAG_BASE_URL, timeout=5.0)


@pytest.fixture
def unconfigured_rag_config() -> RagConfig:
    """RAG settings with no credential."""
    return RagConfig(api_key="", base_url=RAG_BASE_URL, timeout=5.0)


@pytest.fixture
def agent_config() -> AgentConfig:
    """Agent settings with a credential configured."""
    return AgentConfig(
        api_key="agent-key",
        agent_id="agent-123",
        agent_url=AGENT_URL,
        user_id="tester",
        timeout=5.0,
    )


@pytest.fixture
def unconfigured_agent_config(agent_config: AgentConfig) -> AgentConfig:
    """Agent settings with no credential."""
    return agent_config.model_copy(update={"api_key": ""})


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def override_dependency() -> Generator[Callable[[Callable[..., Any], Any], None]]:
    """Replace a FastAPI dependency with a fixed value for the current test."""

    def install(dependency: Callable[..., Any], value: Any) -> None:
        app.dependency_overrides[dependency] = lambda: value

    yield install
    app.dependency_overrides.clear()
