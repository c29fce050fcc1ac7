"""Agent configuration with environment variable loading.

Pydantic-based configuration for the hosted support agent.
A missing API key is not an error here: the relay reports it per request.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_AGENT_ID = "69725d281d92f5e2dd22f8e4"
DEFAULT_AGENT_URL = "https://agent-prod.studio.lyzr.ai/v3/inference/chat/"


class AgentConfig(BaseModel):
    """Configuration for the hosted agent relay.

    Attributes:
        api_key: Credential sent as x-api-key (empty when not configured).
        agent_id: Fixed identifier of the support agent.
        agent_url: Inference endpoint of the hosted agent.
        user_id: User identifier reported to the agent.
        timeout: Outbound request timeout in seconds.
    """

    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("AGENT_API_KEY") or os.getenv("LYZR_API_KEY", ""),
        description="API key for the hosted agent",
    )
    agent_id: str = Field(
        default_factory=lambda: os.getenv("AGENT_ID", DEFAULT_AGENT_ID),
        min_length=1,
        description="Support agent identifier",
    )
    agent_url: str = Field(
        default_factory=lambda: os.getenv("AGENT_API_URL", DEFAULT_AGENT_URL),
        description="Agent inference endpoint",
    )
    user_id: str = Field(
        default_factory=lambda: os.getenv("AGENT_USER_ID", "support-widget"),
        description="User identifier reported to the agent",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT", "120")),
        gt=0.0,
        description="Outbound request timeout in seconds",
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key)


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.
    """
    return AgentConfig()
