"""RAG service configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()

DEFAULT_RAG_BASE_URL = "https://rag-prod.studio.lyzr.ai/v3"

MISSING_KEY_ERROR = "LYZR_API_KEY not configured on server"


class RagConfig(BaseModel):
    """Configuration for the knowledge-base proxy.

    Attributes:
        api_key: Credential sent as x-api-key (empty when not configured).
        base_url: Base path of the RAG service.
        timeout: Outbound request timeout in seconds.
        max_upload_bytes: Largest file accepted for upload-and-train.
    """

    # Environment-loaded defaults go through the same validators as explicit values
    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("LYZR_API_KEY", ""),
        description="API key for the RAG service",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("RAG_BASE_URL", DEFAULT_RAG_BASE_URL),
        description="RAG service base path",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT", "120")),
        gt=0.0,
    )
    max_upload_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024,
        ge=1,
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


def get_rag_config() -> RagConfig:
    """Create RAG configuration from environment."""
    return RagConfig()
