from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

SUCCESS_STATUS = "success"

KNOWN_FILE_TYPES = frozenset({"pdf", "docx", "txt"})


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


class Message(BaseModel):
    """A single entry in the visible conversation.

    Attributes:
        id: Unique message identifier.
        role: Who sent the message (user or agent).
        content: The message text.
        timestamp: Display time, e.g. "02:15 PM".
        follow_up_suggestions: Suggested next questions (agent replies only).
        confidence: Agent confidence in [0, 1] (agent replies only).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    role: Literal["user", "agent"]
    content: str
    timestamp: str
    follow_up_suggestions: list[str] | None = None
    confidence: float | None = Field(None, ge=0.0, le=1.0)


class AgentResult(BaseModel):
    """Structured answer produced by the hosted agent."""

    answer: str
    sources: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    follow_up_suggestions: list[str] = Field(default_factory=list)
    requires_human: bool = False

    @field_validator(
        "sources", "confidence", "follow_up_suggestions", "requires_human", mode="before"
    )
    @classmethod
    def null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat an explicit null from the agent as the field default."""
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class AgentResponse(BaseModel):
    """Agent reply with a status field and, on success, a result.

    Attributes:
        status: "success" or an error status string.
        result: The structured answer when status is success.
        message: Human-readable error text for non-success replies.
    """

    status: str
    result: AgentResult | None = None
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS and self.result is not None


class AgentCallResult(BaseModel):
    """Envelope returned by POST /api/agent."""

    success: bool
    response: AgentResponse
    details: str | None = None
    timestamp: str = Field(default_factory=utc_timestamp)


class ChatRequest(BaseModel):
    """Request payload for the agent relay endpoint.

    Attributes:
        message: User's question.
        agent_id: Identifier of the hosted agent to address.
        session_id: Optional conversation id forwarded to the agent.
    """

    message: str = Field(..., min_length=1)
    agent_id: str = Field(..., min_length=1)
    session_id: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class Document(BaseModel):
    """A knowledge-base document as reported by the RAG service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    file_name: str | None = None
    file_type: str = "unknown"
    file_size: int | str | None = None
    status: str = "active"
    uploaded_at: str | None = None
    document_count: int | None = None

    @field_validator("file_type", mode="before")
    @classmethod
    def coerce_file_type(cls, v: Any) -> str:
        """Collapse anything outside pdf/docx/txt to "unknown"."""
        if isinstance(v, str) and v.lower() in KNOWN_FILE_TYPES:
            return v.lower()
        return "unknown"

    @field_validator("document_count", mode="before")
    @classmethod
    def count_items(cls, v: Any) -> Any:
        """Some backends report the chunk list itself rather than its length."""
        if isinstance(v, list | tuple):
            return len(v)
        return v

    @field_validator("id", "uploaded_at", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class UploadedFile(BaseModel):
    """Framework-independent view of a multipart file upload."""

    filename: str
    content_type: str
    content: bytes


class ProxyResult(BaseModel):
    """Envelope body plus the HTTP status the inbound route answers with."""

    status_code: int
    body: dict[str, Any]

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))
