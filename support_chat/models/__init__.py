"""Pydantic models shared by the widget, the agent relay and the RAG proxy.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: Individual entry in the visible conversation
    - AgentResult / AgentResponse: Hosted agent reply contract
    - AgentCallResult: Envelope returned by the agent relay
    - Document: Knowledge-base document in canonical shape
    - UploadedFile / ProxyResult: RAG proxy input and output
"""

from support_chat.models.schemas import (
    AgentCallResult,
    AgentResponse,
    AgentResult,
    ChatRequest,
    Document,
    Message,
    ProxyResult,
    UploadedFile,
    utc_timestamp,
)

__all__ = [
    "AgentCallResult",
    "AgentResponse",
    "AgentResult",
    "ChatRequest",
    "Document",
    "Message",
    "ProxyResult",
    "UploadedFile",
    "utc_timestamp",
]
