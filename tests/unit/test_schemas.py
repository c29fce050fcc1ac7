"""Unit tests for the shared data models."""

import pytest
from pydantic import ValidationError

from support_chat.models.schemas import (
    AgentResponse,
    AgentResult,
    ChatRequest,
    Document,
    Message,
    ProxyResult,
)


class TestMessage:
    """Tests for Message."""

    def test_serializes_camel_case(self) -> None:
        message = Message(
            id="m1",
            role="agent",
            content="Hi",
            timestamp="02:15 PM",
            follow_up_suggestions=["More?"],
            confidence=0.5,
        )

        assert message.model_dump(by_alias=True) == {
            "id": "m1",
            "role": "agent",
            "content": "Hi",
            "timestamp": "02:15 PM",
            "followUpSuggestions": ["More?"],
            "confidence": 0.5,
        }

    def test_is_immutable(self) -> None:
        message = Message(id="m1", role="user", content="Hi", timestamp="02:15 PM")

        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            Message(id="m1", role="system", content="Hi", timestamp="02:15 PM")

    @pytest.mark.parametrize("confidence", [-0.1, 1.5])
    def test_rejects_confidence_out_of_range(self, confidence: float) -> None:
        with pytest.raises(ValidationError):
            Message(id="m1", role="agent", content="Hi", timestamp="now", confidence=confidence)


class TestAgentResult:
    """Tests for AgentResult null handling."""

    def test_null_fields_fall_back_to_defaults(self) -> None:
        result = AgentResult(
            answer="x",
            sources=None,
            confidence=None,
            follow_up_suggestions=None,
            requires_human=None,
        )

        assert result.sources == []
        assert result.confidence == 0.0
        assert result.follow_up_suggestions == []
        assert result.requires_human is False

    def test_null_answer_still_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AgentResult(answer=None)


class TestAgentResponse:
    """Tests for AgentResponse.is_success."""

    def test_success_requires_result(self) -> None:
        assert AgentResponse(status="success").is_success is False
        assert AgentResponse(status="success", result=AgentResult(answer="x")).is_success is True

    def test_error_status_is_not_success(self) -> None:
        response = AgentResponse(status="error", result=AgentResult(answer="x"))

        assert response.is_success is False


class TestChatRequest:
    """Tests for ChatRequest validation."""

    def test_strips_message(self) -> None:
        request = ChatRequest(message="  hi  ", agent_id="a")

        assert request.message == "hi"

    @pytest.mark.parametrize("message", ["", "   "])
    def test_rejects_blank_message(self, message: str) -> None:
        with pytest.raises(ValidationError):
            ChatRequest(message=message, agent_id="a")

    def test_requires_agent_id(self) -> None:
        with pytest.raises(ValidationError):
            ChatRequest(message="hi", agent_id="")


class TestDocument:
    """Tests for Document coercion."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("pdf", "pdf"), ("DOCX", "docx"), ("txt", "txt"), ("csv", "unknown"), (None, "unknown")],
    )
    def test_file_type_coercion(self, raw, expected: str) -> None:
        assert Document(file_type=raw).file_type == expected

    def test_numeric_id_stringified(self) -> None:
        assert Document(id=42).id == "42"

    def test_chunk_list_counted(self) -> None:
        assert Document(document_count=[{"text": "a"}, {"text": "b"}]).document_count == 2

    def test_defaults(self) -> None:
        document = Document()

        assert document.status == "active"
        assert document.file_type == "unknown"


def test_proxy_result_success_reads_body() -> None:
    assert ProxyResult(status_code=200, body={"success": True}).success is True
    assert ProxyResult(status_code=400, body={"success": False}).success is False
