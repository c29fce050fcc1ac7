"""Relay between the chat widget and the hosted support agent.

The widget never holds the agent credential: it posts {message, agent_id} to
POST /api/agent, and this relay attaches the key, calls the hosted inference
endpoint and normalizes the reply into an AgentResponse.

The hosted agent answers with {"response": ...} where the value is either a
JSON-encoded AgentResult, an object, or plain text. All three shapes end up as
AgentResponse(status="success", result=AgentResult(...)).
"""

import json
import logging
import uuid
from typing import Any

import httpx
from fastapi import status

from support_chat.agent.config import AgentConfig, get_agent_config
from support_chat.models.schemas import (
    SUCCESS_STATUS,
    AgentCallResult,
    AgentResponse,
    AgentResult,
    ProxyResult,
)

logger = logging.getLogger(__name__)

MISSING_KEY_ERROR = "Agent API key not configured on server"


def normalize_agent_reply(payload: Any) -> AgentResponse:
    """Turn a raw inference reply into an AgentResponse.

    Raises:
        ValueError: If the reply matches none of the known shapes.
    """
    raw = payload.get("response", payload) if isinstance(payload, dict) else payload

    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None
        if not isinstance(decoded, dict):
            return AgentResponse(status=SUCCESS_STATUS, result=AgentResult(answer=raw))
        raw = decoded

    if isinstance(raw, dict):
        if "status" in raw:
            return AgentResponse.model_validate(raw)
        if isinstance(raw.get("result"), dict):
            return AgentResponse(
                status=SUCCESS_STATUS, result=AgentResult.model_validate(raw["result"])
            )
        if "answer" in raw:
            return AgentResponse(status=SUCCESS_STATUS, result=AgentResult.model_validate(raw))

    raise ValueError(f"Unrecognized agent reply: {type(raw).__name__}")


def _failure(status_code: int, message: str, details: str | None = None) -> ProxyResult:
    envelope = AgentCallResult(
        success=False,
        response=AgentResponse(status="error", message=message),
        details=details,
    )
    return ProxyResult(status_code=status_code, body=envelope.model_dump(exclude_none=True))


class AgentRelay:
    """Forwards one chat message per call to the hosted agent."""

    def __init__(
        self,
        config: AgentConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_agent_config()
        self._transport = transport

    @property
    def config(self) -> AgentConfig:
        return self._config

    async def send(
        self,
        message: str,
        agent_id: str,
        session_id: str | None = None,
    ) -> ProxyResult:
        """Send a message to the agent and wrap its reply in an envelope.

        A single attempt is made; there is no retry.

        Args:
            message: The user's message.
            agent_id: Identifier of the hosted agent.
            session_id: Conversation id; generated when omitted.

        Returns:
            ProxyResult whose body is a serialized AgentCallResult.
        """
        if not self._config.is_configured:
            logger.error("Agent request rejected: no agent API key set")
            return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, MISSING_KEY_ERROR)

        payload = {
            "user_id": self._config.user_id,
            "agent_id": agent_id,
            "session_id": session_id or f"{agent_id}-{uuid.uuid4().hex[:12]}",
            "message": message,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._config.agent_url,
                    json=payload,
                    headers={"x-api-key": self._config.api_key},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Agent request failed: {e!r}")
            return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "Server error")

        if not response.is_success:
            logger.warning(f"Agent returned HTTP {response.status_code}")
            return _failure(
                response.status_code,
                f"Agent request failed: {response.status_code}",
                details=response.text,
            )

        try:
            agent_response = normalize_agent_reply(response.json())
        except ValueError as e:
            logger.warning(f"Could not interpret agent reply: {e}")
            return _failure(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Agent returned an unrecognized reply",
                details=response.text,
            )

        envelope = AgentCallResult(success=True, response=agent_response)
        return ProxyResult(
            status_code=status.HTTP_200_OK, body=envelope.model_dump(exclude_none=True)
        )


# Module-level singleton instance
_agent_relay: AgentRelay | None = None


def get_agent_relay() -> AgentRelay:
    """Get or create the global agent relay."""
    global _agent_relay
    if _agent_relay is None:
        _agent_relay = AgentRelay()
    return _agent_relay
