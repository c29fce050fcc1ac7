"""Chat session state for the support widget.

One ChatSession per open widget. It owns the ordered message list, the
loading flag and the current follow-up suggestions, and performs the single
round trip to the agent relay for each user message. Rendering code only
reads this state; it never mutates it directly.
"""

import logging
import os
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Literal

import httpx

from support_chat.agent.config import DEFAULT_AGENT_ID
from support_chat.models.schemas import AgentCallResult, Message

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
AGENT_ID = os.getenv("AGENT_ID", DEFAULT_AGENT_ID)

GENERIC_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."
NETWORK_ERROR_MESSAGE = "Sorry, I encountered a network error. Please try again."


class RequestSlot:
    """Single-slot token guarding the one outstanding agent request.

    claim() hands out a token only while the slot is free; a caller that gets
    None must drop its request rather than wait.
    """

    def __init__(self) -> None:
        self._token: str | None = None

    @property
    def busy(self) -> bool:
        return self._token is not None

    def claim(self) -> str | None:
        if self._token is not None:
            return None
        self._token = uuid.uuid4().hex
        return self._token

    def release(self, token: str) -> None:
        if token == self._token:
            self._token = None


def _display_time() -> str:
    return datetime.now().strftime("%I:%M %p")


def _new_message(
    role: Literal["user", "agent"],
    content: str,
    follow_up_suggestions: list[str] | None = None,
    confidence: float | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4().hex,
        role=role,
        content=content,
        timestamp=_display_time(),
        follow_up_suggestions=follow_up_suggestions,
        confidence=confidence,
    )


async def call_agent(
    client: httpx.AsyncClient,
    message: str,
    agent_id: str,
    session_id: str | None = None,
) -> AgentCallResult:
    """Post one message to the agent relay and parse its envelope.

    Any reply that arrives is turned into an AgentCallResult, including error
    statuses. A reply that cannot be read as an envelope yields an unsuccessful
    result with no message.

    Raises:
        httpx.RequestError: If no response was received.
    """
    response = await client.post(
        f"{API_BASE_URL}/api/agent",
        json={"message": message, "agent_id": agent_id, "session_id": session_id},
    )
    try:
        return AgentCallResult.model_validate(response.json())
    except ValueError as e:
        # Covers undecodable JSON as well as pydantic ValidationError
        logger.warning(f"Unreadable agent reply (HTTP {response.status_code}): {e}")
        return AgentCallResult.model_validate(
            {"success": False, "response": {"status": "error"}}
        )


class ChatSession:
    """Conversation state for one widget instance.

    Attributes:
        messages: Ordered, append-only conversation history.
        suggestions: Follow-up questions offered after the last agent reply.
        session_id: Conversation id forwarded to the agent.
    """

    def __init__(
        self,
        agent_id: str = AGENT_ID,
        on_change: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        """Initialize an empty conversation.

        Args:
            agent_id: Fixed identifier of the support agent.
            on_change: Called after every state change, for re-rendering.
            transport: Optional httpx transport, used to stub the relay.
            timeout: Request timeout in seconds.
        """
        self.agent_id = agent_id
        self.messages: list[Message] = []
        self.suggestions: list[str] = []
        self.session_id: str = str(uuid.uuid4())
        self._slot = RequestSlot()
        self._on_change = on_change
        self._transport = transport
        self._timeout = timeout

    @property
    def loading(self) -> bool:
        """Whether an agent request is in flight."""
        return self._slot.busy

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _append(self, message: Message) -> Message:
        self.messages.append(message)
        self._changed()
        return message

    async def send_message(self, text: str) -> Message | None:
        """Send a user message and append the agent's reply.

        The user message is appended before the request goes out. Exactly one
        agent message follows: the answer, the relay's error message, or a
        generic error text.

        Args:
            text: The user's message.

        Returns:
            The appended agent message, or None if the send was dropped because
            the text was blank or a request is already in flight.
        """
        text = text.strip()
        if not text:
            return None
        token = self._slot.claim()
        if token is None:
            logger.debug("Dropping send while a request is in flight")
            return None

        try:
            self.suggestions = []
            self._append(_new_message("user", text))

            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout, transport=self._transport
                ) as client:
                    result = await call_agent(client, text, self.agent_id, self.session_id)
            except httpx.RequestError as e:
                logger.warning(f"Agent request failed: {e!r}")
                return self._append(_new_message("agent", NETWORK_ERROR_MESSAGE))

            reply = result.response
            if result.success and reply.is_success:
                self.suggestions = list(reply.result.follow_up_suggestions)
                return self._append(
                    _new_message(
                        "agent",
                        reply.result.answer,
                        follow_up_suggestions=list(reply.result.follow_up_suggestions),
                        confidence=reply.result.confidence,
                    )
                )

            return self._append(_new_message("agent", reply.message or GENERIC_ERROR_MESSAGE))
        finally:
            self._slot.release(token)
            self._changed()

    async def select_suggestion(self, suggestion: str) -> Message | None:
        """Send a follow-up suggestion as if the user had typed it."""
        self.suggestions = []
        self._changed()
        return await self.send_message(suggestion)

    def reset(self) -> None:
        """Start a new conversation. Ignored while a request is in flight."""
        if self.loading:
            return
        self.messages.clear()
        self.suggestions = []
        self.session_id = str(uuid.uuid4())
        self._changed()
