"""Chat relay endpoint used by the support widget."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from support_chat.agent.relay import AgentRelay, get_agent_relay
from support_chat.models.schemas import AgentCallResult, AgentResponse, ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/agent", response_model=AgentCallResult)
async def send_to_agent(
    request: ChatRequest,
    relay: Annotated[AgentRelay, Depends(get_agent_relay)],
) -> JSONResponse:
    """Forward one widget message to the hosted agent.

    The body always follows AgentCallResult; the HTTP status mirrors the
    failure class (500 for missing credential, pass-through for agent errors).
    """
    try:
        result = await relay.send(request.message, request.agent_id, request.session_id)
    except Exception as e:
        logger.exception("Unexpected error relaying chat message")
        envelope = AgentCallResult(
            success=False,
            response=AgentResponse(status="error", message=str(e) or "Server error"),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope.model_dump(exclude_none=True),
        )
    return JSONResponse(status_code=result.status_code, content=result.body)
