"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from support_chat import __version__
from support_chat.agent.config import get_agent_config
from support_chat.api.chat import router as chat_router
from support_chat.api.routes import router as rag_router
from support_chat.rag.config import get_rag_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Support Chat API...")
    if not get_rag_config().is_configured:
        logger.warning("LYZR_API_KEY is not set; knowledge-base requests will fail")
    if not get_agent_config().is_configured:
        logger.warning("No agent API key set; chat requests will fail")
    yield
    logger.info("Shutting down Support Chat API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Support Chat API",
        description=(
            "Relay between a customer-support chat widget and a hosted "
            "conversational agent, plus a proxy for managing the agent's "
            "retrieval knowledge base."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)
    application.include_router(rag_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "support-chat"}

    return application


app = create_app()
