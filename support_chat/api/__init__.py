"""FastAPI endpoints for the support chat widget.

Endpoints:
    - GET /health: Service health status
    - POST /api/agent: Relay a widget message to the hosted agent
    - GET /api/rag: List knowledge-base documents
    - POST /api/rag: Upload and train a document
    - DELETE /api/rag: Delete documents by name
"""

from support_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
