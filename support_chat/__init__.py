"""Support Chat - customer-support widget backed by a hosted conversational agent.

Combines FastAPI for the HTTP relay, httpx for outbound calls to the hosted
agent and RAG service, NiceGUI for the widget, and Pydantic for data validation.

Components:
    - api: HTTP endpoints for chat relay and knowledge-base management
    - agent: Hosted agent configuration and relay
    - rag: Knowledge-base proxy for the hosted RAG service
    - ui: Chat session state and the widget page
    - models: Request/response schemas
"""

__version__ = "0.1.0"
