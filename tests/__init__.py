"""Test package for the support chat service.

Structure:
    - unit/: Individual function and class tests
    - integration/: Requests through the FastAPI app and the widget session

Remote services (hosted agent, RAG service) are replaced with httpx
MockTransport backends from tests.helpers; nothing leaves the process.
Leverages pytest with pytest-check for soft assertions.
"""
