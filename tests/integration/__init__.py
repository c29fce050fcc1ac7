"""Integration tests for components working together as a system.

Coverage:
    - /api/rag endpoints with real HTTP requests against the app
    - /api/agent relay, including the widget session talking to it over ASGI
"""
