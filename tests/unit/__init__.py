"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation and serialization
    - rag/: Knowledge-base proxy validation, forwarding and normalization
    - agent/: Relay and reply normalization
    - ui/: Chat session state machine
    - configuration loading from the environment
"""
