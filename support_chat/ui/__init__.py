"""NiceGUI support widget - thin visualization layer for the chat flow.

Responsibilities:
    - ChatSession: per-widget conversation state and the agent round trip
    - Widget page: launcher button, chat window, typing indicator, suggestions

Contains no knowledge-base logic. Talks to the agent only through the API.
"""
