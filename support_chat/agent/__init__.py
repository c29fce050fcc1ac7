"""Hosted support agent access.

Responsibilities:
    - Agent configuration (credential, agent id, endpoint)
    - Server-side relay of widget messages to the hosted agent
    - Normalization of the agent's reply into AgentResponse

Keeps the agent credential on the server and out of the widget.
"""

from support_chat.agent.config import AgentConfig, get_agent_config
from support_chat.agent.relay import AgentRelay, get_agent_relay

__all__ = ["AgentConfig", "AgentRelay", "get_agent_config", "get_agent_relay"]
