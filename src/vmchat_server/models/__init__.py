"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from vmchat_server.models.chat import ChatRequest, ChatResponse, ConversationMessage
from vmchat_server.models.health import HealthResponse
from vmchat_server.models.vms import POWER_STATES, PowerState, VmRecord

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ConversationMessage",
    "HealthResponse",
    "POWER_STATES",
    "PowerState",
    "VmRecord",
]
