"""Business logic services for vmchat-server.

This package contains the model capability adapter and the tool-calling
conversation orchestrator.
"""

from vmchat_server.services.model import (
    ModelChunk,
    ModelClient,
    ModelReply,
    OllamaChatModel,
)
from vmchat_server.services.orchestrator import (
    ChatOrchestrator,
    ChatTurn,
    TurnState,
)

__all__ = [
    "ChatOrchestrator",
    "ChatTurn",
    "ModelChunk",
    "ModelClient",
    "ModelReply",
    "OllamaChatModel",
    "TurnState",
]
