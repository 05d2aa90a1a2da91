"""Conversation context handling for vmchat-server.

This package provides the message types that make up the prompt context of
one chat request and their conversion to the Ollama wire format.
"""

from vmchat_server.conversation.types import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolMessage,
    UserMessage,
    build_context,
    to_ollama_messages,
)

__all__ = [
    "AssistantMessage",
    "Message",
    "SystemMessage",
    "ToolMessage",
    "UserMessage",
    "build_context",
    "to_ollama_messages",
]
