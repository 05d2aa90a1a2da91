"""Data types for the prompt context of a chat request.

The context is rebuilt from the client's history on every request and lives
only for that request; nothing here is persisted.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from vmchat_server.models.chat import ConversationMessage


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class SystemMessage:
    """A system prompt message."""

    role: str = "system"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'system'."""
        self.role = "system"


@dataclass
class AssistantMessage:
    """A response from the LLM assistant, possibly requesting tools."""

    role: str = "assistant"
    content: str = ""
    tool_calls: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        """Validate role is always 'assistant'."""
        self.role = "assistant"


@dataclass
class ToolMessage:
    """A tool execution result."""

    role: str = "tool"
    tool_name: str = ""
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | SystemMessage | AssistantMessage | ToolMessage


def build_context(
    history: Iterable[ConversationMessage],
    message: str,
    system_prompt: str | None = None,
) -> list[Message]:
    """Assemble the prompt context for a new user message.

    Prior turns are kept in their original order and the new message is
    appended last. Any role other than "user" in the history is treated as
    an assistant turn.

    Args:
        history: Prior conversation turns, oldest first
        message: The new user message
        system_prompt: Optional system prompt placed first

    Returns:
        list[Message]: The context, ready for to_ollama_messages()
    """
    context: list[Message] = []
    if system_prompt:
        context.append(SystemMessage(content=system_prompt))

    for turn in history:
        if turn.role.lower() == "user":
            context.append(UserMessage(content=turn.content))
        else:
            context.append(AssistantMessage(content=turn.content))

    context.append(UserMessage(content=message))
    return context


def to_ollama_messages(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Convert context messages to Ollama API format.

    Args:
        messages: List of message objects (UserMessage, SystemMessage, AssistantMessage, ToolMessage)

    Returns:
        List of message dicts in Ollama format: [{"role": "...", "content": "..."}, ...]
    """
    ollama_messages = []

    for msg in messages:
        ollama_msg: dict[str, Any] = {
            "role": msg.role,
            "content": msg.content,
        }

        # Add tool_calls for assistant messages that have them
        if isinstance(msg, AssistantMessage) and msg.tool_calls:
            ollama_msg["tool_calls"] = msg.tool_calls

        if isinstance(msg, ToolMessage):
            ollama_msg["tool_name"] = msg.tool_name

        ollama_messages.append(ollama_msg)

    return ollama_messages
