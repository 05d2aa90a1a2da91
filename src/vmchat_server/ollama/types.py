"""Type definitions for Ollama integration.

This module contains dataclasses used for representing the chunks of a
streamed Ollama chat response, including any tool calls the model makes.
"""

from dataclasses import dataclass, field
from typing import Any


def _get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Get a value from either an object attribute or a dict key."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    if hasattr(obj, key):
        value = getattr(obj, key, default)
        return default if value is None else value
    return default


@dataclass
class OllamaToolCall:
    """A single function call requested by the model.

    Attributes:
        name: Function name
        arguments: Arguments as a mapping (empty if the model sent none)
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_ollama_format(self) -> dict[str, Any]:
        """Render the call the way Ollama expects it in an assistant message."""
        return {"function": {"name": self.name, "arguments": self.arguments}}


@dataclass
class OllamaChatChunk:
    """One chunk of a streamed Ollama chat response.

    Attributes:
        content: Text fragment (may be empty)
        tool_calls: Tool calls carried by this chunk
        done: True on the final chunk
        eval_count: Tokens generated (final chunk only)
        prompt_eval_count: Prompt tokens (final chunk only)
    """

    content: str = ""
    tool_calls: list[OllamaToolCall] = field(default_factory=list)
    done: bool = False
    eval_count: int | None = None
    prompt_eval_count: int | None = None

    @staticmethod
    def from_ollama_chunk(chunk: Any) -> "OllamaChatChunk":
        """Create an OllamaChatChunk from a raw chunk dict or SDK object.

        Tool calls without a name are dropped; non-mapping arguments are
        replaced by an empty mapping.

        Args:
            chunk: Raw chunk as yielded by OllamaClient.chat_stream()

        Returns:
            OllamaChatChunk: Parsed chunk
        """
        message = _get_value(chunk, "message", {}) or {}
        content = _get_value(message, "content", "") or ""

        tool_calls: list[OllamaToolCall] = []
        for raw_call in _get_value(message, "tool_calls", []) or []:
            function = _get_value(raw_call, "function", {}) or {}
            name = _get_value(function, "name", "") or ""
            if not name:
                continue
            arguments = _get_value(function, "arguments", {}) or {}
            if not isinstance(arguments, dict):
                arguments = dict(arguments) if hasattr(arguments, "items") else {}
            tool_calls.append(OllamaToolCall(name=str(name), arguments=arguments))

        return OllamaChatChunk(
            content=str(content),
            tool_calls=tool_calls,
            done=bool(_get_value(chunk, "done", False)),
            eval_count=_get_value(chunk, "eval_count"),
            prompt_eval_count=_get_value(chunk, "prompt_eval_count"),
        )
