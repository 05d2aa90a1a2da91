"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that mock the
Ollama client and script the chunks it streams.
"""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("vmchat_server.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.check_connection.return_value = True
        mock_instance.host = "http://localhost:11434"

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance


def text_chunks(*parts: str) -> list[dict[str, Any]]:
    """Build a streamed text reply; the last part carries done=True."""
    chunks = [
        {
            "model": "llama3.2:latest",
            "message": {"role": "assistant", "content": part},
            "done": False,
        }
        for part in parts
    ]
    chunks[-1]["done"] = True
    chunks[-1]["eval_count"] = len(parts)
    chunks[-1]["prompt_eval_count"] = 20
    return chunks


def tool_call_chunks(name: str, arguments: dict[str, Any]) -> list[dict[str, Any]]:
    """Build a streamed reply that requests a single tool call."""
    return [
        {
            "model": "llama3.2:latest",
            "message": {
                "role": "assistant",
                "content": "",
                "tool_calls": [{"function": {"name": name, "arguments": arguments}}],
            },
            "done": True,
        }
    ]


class ScriptedChatStream:
    """Replacement for OllamaClient.chat_stream that plays one reply per call.

    Every call records the messages and tools it received.
    """

    def __init__(self, *replies: list[dict[str, Any]]) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, model, messages, tools=None, options=None):
        self.calls.append({"model": model, "messages": list(messages), "tools": tools})
        if not self.replies:
            raise RuntimeError("No scripted reply left")
        for chunk in self.replies.pop(0):
            yield chunk


@pytest.fixture
def text_reply():
    """Builder for streamed text replies."""
    return text_chunks


@pytest.fixture
def tool_call_reply():
    """Builder for streamed tool-call replies."""
    return tool_call_chunks


@pytest.fixture
def script_ollama(mock_ollama_client):
    """Install scripted replies on the mocked Ollama client.

    Returns:
        Callable taking one list of chunks per expected model call and
        returning the ScriptedChatStream, which records the calls.
    """

    def install(*replies: list[dict[str, Any]]) -> ScriptedChatStream:
        stream = ScriptedChatStream(*replies)
        mock_ollama_client.chat_stream = stream
        return stream

    return install
