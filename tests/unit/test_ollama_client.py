"""Unit tests for the OllamaClient wrapper and chunk parsing."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from vmchat_server.ollama import OllamaChatChunk, OllamaClient, OllamaToolCall


@pytest.fixture
def mock_ollama_async_client():
    """Create a mock ollama.AsyncClient."""
    with patch("vmchat_server.ollama.client.ollama.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def ollama_client(mock_ollama_async_client):
    """Create an OllamaClient with mocked AsyncClient."""
    return OllamaClient(host="http://localhost:11434")


def _stream_of(*chunks):
    async def generator():
        for chunk in chunks:
            yield chunk

    return generator()


@pytest.mark.asyncio
async def test_client_initialization():
    """Test that OllamaClient initializes correctly."""
    with patch("vmchat_server.ollama.client.ollama.AsyncClient"):
        client = OllamaClient(host="http://test:11434")
        assert client.host == "http://test:11434"
        assert client._client is not None


@pytest.mark.asyncio
async def test_check_connection_success(ollama_client, mock_ollama_async_client):
    """Test successful connection check."""
    mock_ollama_async_client.list.return_value = {"models": []}

    result = await ollama_client.check_connection()

    assert result is True
    mock_ollama_async_client.list.assert_called_once()


@pytest.mark.asyncio
async def test_check_connection_failure(ollama_client, mock_ollama_async_client):
    """Test connection check when Ollama is unreachable."""
    mock_ollama_async_client.list.side_effect = Exception("Connection refused")

    result = await ollama_client.check_connection()

    assert result is False


@pytest.mark.asyncio
async def test_chat_stream_yields_dicts(ollama_client, mock_ollama_async_client):
    """Test that SDK response objects are converted to dicts."""
    sdk_chunk = MagicMock()
    sdk_chunk.model_dump.return_value = {
        "message": {"role": "assistant", "content": "Hi"},
        "done": True,
    }
    mock_ollama_async_client.chat.return_value = _stream_of(
        {"message": {"role": "assistant", "content": "Oh, "}, "done": False},
        sdk_chunk,
    )

    chunks = [
        chunk
        async for chunk in ollama_client.chat_stream(
            model="llama3.2:latest",
            messages=[{"role": "user", "content": "Hello"}],
            tools=[{"type": "function", "function": {"name": "get_vms"}}],
        )
    ]

    assert chunks[0]["message"]["content"] == "Oh, "
    assert chunks[1]["done"] is True
    mock_ollama_async_client.chat.assert_awaited_once_with(
        model="llama3.2:latest",
        messages=[{"role": "user", "content": "Hello"}],
        tools=[{"type": "function", "function": {"name": "get_vms"}}],
        stream=True,
        options=None,
    )


@pytest.mark.asyncio
async def test_chat_stream_without_tools(ollama_client, mock_ollama_async_client):
    """Test that an empty tool list is sent as None."""
    mock_ollama_async_client.chat.return_value = _stream_of({"done": True})

    async for _ in ollama_client.chat_stream(model="m", messages=[], tools=[]):
        pass

    assert mock_ollama_async_client.chat.call_args.kwargs["tools"] is None


@pytest.mark.asyncio
async def test_chat_stream_error_propagates(ollama_client, mock_ollama_async_client):
    mock_ollama_async_client.chat.side_effect = ConnectionError("refused")

    with pytest.raises(ConnectionError):
        async for _ in ollama_client.chat_stream(model="m", messages=[]):
            pass


@pytest.mark.asyncio
async def test_close(ollama_client):
    """Test that close does not raise."""
    await ollama_client.close()


class TestOllamaChatChunk:
    """Tests for parsing raw stream chunks."""

    def test_text_chunk(self):
        chunk = OllamaChatChunk.from_ollama_chunk(
            {"message": {"role": "assistant", "content": "Hello"}, "done": False}
        )

        assert chunk.content == "Hello"
        assert chunk.tool_calls == []
        assert chunk.done is False

    def test_final_chunk_metadata(self):
        chunk = OllamaChatChunk.from_ollama_chunk(
            {
                "message": {"role": "assistant", "content": ""},
                "done": True,
                "eval_count": 12,
                "prompt_eval_count": 40,
            }
        )

        assert chunk.done is True
        assert chunk.eval_count == 12
        assert chunk.prompt_eval_count == 40

    def test_tool_call_chunk(self):
        chunk = OllamaChatChunk.from_ollama_chunk(
            {
                "message": {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [
                        {"function": {"name": "get_vm", "arguments": {"id": 101}}}
                    ],
                },
                "done": True,
            }
        )

        assert chunk.tool_calls == [OllamaToolCall(name="get_vm", arguments={"id": 101})]

    def test_tool_call_from_sdk_objects(self):
        """Test parsing attribute-style objects as returned by the SDK."""
        raw = SimpleNamespace(
            message=SimpleNamespace(
                content=None,
                tool_calls=[
                    SimpleNamespace(
                        function=SimpleNamespace(name="get_vms", arguments=None)
                    )
                ],
            ),
            done=False,
            eval_count=None,
            prompt_eval_count=None,
        )

        chunk = OllamaChatChunk.from_ollama_chunk(raw)

        assert chunk.content == ""
        assert chunk.tool_calls == [OllamaToolCall(name="get_vms", arguments={})]

    def test_nameless_tool_call_is_dropped(self):
        chunk = OllamaChatChunk.from_ollama_chunk(
            {"message": {"tool_calls": [{"function": {"arguments": {}}}]}, "done": True}
        )

        assert chunk.tool_calls == []

    def test_missing_message(self):
        chunk = OllamaChatChunk.from_ollama_chunk({"done": True})

        assert chunk.content == ""
        assert chunk.done is True

    def test_tool_call_to_ollama_format(self):
        call = OllamaToolCall(name="get_vm", arguments={"id": 1})

        assert call.to_ollama_format() == {
            "function": {"name": "get_vm", "arguments": {"id": 1}}
        }
