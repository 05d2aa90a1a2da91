"""Model capability used by the chat orchestrator.

The orchestrator only sees the ModelClient protocol: a call either streams
text and tool requests (stream) or resolves to a single tagged reply
(complete). OllamaChatModel implements it on top of OllamaClient.
"""

import logging
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Literal, Protocol

from vmchat_server.exceptions import ModelCapabilityError
from vmchat_server.ollama import OllamaChatChunk, OllamaClient
from vmchat_server.tools.registry import ToolInvocationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelChunk:
    """One item of a streamed model response.

    Attributes:
        kind: "content" for a text fragment, "tool_call" for a tool request
        text: The text fragment (content chunks only)
        tool_call: The requested invocation (tool_call chunks only)
    """

    kind: Literal["content", "tool_call"]
    text: str = ""
    tool_call: ToolInvocationRequest | None = None


@dataclass(frozen=True)
class ModelReply:
    """Complete model response: final text or a batch of tool requests.

    Attributes:
        kind: "final" or "tool_calls"
        content: Text produced alongside the reply
        tool_calls: Requested invocations, in the order the model listed them
    """

    kind: Literal["final", "tool_calls"]
    content: str = ""
    tool_calls: tuple[ToolInvocationRequest, ...] = ()

    @classmethod
    def final(cls, content: str) -> "ModelReply":
        return cls(kind="final", content=content)

    @classmethod
    def requesting(
        cls, tool_calls: list[ToolInvocationRequest], content: str = ""
    ) -> "ModelReply":
        return cls(kind="tool_calls", content=content, tool_calls=tuple(tool_calls))


class ModelClient(Protocol):
    """A chat model that can call tools."""

    def stream(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]
    ) -> AsyncGenerator[ModelChunk, None]: ...

    async def complete(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]
    ) -> ModelReply: ...


class OllamaChatModel:
    """ModelClient backed by a streaming Ollama chat call.

    Attributes:
        ollama_client: Shared OllamaClient instance
        model: Model name, e.g. "llama3.2:latest"
        options: Optional model parameters passed through to Ollama
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        model: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.ollama_client = ollama_client
        self.model = model
        self.options = options

    async def stream(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]
    ) -> AsyncGenerator[ModelChunk, None]:
        """Stream one model call as content and tool_call chunks.

        Raises:
            ModelCapabilityError: If the stream ends without a completion marker
        """
        done = False
        async for raw_chunk in self.ollama_client.chat_stream(
            model=self.model,
            messages=messages,
            tools=tools,
            options=self.options,
        ):
            chunk = OllamaChatChunk.from_ollama_chunk(raw_chunk)

            if chunk.content:
                yield ModelChunk(kind="content", text=chunk.content)

            for call in chunk.tool_calls:
                yield ModelChunk(
                    kind="tool_call",
                    tool_call=ToolInvocationRequest(
                        name=call.name, arguments=call.arguments
                    ),
                )

            if chunk.done:
                done = True
                logger.debug(
                    f"Model call finished: eval_count={chunk.eval_count}, "
                    f"prompt_eval_count={chunk.prompt_eval_count}"
                )
                break

        if not done:
            raise ModelCapabilityError("Stream ended without completion marker")

    async def complete(
        self, messages: list[dict[str, Any]], tools: list[dict[str, Any]]
    ) -> ModelReply:
        """Collect a complete response from the streaming API."""
        content_parts: list[str] = []
        tool_calls: list[ToolInvocationRequest] = []

        async for chunk in self.stream(messages, tools):
            if chunk.kind == "tool_call" and chunk.tool_call is not None:
                tool_calls.append(chunk.tool_call)
            else:
                content_parts.append(chunk.text)

        content = "".join(content_parts)
        if tool_calls:
            return ModelReply.requesting(tool_calls, content=content)
        return ModelReply.final(content)
