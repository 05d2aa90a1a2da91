"""Tool-calling conversation loop.

One ChatOrchestrator is built per request. It sends the prompt context and
the tool schemas to the model, runs whatever tools the model asks for,
feeds the results back and repeats until the model answers in plain text.
"""

import asyncio
import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncGenerator, Iterable

from vmchat_server.conversation import (
    AssistantMessage,
    Message,
    ToolMessage,
    build_context,
    to_ollama_messages,
)
from vmchat_server.exceptions import (
    ModelCapabilityError,
    ToolLoopLimitExceeded,
    VmChatError,
)
from vmchat_server.models.chat import ConversationMessage
from vmchat_server.ollama import OllamaToolCall
from vmchat_server.services.model import ModelChunk, ModelClient, ModelReply
from vmchat_server.streaming.events import StreamEvent
from vmchat_server.tools.registry import ToolInvocationRequest, ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_ROUND_TRIPS = 8


class TurnState(str, Enum):
    START = "start"
    AWAITING_MODEL = "awaiting_model"
    TOOL_REQUESTED = "tool_requested"
    FINALIZING = "finalizing"
    DONE = "done"
    ERRORED = "errored"


@dataclass
class ChatTurn:
    """Mutable state of one request's conversation loop.

    Attributes:
        context: Prompt context, grows with tool calls and results
        state: Current loop state
        round_trips: Tool round-trips completed so far
    """

    context: list[Message]
    state: TurnState = TurnState.START
    round_trips: int = 0
    visited: list[TurnState] = field(default_factory=list)

    def transition(self, state: TurnState) -> None:
        logger.debug(f"Chat turn {self.state.value} -> {state.value}")
        self.visited.append(self.state)
        self.state = state


class ChatOrchestrator:
    """Runs the model/tool loop for a single user message.

    Attributes:
        model: The model capability
        registry: Frozen tool registry shared by all requests
        max_tool_round_trips: Cap on tool round-trips per request
        timeout_seconds: Wall-clock limit for each model call
        system_prompt: Optional system prompt placed before the history
    """

    def __init__(
        self,
        model: ModelClient,
        registry: ToolRegistry,
        max_tool_round_trips: int = DEFAULT_MAX_TOOL_ROUND_TRIPS,
        timeout_seconds: float = 120.0,
        system_prompt: str | None = None,
    ) -> None:
        self.model = model
        self.registry = registry
        self.max_tool_round_trips = max_tool_round_trips
        self.timeout_seconds = timeout_seconds
        self.system_prompt = system_prompt

    def start_turn(
        self, message: str, history: Iterable[ConversationMessage]
    ) -> ChatTurn:
        """Build the initial context for a new user message."""
        context = build_context(history, message, self.system_prompt)
        logger.info(f"Starting chat turn with {len(context)} context messages")
        return ChatTurn(context=context)

    async def complete(
        self, message: str, history: Iterable[ConversationMessage] = ()
    ) -> str:
        """Run the loop to completion and return the final answer.

        Raises:
            ModelCapabilityError: If a model call fails or times out
            ToolLoopLimitExceeded: If the model keeps requesting tools
        """
        turn = self.start_turn(message, history)
        try:
            while True:
                turn.transition(TurnState.AWAITING_MODEL)
                reply = await self._complete_once(turn)
                if reply.kind == "final":
                    break
                await self._run_tools(turn, list(reply.tool_calls), reply.content)
        except VmChatError as e:
            turn.transition(TurnState.ERRORED)
            logger.error(f"Chat turn failed: {e}")
            raise

        turn.transition(TurnState.FINALIZING)
        turn.transition(TurnState.DONE)
        logger.info(
            f"Chat turn finished after {turn.round_trips} tool round-trip(s): "
            f"{len(reply.content)} characters"
        )
        return reply.content

    async def stream(
        self, message: str, history: Iterable[ConversationMessage] = ()
    ) -> AsyncGenerator[StreamEvent, None]:
        """Run the loop, yielding text deltas as the model produces them.

        Always ends with exactly one terminal outcome followed by Done: either
        the final text has been delivered, or one Error event is yielded.
        Closing the generator stops the loop before any further model or tool
        call.

        Yields:
            StreamEvent: Delta events, then an optional Error, then Done
        """
        turn = self.start_turn(message, history)
        try:
            while True:
                turn.transition(TurnState.AWAITING_MODEL)
                content_parts: list[str] = []
                tool_calls: list[ToolInvocationRequest] = []

                async with aclosing(self._stream_once(turn)) as chunks:
                    async for chunk in chunks:
                        if chunk.kind == "tool_call" and chunk.tool_call is not None:
                            tool_calls.append(chunk.tool_call)
                            continue
                        content_parts.append(chunk.text)
                        if chunk.text.strip():
                            yield StreamEvent.delta(chunk.text)

                # Deltas are already out; only a round without tool calls is final
                if not tool_calls:
                    turn.transition(TurnState.FINALIZING)
                    break
                await self._run_tools(turn, tool_calls, "".join(content_parts))
        except VmChatError as e:
            turn.transition(TurnState.ERRORED)
            logger.error(f"Streaming chat turn failed: {e}")
            yield StreamEvent.error(str(e))
            yield StreamEvent.done()
            return

        turn.transition(TurnState.DONE)
        logger.info(
            f"Streaming chat turn finished after {turn.round_trips} tool round-trip(s)"
        )
        yield StreamEvent.done()

    async def _complete_once(self, turn: ChatTurn) -> ModelReply:
        messages = to_ollama_messages(turn.context)
        tools = self.registry.to_ollama_tools()
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self.model.complete(messages, tools)
        except VmChatError:
            raise
        except TimeoutError as e:
            raise ModelCapabilityError(
                f"Model call timed out after {self.timeout_seconds:g}s"
            ) from e
        except Exception as e:
            raise ModelCapabilityError(f"Model call failed: {e}") from e

    async def _stream_once(
        self, turn: ChatTurn
    ) -> AsyncGenerator[ModelChunk, None]:
        """Stream one model call.

        Each wait for the next chunk is bounded by the timeout, so a stalled
        model fails the call while a slow but steady one does not.
        """
        messages = to_ollama_messages(turn.context)
        tools = self.registry.to_ollama_tools()

        async with aclosing(self.model.stream(messages, tools)) as source:
            while True:
                chunk = await self._next_chunk(source)
                if chunk is None:
                    return
                yield chunk

    async def _next_chunk(
        self, source: AsyncGenerator[ModelChunk, None]
    ) -> ModelChunk | None:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await anext(source)
        except StopAsyncIteration:
            return None
        except VmChatError:
            raise
        except TimeoutError as e:
            raise ModelCapabilityError(
                f"Model call timed out after {self.timeout_seconds:g}s"
            ) from e
        except Exception as e:
            raise ModelCapabilityError(f"Model call failed: {e}") from e

    async def _run_tools(
        self,
        turn: ChatTurn,
        tool_calls: list[ToolInvocationRequest],
        content: str,
    ) -> None:
        """Execute requested tools in order and append their results.

        Raises:
            ToolLoopLimitExceeded: If the round-trip cap has been reached
        """
        if turn.round_trips >= self.max_tool_round_trips:
            raise ToolLoopLimitExceeded(self.max_tool_round_trips)

        turn.transition(TurnState.TOOL_REQUESTED)
        turn.round_trips += 1
        turn.context.append(
            AssistantMessage(
                content=content,
                tool_calls=[
                    OllamaToolCall(call.name, call.arguments).to_ollama_format()
                    for call in tool_calls
                ],
            )
        )

        for call in tool_calls:
            logger.info(f"Executing tool {call.name} with arguments {call.arguments}")
            result = await self.registry.execute(call)
            turn.context.append(
                ToolMessage(tool_name=call.name, content=result.to_content())
            )
