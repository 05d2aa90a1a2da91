"""Async HTTP client for a vmchat-server instance."""

import asyncio
import logging
from typing import Any, Iterable

import httpx

from vmchat_server.client.buffer import MessageBuffer, UpdateCallback
from vmchat_server.client.consumer import consume_stream
from vmchat_server.exceptions import ChatTransportError, VmChatError
from vmchat_server.formatting import normalize
from vmchat_server.models.chat import ChatResponse, ConversationMessage
from vmchat_server.models.vms import VmRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
FAILED_RESPONSE_SUFFIX = "\n[Error: Failed to get response]"


def _chat_payload(
    message: str, history: Iterable[ConversationMessage]
) -> dict[str, Any]:
    return {
        "message": message,
        "history": [turn.model_dump() for turn in history],
    }


class StreamSubscription:
    """Handle on a stream running in a background task.

    Attributes:
        buffer: The message being received
    """

    def __init__(self, task: "asyncio.Task[None]", buffer: MessageBuffer) -> None:
        self._task = task
        self._cancel_requested = False
        self.buffer = buffer

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested

    def cancel(self) -> None:
        """Abort the read. No further deltas are delivered."""
        if not self._task.done():
            self._cancel_requested = True
            self._task.cancel()

    async def wait(self) -> MessageBuffer:
        """Wait for the stream to end and return the buffer.

        After cancel() this returns the partial message instead of raising.

        Raises:
            ChatStreamError: If the server reported an error
            ChatTransportError: If the connection failed
        """
        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not self._cancel_requested or (
                current is not None and current.cancelling()
            ):
                raise
            logger.debug("Stream cancelled by caller")
        return self.buffer


class ChatClient:
    """Client for the chat, streaming and inventory endpoints.

    Failures are not retried: any transport error ends the call with
    ChatTransportError.

    Attributes:
        base_url: Server base URL
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.base_url = base_url
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def list_vms(self) -> list[VmRecord]:
        """Fetch the whole inventory."""
        response = await self._request("GET", "/vms")
        return [VmRecord.model_validate(item) for item in response.json()]

    async def send_message(
        self, message: str, history: Iterable[ConversationMessage] = ()
    ) -> ConversationMessage:
        """Send a message and wait for the complete, formatted reply."""
        response = await self._request(
            "POST", "/chat", json=_chat_payload(message, history)
        )
        reply = ChatResponse.model_validate(response.json())
        return ConversationMessage(role="assistant", content=normalize(reply.content))

    async def stream_message(
        self,
        message: str,
        history: Iterable[ConversationMessage] = (),
        on_update: UpdateCallback | None = None,
    ) -> str:
        """Stream a reply, calling on_update after every delta.

        Returns:
            str: The formatted complete reply

        Raises:
            ChatStreamError: If the server reported an error
            ChatTransportError: If the connection failed
        """
        buffer = MessageBuffer()
        if on_update is not None:
            buffer.subscribe(on_update)
        await self._stream_into(buffer, message, list(history))
        return buffer.display

    def start_stream(
        self,
        message: str,
        history: Iterable[ConversationMessage] = (),
        on_update: UpdateCallback | None = None,
    ) -> StreamSubscription:
        """Start streaming a reply in a background task."""
        buffer = MessageBuffer()
        if on_update is not None:
            buffer.subscribe(on_update)
        task = asyncio.create_task(self._stream_into(buffer, message, list(history)))
        return StreamSubscription(task, buffer)

    async def _stream_into(
        self,
        buffer: MessageBuffer,
        message: str,
        history: list[ConversationMessage],
    ) -> None:
        try:
            async with self._http.stream(
                "POST",
                "/chat/stream",
                json=_chat_payload(message, history),
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    error = f"Stream request failed with status {response.status_code}"
                    buffer.fail(error)
                    raise ChatTransportError(error)
                await consume_stream(response.aiter_bytes(), buffer)
        except httpx.HTTPError as e:
            logger.error(f"Stream request failed: {e}")
            if not buffer.finished:
                buffer.fail(str(e))
            raise ChatTransportError(f"Stream request failed: {e}") from e

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ChatTransportError(f"{method} {url} failed: {e}") from e
        return response


class ChatConversation:
    """Client-side conversation history.

    Each send appends the user message and the assistant reply. While
    streaming, the assistant message is already in the list and its content
    is replaced with the formatted text after every delta.
    """

    def __init__(self, client: ChatClient) -> None:
        self.client = client
        self.messages: list[ConversationMessage] = []

    async def send(self, text: str) -> ConversationMessage:
        history = list(self.messages)
        self.messages.append(ConversationMessage(role="user", content=text))
        try:
            reply = await self.client.send_message(text, history)
        except VmChatError:
            self.messages.append(
                ConversationMessage(
                    role="assistant", content=FAILED_RESPONSE_SUFFIX.lstrip("\n")
                )
            )
            raise
        self.messages.append(reply)
        return reply

    async def stream(
        self, text: str, on_update: UpdateCallback | None = None
    ) -> ConversationMessage:
        history = list(self.messages)
        self.messages.append(ConversationMessage(role="user", content=text))
        assistant = ConversationMessage(role="assistant", content="")
        self.messages.append(assistant)

        def track(update) -> None:
            assistant.content = update.display
            if on_update is not None:
                on_update(update)

        try:
            await self.client.stream_message(text, history, on_update=track)
        except VmChatError:
            assistant.content += FAILED_RESPONSE_SUFFIX
            raise
        return assistant
