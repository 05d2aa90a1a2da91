"""Reading the chat event stream into a MessageBuffer."""

import logging
from typing import AsyncIterable

from vmchat_server.client.buffer import MessageBuffer
from vmchat_server.exceptions import ChatStreamError, ChatTransportError
from vmchat_server.streaming import FrameDecoder

logger = logging.getLogger(__name__)


async def consume_stream(chunks: AsyncIterable[bytes], buffer: MessageBuffer) -> str:
    """Feed response body chunks through the frame decoder into a buffer.

    Reading stops at the [DONE] frame; anything after it is not read.

    Args:
        chunks: The response body, split arbitrarily
        buffer: Buffer receiving the deltas

    Returns:
        str: The complete raw message

    Raises:
        ChatStreamError: If the server sent an error frame
        ChatTransportError: If the body ended before [DONE]
    """
    decoder = FrameDecoder()

    async for chunk in chunks:
        for event in decoder.feed(chunk):
            if event.kind == "done":
                buffer.complete()
                return buffer.raw
            if event.kind == "error":
                buffer.fail(event.text)
                raise ChatStreamError(event.text)
            buffer.append(event.text)

    message = "Stream ended before completion marker"
    if decoder.pending:
        logger.warning(f"{message} (partial frame discarded)")
    buffer.fail(message)
    raise ChatTransportError(message)
