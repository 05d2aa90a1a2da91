"""Encoding of StreamEvents as Server-Sent-Events frames.

Every frame has the form ``data: <payload>\\n\\n``. sse-starlette does the
actual framing (multi-line payloads become consecutive ``data:`` lines) and
sends each frame as its own body chunk.
"""

import logging
from contextlib import aclosing
from typing import AsyncGenerator, AsyncIterator

from sse_starlette import ServerSentEvent

from vmchat_server.streaming.events import (
    DONE_SENTINEL,
    ERROR_PREFIX,
    ERROR_SUFFIX,
    StreamEvent,
)

logger = logging.getLogger(__name__)

FRAME_SEPARATOR = "\n"


def encode_payload(event: StreamEvent) -> str:
    """Return the frame payload for an event."""
    if event.kind == "done":
        return DONE_SENTINEL
    if event.kind == "error":
        return f"{ERROR_PREFIX}{event.text}{ERROR_SUFFIX}"
    return event.text


def encode_frame(event: StreamEvent) -> bytes:
    """Encode one event exactly as it appears on the wire.

    Every line break in the payload starts a new ``data:`` line, so a bare
    ``\\r`` or a ``\\r\\n`` in a delta is decoded as ``\\n``.
    """
    return ServerSentEvent(data=encode_payload(event), sep=FRAME_SEPARATOR).encode()


async def to_sse(
    events: AsyncGenerator[StreamEvent, None],
) -> AsyncIterator[dict[str, str]]:
    """Turn a stream of events into sse-starlette event dicts.

    The output always ends with exactly one [DONE] frame: after an error
    frame, after the source's own Done, when the source runs dry, or when it
    raises (which is reported as an error frame first). Empty deltas are
    skipped.

    Args:
        events: Source events, usually ChatOrchestrator.stream()

    Yields:
        dict: ``{"data": payload}`` for EventSourceResponse
    """
    try:
        async with aclosing(events) as source:
            async for event in source:
                if event.kind == "delta":
                    if event.text:
                        yield {"data": encode_payload(event)}
                    continue
                if event.kind == "error":
                    yield {"data": encode_payload(event)}
                break
    except Exception as e:
        logger.error(f"Event source failed: {e}")
        yield {"data": encode_payload(StreamEvent.error(str(e)))}

    yield {"data": DONE_SENTINEL}
