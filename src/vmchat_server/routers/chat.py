"""Chat API endpoints.

This module provides the non-streaming and streaming (SSE) chat endpoints.
The client sends the whole conversation history with every request; nothing
is stored server-side.
"""

import logging
from contextlib import aclosing
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Request
from sse_starlette import EventSourceResponse

from vmchat_server.dependencies import get_orchestrator
from vmchat_server.exceptions import VmChatError
from vmchat_server.models.chat import ChatRequest, ChatResponse
from vmchat_server.services.orchestrator import ChatOrchestrator
from vmchat_server.streaming import FRAME_SEPARATOR, StreamEvent, to_sse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat_non_streaming(
    request_body: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """Send a message and receive the complete reply.

    Model and tool-loop failures are reported in the content as
    ``[Error: <message>]`` with status 200.

    Args:
        request_body: The new message and the prior history
        orchestrator: Injected conversation orchestrator

    Returns:
        ChatResponse with the assistant's reply
    """
    logger.info(
        f"Chat request with {len(request_body.history)} history message(s)"
    )
    try:
        content = await orchestrator.complete(
            request_body.message, request_body.history
        )
    except VmChatError as e:
        return ChatResponse(content=f"[Error: {e}]")

    return ChatResponse(content=content)


@router.post("/stream")
async def chat_streaming(
    request_body: ChatRequest,
    request: Request,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> EventSourceResponse:
    """Stream the reply via Server-Sent Events (SSE).

    Every frame is ``data: <payload>``. Payloads are text deltas, an optional
    ``[Error: <message>]`` and finally ``[DONE]``.

    Args:
        request_body: The new message and the prior history
        request: FastAPI request object, polled for disconnects
        orchestrator: Injected conversation orchestrator

    Returns:
        EventSourceResponse with the event stream
    """
    logger.info(
        f"Starting streaming chat with {len(request_body.history)} history message(s)"
    )

    async def event_generator() -> AsyncGenerator[StreamEvent, None]:
        async with aclosing(
            orchestrator.stream(request_body.message, request_body.history)
        ) as events:
            async for event in events:
                # Check if client disconnected
                if await request.is_disconnected():
                    logger.warning("Client disconnected during streaming")
                    break
                yield event

    return EventSourceResponse(
        to_sse(event_generator()),
        headers={"Cache-Control": "no-cache"},
        sep=FRAME_SEPARATOR,
    )
