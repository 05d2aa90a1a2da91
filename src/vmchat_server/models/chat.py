"""Pydantic models for chat API requests and responses.

This module defines the request and response schemas for the chat endpoints,
including both streaming and non-streaming chat interactions.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ConversationMessage(BaseModel):
    """One prior turn of the conversation, as sent by the client."""

    role: Literal["user", "assistant"] = Field(description="Message author")
    content: str = Field(default="", description="Message text")


class ChatRequest(BaseModel):
    """Request body for chat endpoints.

    Used by both POST /chat (non-streaming) and POST /chat/stream (streaming).
    """

    message: str = Field(description="The new user message to send.")
    history: list[ConversationMessage] = Field(
        default_factory=list,
        description="Prior conversation turns, oldest first. Sent verbatim as the prompt.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "message": "List my VMs",
                    "history": [],
                },
                {
                    "message": "Start the QA box",
                    "history": [
                        {"role": "user", "content": "List my VMs"},
                        {"role": "assistant", "content": "1. VM Name: DEV-W11-01 ..."},
                    ],
                },
            ]
        }
    )


class ChatResponse(BaseModel):
    """Response body for the non-streaming chat endpoint.

    Errors are reported in ``content`` as ``[Error: ...]`` rather than via
    the HTTP status so that clients handle both outcomes the same way.
    """

    role: Literal["assistant"] = Field(default="assistant", description="Always assistant")
    content: str = Field(description="The assistant's reply")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "role": "assistant",
                "content": "You have 2 virtual machines: 1. VM Name: DEV-W11-01 ...",
            }
        }
    )
