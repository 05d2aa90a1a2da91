"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. All operations are async and the client
is designed to be created once at startup and reused.
"""

import logging
from typing import Any, AsyncIterator

import ollama

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for interacting with Ollama API.

    This client wraps ollama.AsyncClient and provides high-level async methods
    for checking connectivity and streaming chat completions with tools.
    All chat operations use streaming, even for non-streaming HTTP endpoints.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            # Try to list models as a connectivity check
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream chat responses from Ollama.

        This method sends a chat request to Ollama and yields response chunks
        as they arrive.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            tools: Optional function tool schemas the model may call
            options: Optional model parameters (temperature, etc.)

        Yields:
            dict: Response chunks from Ollama. Each chunk contains:
                  - model: str - The model name
                  - message: dict - Contains role, content and maybe tool_calls
                  - done: bool - True on the final chunk
                  - (final chunk includes eval_count, prompt_eval_count, etc.)

        Raises:
            Exception: If the Ollama API request fails
        """
        try:
            logger.debug(f"Starting chat stream with model: {model}")
            logger.debug(f"Message count: {len(messages)}, tool count: {len(tools or [])}")

            async for chunk in await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=True,
                options=options,
            ):
                # Convert the chunk to a dict if it's not already
                if hasattr(chunk, "model_dump"):
                    chunk_dict = chunk.model_dump()
                elif isinstance(chunk, dict):
                    chunk_dict = chunk
                else:
                    chunk_dict = vars(chunk)

                logger.debug(
                    f"Received chunk: done={chunk_dict.get('done')}, "
                    f"content_length={len((chunk_dict.get('message') or {}).get('content') or '')}"
                )

                yield chunk_dict

            logger.debug("Chat stream completed")

        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient uses httpx internally which handles cleanup.
        """
        logger.debug("OllamaClient closed")
