"""Ollama client wrapper and integration layer.

This package provides async client wrappers for communicating with the Ollama API.
All Ollama interactions are async and use streaming by default.
"""

from vmchat_server.ollama.client import OllamaClient
from vmchat_server.ollama.types import OllamaChatChunk, OllamaToolCall

__all__ = ["OllamaClient", "OllamaChatChunk", "OllamaToolCall"]
