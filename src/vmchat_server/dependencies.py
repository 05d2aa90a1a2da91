"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from vmchat_server.config import VmChatSettings
from vmchat_server.inventory import VmInventory
from vmchat_server.ollama import OllamaClient
from vmchat_server.services import ChatOrchestrator, OllamaChatModel
from vmchat_server.tools import ToolRegistry


@lru_cache
def get_settings() -> VmChatSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the VMCHAT_ prefix.

    Returns:
        VmChatSettings: The application configuration settings.
    """
    return VmChatSettings()


def _not_initialized(what: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "service_unavailable",
                "message": f"{what} not initialized",
                "details": {},
            }
        },
    )


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise _not_initialized("Ollama client")
    return request.app.state.ollama_client


def get_inventory(request: Request) -> VmInventory:
    """Get the shared VM inventory from app state."""
    if not hasattr(request.app.state, "inventory"):
        raise _not_initialized("VM inventory")
    return request.app.state.inventory


def get_tool_registry(request: Request) -> ToolRegistry:
    if not hasattr(request.app.state, "tool_registry"):
        raise _not_initialized("Tool registry")
    return request.app.state.tool_registry


def get_orchestrator(request: Request) -> ChatOrchestrator:
    """Build a ChatOrchestrator for the current request.

    The orchestrator holds no state between requests; it is created per
    request from the shared Ollama client and tool registry, using settings
    from app.state so tests can use their own isolated settings.

    Args:
        request: The FastAPI request object.

    Returns:
        ChatOrchestrator: A new orchestrator instance.

    Raises:
        HTTPException: If the Ollama client or tool registry is not initialized (503).
    """
    settings: VmChatSettings = request.app.state.settings
    model = OllamaChatModel(
        ollama_client=get_ollama_client(request),
        model=settings.model,
    )
    return ChatOrchestrator(
        model=model,
        registry=get_tool_registry(request),
        max_tool_round_trips=settings.max_tool_round_trips,
        timeout_seconds=settings.llm_timeout_seconds,
        system_prompt=settings.system_prompt,
    )
