"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vmchat_server import __version__
from vmchat_server.config import VmChatSettings
from vmchat_server.inventory import VmInventory, seed_vms
from vmchat_server.ollama import OllamaClient
from vmchat_server.routers import chat, health, vms
from vmchat_server.tools import build_vm_tool_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The Ollama client, the VM inventory and the tool registry are created once
    at startup and stored in app.state for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: VmChatSettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    # Check initial connectivity
    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    app.state.inventory = VmInventory(seed_vms())
    app.state.tool_registry = build_vm_tool_registry(app.state.inventory)
    tool_names = [d.name for d in app.state.tool_registry.describe_all()]
    logger.info(f"Registered tools: {', '.join(tool_names)}")

    yield

    # Shutdown: Clean up resources
    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: VmChatSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional VmChatSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from vmchat_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="vmchat-server",
        description="Tool-calling LLM chat over a virtual machine inventory",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(vms.router)
    app.include_router(chat.router)

    return app
