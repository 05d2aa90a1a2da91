"""Pytest configuration and shared fixtures for vmchat-server tests.

This module provides common fixtures used across all test modules,
including test app creation and async client setup.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vmchat_server import create_app
from vmchat_server.config import VmChatSettings


@pytest.fixture
def test_settings():
    """Create settings for testing.

    Returns:
        VmChatSettings: Settings instance configured for testing.
    """
    return VmChatSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.2:latest",
        llm_timeout_seconds=5.0,
        max_tool_round_trips=3,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
