"""Unit tests for the FastAPI app factory and configuration."""

from fastapi import FastAPI

from vmchat_server import __version__, create_app
from vmchat_server.config import VmChatSettings


def test_create_app_returns_fastapi_instance():
    """Test that create_app returns a FastAPI instance."""
    app = create_app()
    assert isinstance(app, FastAPI)


def test_create_app_with_settings(test_settings):
    """Test that create_app accepts custom settings."""
    app = create_app(settings=test_settings)
    assert isinstance(app, FastAPI)
    assert app.state.settings is test_settings


def test_create_app_metadata():
    """Test that app has correct metadata."""
    app = create_app()
    assert app.title == "vmchat-server"
    assert app.version == "0.1.0"
    assert "virtual machine inventory" in app.description


def test_create_app_registers_routes():
    """Test that the chat, inventory and health routes are registered."""
    app = create_app()

    routes = [route.path for route in app.routes]  # type: ignore[attr-defined]
    assert "/health" in routes
    assert "/vms" in routes
    assert "/chat" in routes
    assert "/chat/stream" in routes


def test_create_app_has_cors_middleware(test_settings):
    """Test that CORS middleware is configured."""
    app = create_app(settings=test_settings)

    middleware_classes = [m.cls.__name__ for m in app.user_middleware]  # type: ignore[attr-defined]
    assert "CORSMiddleware" in middleware_classes


def test_version_constant():
    """Test that __version__ is defined and matches app version."""
    assert __version__ == "0.1.0"


def test_settings_default_values():
    """Test that settings have correct default values."""
    settings = VmChatSettings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.ollama_host == "http://localhost:11434"
    assert settings.model == "llama3.2:latest"
    assert settings.llm_timeout_seconds == 120.0
    assert settings.max_tool_round_trips == 8
    assert settings.system_prompt is None
    assert settings.cors_origins == ["*"]
    assert settings.log_level == "INFO"


def test_settings_env_prefix(monkeypatch):
    """Test that settings respect VMCHAT_ environment variable prefix."""
    monkeypatch.setenv("VMCHAT_PORT", "9000")
    monkeypatch.setenv("VMCHAT_OLLAMA_HOST", "http://custom:11434")
    monkeypatch.setenv("VMCHAT_MAX_TOOL_ROUND_TRIPS", "2")
    monkeypatch.setenv("VMCHAT_SYSTEM_PROMPT", "Answer briefly.")

    settings = VmChatSettings()

    assert settings.port == 9000
    assert settings.ollama_host == "http://custom:11434"
    assert settings.max_tool_round_trips == 2
    assert settings.system_prompt == "Answer briefly."


def test_settings_cors_origins_from_env(monkeypatch):
    """Test that list settings are parsed from JSON in the environment."""
    monkeypatch.setenv("VMCHAT_CORS_ORIGINS", '["http://localhost:4200"]')

    settings = VmChatSettings()

    assert settings.cors_origins == ["http://localhost:4200"]
