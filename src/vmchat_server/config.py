"""Configuration module for vmchat-server using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VmChatSettings(BaseSettings):
    """Main configuration settings for vmchat-server.

    All settings can be overridden via environment variables with the VMCHAT_ prefix.
    For example, VMCHAT_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.2:latest"

    # Conversation loop
    llm_timeout_seconds: float = 120.0
    max_tool_round_trips: int = 8
    system_prompt: str | None = None

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="VMCHAT_")
