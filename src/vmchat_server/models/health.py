"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of vmchat-server.
        ollama_connected: Whether the Ollama server answered, None if no client exists.
        ollama_host: The Ollama host URL, None if no client exists.
        model: The model used for chat completions.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of vmchat-server")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    model: str | None = Field(
        default=None,
        description="Model used for chat completions",
    )
