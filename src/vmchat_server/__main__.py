"""CLI entry point for vmchat-server.

This module provides the command-line interface for starting the server.
It can be invoked as `vmchat-server` (via the script entry point) or
`python -m vmchat_server`.
"""

import argparse
import sys

import uvicorn

from vmchat_server import __version__, create_app
from vmchat_server.config import VmChatSettings


def main() -> None:
    """Main entry point for the vmchat-server CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="vmchat-server",
        description="Tool-calling LLM chat over a virtual machine inventory",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"vmchat-server {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via VMCHAT_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via VMCHAT_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via VMCHAT_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model used for chat (default: llama3.2:latest, can be set via VMCHAT_MODEL)",
    )

    parser.add_argument(
        "--max-tool-round-trips",
        type=int,
        default=None,
        help="Tool round-trips allowed per message (default: 8, can be set via VMCHAT_MAX_TOOL_ROUND_TRIPS)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via VMCHAT_LOG_LEVEL)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.model is not None:
        settings_kwargs["model"] = args.model
    if args.max_tool_round_trips is not None:
        settings_kwargs["max_tool_round_trips"] = args.max_tool_round_trips
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = VmChatSettings(**settings_kwargs)

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
