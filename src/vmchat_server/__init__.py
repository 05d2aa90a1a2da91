"""vmchat-server: chat with a tool-calling LLM about a virtual machine inventory.

This package provides a REST API and SSE streaming interface in which an
Ollama model answers questions about, and changes the power state of, an
in-memory set of VMs, plus a client library and terminal client.
"""

__version__ = "0.1.0"

from vmchat_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
