"""Tool declaration, schema conversion, and execution layer.

This package declares the fixed set of functions the model may call,
converts them to Ollama-compatible schemas, and executes them during chat.
"""

from vmchat_server.tools.registry import (
    ToolDescriptor,
    ToolInvocationRequest,
    ToolInvocationResult,
    ToolParameter,
    ToolRegistry,
)
from vmchat_server.tools.vm_tools import build_vm_tool_registry

__all__ = [
    "ToolDescriptor",
    "ToolInvocationRequest",
    "ToolInvocationResult",
    "ToolParameter",
    "ToolRegistry",
    "build_vm_tool_registry",
]
