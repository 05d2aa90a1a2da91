"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, chat, vms).
"""

from vmchat_server.routers import chat, health, vms

__all__ = ["chat", "health", "vms"]
