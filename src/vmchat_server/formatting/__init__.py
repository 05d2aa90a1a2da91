"""Display formatting of assistant replies."""

from vmchat_server.formatting.normalize import FIELD_LABELS, normalize

__all__ = ["FIELD_LABELS", "normalize"]
