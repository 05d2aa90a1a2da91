"""Custom exceptions for vmchat-server."""


class VmChatError(Exception):
    """Base exception for vmchat-server."""

    pass


class ModelCapabilityError(VmChatError):
    """The language model failed or timed out during a completion."""

    pass


class ToolError(VmChatError):
    """Tool execution errors."""

    pass


class ToolExecutionError(ToolError):
    """A tool raised or returned something unusable."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"Tool '{tool_name}' failed: {message}")
        self.tool_name = tool_name


class UnknownToolError(ToolError):
    """The model asked for a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name


class ToolLoopLimitExceeded(VmChatError):
    """The model kept requesting tools past the round-trip cap."""

    def __init__(self, limit: int):
        super().__init__(f"tool loop limit exceeded ({limit} round-trips)")
        self.limit = limit


class ChatTransportError(VmChatError):
    """Client-side failure talking to the server or reading its event stream."""

    pass


class ChatStreamError(VmChatError):
    """The server reported an error frame on the event stream."""

    pass
