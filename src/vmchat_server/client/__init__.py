"""Client side of the chat: HTTP client, stream consumer and message buffer."""

from vmchat_server.client.buffer import MessageBuffer, StreamUpdate
from vmchat_server.client.chat_client import (
    ChatClient,
    ChatConversation,
    StreamSubscription,
)
from vmchat_server.client.consumer import consume_stream

__all__ = [
    "ChatClient",
    "ChatConversation",
    "MessageBuffer",
    "StreamSubscription",
    "StreamUpdate",
    "consume_stream",
]
