"""Event-stream wire format shared by the server and the client.

The server encodes StreamEvents as Server-Sent-Events frames; the client
decodes the same frames incrementally from the response body.
"""

from vmchat_server.streaming.decoder import FrameDecoder, decode_payload
from vmchat_server.streaming.encoder import (
    FRAME_SEPARATOR,
    encode_frame,
    encode_payload,
    to_sse,
)
from vmchat_server.streaming.events import DONE_SENTINEL, StreamEvent

__all__ = [
    "DONE_SENTINEL",
    "FRAME_SEPARATOR",
    "FrameDecoder",
    "StreamEvent",
    "decode_payload",
    "encode_frame",
    "encode_payload",
    "to_sse",
]
