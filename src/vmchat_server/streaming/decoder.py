"""Incremental decoding of the event stream back into StreamEvents."""

import codecs

from vmchat_server.streaming.events import (
    DONE_SENTINEL,
    ERROR_PREFIX,
    ERROR_SUFFIX,
    StreamEvent,
)


def decode_payload(payload: str) -> StreamEvent:
    """Classify a frame payload as done, error or delta."""
    if payload == DONE_SENTINEL:
        return StreamEvent.done()
    if payload.startswith(ERROR_PREFIX) and payload.endswith(ERROR_SUFFIX):
        return StreamEvent.error(payload[len(ERROR_PREFIX) : -len(ERROR_SUFFIX)])
    return StreamEvent.delta(payload)


class FrameDecoder:
    """Reassemble frames from arbitrarily split chunks of the response body.

    Bytes are decoded incrementally, so a UTF-8 sequence split between two
    reads is kept intact. Incomplete lines and frames stay buffered until the
    rest arrives. Comment lines (keep-alive pings) and fields other than
    ``data`` are ignored; ``\\r\\n`` line endings are accepted.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._data_lines: list[str] = []

    @property
    def pending(self) -> bool:
        """True if part of a frame has been received but not completed."""
        return bool(self._buffer or self._data_lines)

    def feed(self, data: bytes) -> list[StreamEvent]:
        """Consume a chunk and return the events it completes, in order."""
        self._buffer += self._decoder.decode(data)

        events: list[StreamEvent] = []
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            event = self._process_line(line.removesuffix("\r"))
            if event is not None:
                events.append(event)
        return events

    def _process_line(self, line: str) -> StreamEvent | None:
        if not line:
            # Blank line dispatches the frame
            if not self._data_lines:
                return None
            payload = "\n".join(self._data_lines)
            self._data_lines = []
            return decode_payload(payload)

        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if field == "data":
            self._data_lines.append(value.removeprefix(" "))
        return None
