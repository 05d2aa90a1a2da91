"""Client-side buffer for an assistant message under construction."""

import logging
from dataclasses import dataclass
from typing import Callable

from vmchat_server.formatting import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamUpdate:
    """Notification sent to subscribers after each appended delta.

    Attributes:
        delta: The text just appended
        raw: Everything received so far
        display: normalize(raw)
    """

    delta: str
    raw: str
    display: str


UpdateCallback = Callable[[StreamUpdate], None]


class MessageBuffer:
    """Accumulates streamed deltas and keeps a formatted view of them.

    Deltas are appended and announced one by one in arrival order. The
    formatter always runs over the whole raw text, never over a single
    delta, so labels and timestamps split across deltas are repaired once
    the rest arrives.
    """

    def __init__(self, formatter: Callable[[str], str] = normalize) -> None:
        self._formatter = formatter
        self._subscribers: list[UpdateCallback] = []
        self.raw = ""
        self.display = ""
        self.completed = False
        self.error: str | None = None

    @property
    def finished(self) -> bool:
        return self.completed or self.error is not None

    def subscribe(self, callback: UpdateCallback) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def append(self, delta: str) -> StreamUpdate:
        """Append a delta and notify subscribers.

        Raises:
            RuntimeError: If the message has already completed or failed
        """
        if self.finished:
            raise RuntimeError("Cannot append to a finished message")

        self.raw += delta
        self.display = self._formatter(self.raw)
        update = StreamUpdate(delta=delta, raw=self.raw, display=self.display)
        for callback in list(self._subscribers):
            callback(update)
        return update

    def complete(self) -> None:
        self.completed = True
        logger.debug(f"Message complete: {len(self.raw)} characters")

    def fail(self, message: str) -> None:
        self.error = message
        logger.debug(f"Message failed: {message}")
