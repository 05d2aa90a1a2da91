"""Stream event type exchanged between orchestrator, encoder and consumer."""

from dataclasses import dataclass
from typing import Literal

# Payload of the final frame. Payloads are classified by content alone, so
# model output is assumed never to equal it, nor to read "[Error: ...]"
# (such a delta would be decoded as a terminal error).
DONE_SENTINEL = "[DONE]"

ERROR_PREFIX = "[Error: "
ERROR_SUFFIX = "]"


@dataclass(frozen=True)
class StreamEvent:
    """A delta of assistant text, a terminal error, or the completion marker.

    Attributes:
        kind: "delta", "error" or "done"
        text: Delta text or error message; empty for "done"
    """

    kind: Literal["delta", "error", "done"]
    text: str = ""

    @classmethod
    def delta(cls, text: str) -> "StreamEvent":
        return cls(kind="delta", text=text)

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(kind="error", text=message)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(kind="done")

    @property
    def is_terminal(self) -> bool:
        return self.kind != "delta"
