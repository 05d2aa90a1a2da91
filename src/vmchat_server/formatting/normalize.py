"""Deterministic reformatting of model output for display.

Models answer inventory questions in loosely structured Markdown that is
often damaged by tokenization: labels glued to the previous value, list
markers split from their items, timestamps broken apart. normalize() turns
that into plain text with one field per line and a ``VM N — <name>`` header
per numbered VM entry.

The function is pure and idempotent, so a client can re-run it on the whole
accumulated message after every streamed delta.
"""

import re

FIELD_LABELS: tuple[str, ...] = (
    "VM Name",
    "Operating System",
    "OS",
    "OS Version",
    "Power State",
    "CPU Cores",
    "Memory",
    "Memory (GB)",
    "Disk Size",
    "Disk Size (GB)",
    "IP Address",
    "Owner",
    "Environment",
    "Tags",
    "Last Boot",
    "Last Boot Time",
    "Last Boot (UTC)",
    "Last Boot Time (UTC)",
    "Notes",
)

# Longest first so "Memory (GB)" wins over "Memory"
_LABELS = "|".join(
    re.escape(label) for label in sorted(FIELD_LABELS, key=len, reverse=True)
)

# 1. Markdown emphasis and headings
_EMPHASIS = re.compile(r"\*\*|__")
_HEADING = re.compile(r"^[ \t]*#+[ \t]*", re.MULTILINE)

# 2. Line endings and dash separators
_BULLET = re.compile(r"^[ \t]*[-*•][ \t]+", re.MULTILINE)
_INLINE_DASH = re.compile(r"[ \t]+-[ \t]+")

# 3. Introduced lists
_LIST_INTRO = re.compile(r"(?<!\d):[ \t]*\n*[ \t]*(?=\d+\.(?!\d))")

# 4. List markers
_MARKER = re.compile(r"^[ \t]*(\d+)[ \t]*\.(?!\d)[ \t]*", re.MULTILINE)
_BARE_MARKER = re.compile(r"^(\d+)\. *\n+[ \t]*(?=\S)", re.MULTILINE)
_MARKER_SPACING = re.compile(r"\n(?=\d+\. )")

# 5. Glued labels
_GLUED_LABEL = re.compile(rf"(?<=\S)[ \t]*(?=(?:{_LABELS}):)")
_MARKER_BEFORE_LABEL = re.compile(rf"^(\d+\.)\n(?=(?:{_LABELS}):)", re.MULTILINE)
_INLINE_MARKER_BEFORE_NAME = re.compile(r"(?<=\S)[ \t]+(\d+\.)\n(?=VM Name:)")

# 6. Glue repairs
_SPLIT_VM_NAME = re.compile(r"VM[ \t]*\n[ \t]*Name:")
_HYPHEN_BEFORE_BREAK = re.compile(r"(\w)-[ \t]*\n[ \t]*(?=\w)")
_HYPHEN_AFTER_BREAK = re.compile(r"(\w)[ \t]*\n[ \t]*-(?=\w)")
_IDENTIFIER_CONTINUATION = re.compile(
    r"^([ \t]*(?:\d+\.[ \t]*)?(?:VM Name|Owner|Environment):[ \t]*\w[\w.-]*)"
    r"[ \t]*\n[ \t]*(?!\d+\.)(\w[\w.-]*)[ \t]*$",
    re.MULTILINE,
)
_BOOT_TIMESTAMP = re.compile(
    r"((?:Last Boot(?: Time)?(?: \(UTC\))?):[ \t]*)"
    r"(\d{4})-?(\d{2})-?(\d{2})[ T]?(\d{2})"
    r"[ \t]*:[ \t]*(\d{2})[ \t]*:[ \t]*(\d{2})"
)

# 7. Colon spacing; times and URLs keep their colons
_COLON = re.compile(r"(?<!\d):(?!//)[ \t]*|(?<=\d):(?!\d)[ \t]*")

# 8. VM entry headers
_NUMBERED_VM_NAME = re.compile(r"^(\d+)\.[ \t]*VM Name:[ \t]*(.*?)[ \t]*$")
_VM_HEADER = re.compile(r"^VM \d+ — ")
_FIELD_LINE = re.compile(rf"^[ \t]*(?:{_LABELS}):")
_VM_NAME_LINE = re.compile(r"^[ \t]*VM Name:")

# 9. Advisory sentence
_ADVISORY = re.compile(r"\.\s*(?=If you need\b)")

# 10. Whitespace
_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_BLANK_LINES = re.compile(r"\n{3,}")


# Later rules can expose text that earlier ones would have rewritten
_MAX_PASSES = 8


def normalize(text: str) -> str:
    """Reformat raw model output for display.

    The rules are applied until the text stops changing, so the result is a
    fixed point and normalizing it again returns it unchanged.

    Args:
        text: Raw assistant text, possibly partial

    Returns:
        str: The display text
    """
    if not text:
        return ""

    for _ in range(_MAX_PASSES):
        normalized = _apply_rules(text)
        if normalized == text:
            break
        text = normalized
    return text


def _apply_rules(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _EMPHASIS.sub("", text)

    # Splitting on " - " can bring a heading or bullet to the start of a line
    while True:
        split = _INLINE_DASH.sub("\n", _BULLET.sub("", _HEADING.sub("", text)))
        if split == text:
            break
        text = split

    text = _LIST_INTRO.sub(":\n\n", text)

    text = _MARKER.sub(r"\1. ", text)
    text = _BARE_MARKER.sub(r"\1. ", text)
    text = _MARKER_SPACING.sub("\n\n", text)

    text = _GLUED_LABEL.sub("\n", text)
    text = _MARKER_BEFORE_LABEL.sub(r"\1 ", text)
    text = _INLINE_MARKER_BEFORE_NAME.sub(r"\n\n\1 ", text)

    text = _repair_glue(text)

    text = _COLON.sub(": ", text)

    text = _format_vm_entries(text)

    text = _ADVISORY.sub(".\n\n", text)

    text = _TRAILING_SPACE.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()


def _repair_glue(text: str) -> str:
    text = _SPLIT_VM_NAME.sub("VM Name:", text)
    text = _HYPHEN_BEFORE_BREAK.sub(r"\1-", text)
    text = _HYPHEN_AFTER_BREAK.sub(r"\1-", text)

    # A value can be split more than once ("dev\nops\nteam")
    while True:
        repaired = _IDENTIFIER_CONTINUATION.sub(r"\1-\2", text)
        if repaired == text:
            break
        text = repaired

    return _BOOT_TIMESTAMP.sub(r"\1\2-\3-\4 \5:\6:\7", text)


def _format_vm_entries(text: str) -> str:
    """Turn ``N. VM Name: x`` into a header and indent its field lines."""
    lines: list[str] = []
    in_entry = False

    for line in text.split("\n"):
        match = _NUMBERED_VM_NAME.match(line)
        if match and match.group(2):
            lines.append(f"VM {match.group(1)} — {match.group(2)}")
            in_entry = True
            continue

        if _VM_HEADER.match(line):
            lines.append(line)
            in_entry = True
            continue

        if not line.strip():
            lines.append(line)
            continue

        if in_entry and _FIELD_LINE.match(line) and not _VM_NAME_LINE.match(line):
            lines.append("  " + line.strip())
            continue

        in_entry = False
        lines.append(line)

    return "\n".join(lines)
