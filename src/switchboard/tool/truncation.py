"""Bounding of tool output before it is shown to a model or a user."""

from __future__ import annotations

import os
import re
import tempfile

MAX_LINES = 2000
MAX_BYTES = 50 * 1024

# Oversized outputs are written here in full.
OUTPUT_DIR = "~/.switchboard/tool-output"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

_KEPT_CONTROLS = frozenset("\t\n\r")


def truncate_output(
    text: str,
    max_lines: int = MAX_LINES,
    max_bytes: int = MAX_BYTES,
    save_full: bool = True,
) -> str:
    """Keep the tail of ``text`` within ``max_lines`` and ``max_bytes``.

    Output that fits is returned unchanged. Otherwise the result opens
    with a notice of what was dropped and, when ``save_full`` is set, a
    second line with the path of the full output.
    """
    if not text:
        return text

    total_lines = text.count("\n") + 1
    total_bytes = len(_encode(text))
    if total_lines <= max_lines and total_bytes <= max_bytes:
        return text

    tail = text
    dropped = []
    if total_lines > max_lines:
        tail = "\n".join(text.split("\n")[-max_lines:])
        dropped.append(f"{total_lines - max_lines} lines skipped")

    encoded = _encode(tail)
    if len(encoded) > max_bytes:
        tail = encoded[-max_bytes:].decode("utf-8", errors="ignore")
        dropped.append(f"{total_bytes - max_bytes} bytes skipped")

    header = [
        f"[truncated: {', '.join(dropped)} of {total_lines} lines / {total_bytes} bytes]"
    ]
    if save_full:
        header.append(f"[full output: {spill(text)}]")
    return "\n".join([*header, tail])


def spill(text: str) -> str:
    """Write ``text`` to a new file under ``OUTPUT_DIR`` and return its path."""
    directory = os.path.expanduser(OUTPUT_DIR)
    os.makedirs(directory, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix="tool-", suffix=".log", dir=directory)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def sanitize_binary_output(text: str) -> str:
    """Drop control characters, keeping tabs and line breaks."""
    return "".join(ch for ch in text if _printable(ch))


def _printable(ch: str) -> bool:
    cp = ord(ch)
    if cp < 0x20 or 0x7F <= cp < 0xA0:
        return ch in _KEPT_CONTROLS
    # interlinear annotation marks
    return not 0xFFF9 <= cp <= 0xFFFB


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="replace")
