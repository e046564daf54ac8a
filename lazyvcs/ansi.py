"""ANSI-aware width measurement, clipping and wrapping.

Backend text is sanitized before styling so that escape sequences embedded
in commit messages or diffs cannot move the cursor.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
TAB_STOP = 8


def sanitize_text(text: str) -> str:
    """Drop control characters except tab and newline."""
    return _CONTROL_RE.sub("", text)


def char_display_width(ch: str, col: int) -> int:
    """Terminal columns used by ``ch`` when printed at column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def truncate_chars(text: str, max_chars: int) -> str:
    """Keep at most ``max_chars`` characters (not columns)."""
    return text[: max(0, max_chars)]


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to ``max_cols`` columns, keeping escape sequences."""
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1
    return "".join(out)


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Split a styled line into chunks of at most ``width`` columns."""
    if width <= 0 or not text:
        return [""]

    wrapped: list[str] = []
    chunk: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                chunk.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > width and chunk:
            wrapped.append("".join(chunk))
            chunk = []
            col = 0
            w = char_display_width(ch, col)
        chunk.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    wrapped.append("".join(chunk))
    return wrapped


def count_wrapped_rows(text: str, width: int) -> int:
    """Rows needed to print ``text`` line by line on a ``width``-column screen.

    Each line takes one row, plus one more every time the running column
    count passes the width.
    """
    if width <= 0:
        return len(text.splitlines())
    rows = 0
    for line in text.splitlines():
        x = 0
        for ch in line:
            if x >= width:
                x -= width
                rows += 1
            x += char_display_width(ch, x)
        rows += 1
    return rows
