"""Private diff markup shared by the parser and the renderer.

Each structural line starts with a sentinel:

- ``@@@L`` bare border line before and after a file header
- ``@@@H`` file header content, ``<Mode>: <filename>``
- ``@@@N`` hunk header, ``@--- <filename>:Line <n> ---@``

Any other line is verbatim hunk body text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DIFF_FORMAT_FILE_HEADER_LINE = "@@@L"
DIFF_FORMAT_FILE_HEADER_CONTENT = "@@@H"
DIFF_FORMAT_LINE_HEADER = "@@@N"

_HUNK_HEADER_RE = re.compile(r"^@--- (?P<filename>.*):Line (?P<line>\d+) ---@$")


@dataclass(frozen=True)
class MarkupLine:
    """One decoded markup line."""

    kind: str
    text: str = ""
    filename: str = ""
    mode: str = ""
    line_number: int = 0


def read_markup_line(line: str) -> MarkupLine:
    if line.startswith(DIFF_FORMAT_FILE_HEADER_LINE):
        return MarkupLine(kind="file_border")
    if line.startswith(DIFF_FORMAT_FILE_HEADER_CONTENT):
        content = line[len(DIFF_FORMAT_FILE_HEADER_CONTENT) :]
        mode, _, filename = content.partition(": ")
        return MarkupLine(kind="file_header", text=content, filename=filename, mode=mode)
    if line.startswith(DIFF_FORMAT_LINE_HEADER):
        content = line[len(DIFF_FORMAT_LINE_HEADER) :]
        match = _HUNK_HEADER_RE.match(content)
        if match is None:
            return MarkupLine(kind="hunk_header", text=content)
        return MarkupLine(
            kind="hunk_header",
            text=content,
            filename=match.group("filename"),
            line_number=int(match.group("line")),
        )
    return MarkupLine(kind="body", text=line)


def read_markup(text: str) -> list[MarkupLine]:
    """Decode renderer markup into structural records, one per line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [read_markup_line(line) for line in lines]


__all__ = [
    "DIFF_FORMAT_FILE_HEADER_CONTENT",
    "DIFF_FORMAT_FILE_HEADER_LINE",
    "DIFF_FORMAT_LINE_HEADER",
    "MarkupLine",
    "read_markup",
    "read_markup_line",
]
