"""Line-oriented parser turning git unified-diff text into markup.

Parsing is split into a pure classifier (line -> event), a pure transition
function (state, event -> state) and an effect function that appends to the
``FilesDiff`` document based on the state just entered. The document is then
serialized into the private markup read by :mod:`lazyvcs.diff.markup`.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from .markup import (
    DIFF_FORMAT_FILE_HEADER_CONTENT,
    DIFF_FORMAT_FILE_HEADER_LINE,
    DIFF_FORMAT_LINE_HEADER,
)

FILE_START_MARKER = "diff --git"
FILE_NAME_MARKER = " b/"
OLD_FILE_MARKER = "---"
NEW_FILE_MARKER = "+++"
HUNK_MARKER = "@@ "
HUNK_CONTEXT_MARKER = " @@ "
DELETED_MARKER = "deleted"


class FileMode(enum.Enum):
    Modified = "Modified"
    Deleted = "Deleted"


@dataclass
class LineDiff:
    """One hunk: new-file start line (0 when unknown) and its body text."""

    line_number: int
    text: str = ""


@dataclass
class FileDiff:
    filename: str
    mode: FileMode
    lines: list[LineDiff] = field(default_factory=list)


@dataclass
class FilesDiff:
    """Append-only diff document; mutations only touch the last file/hunk."""

    files: list[FileDiff] = field(default_factory=list)

    def new_file(self, filename: str, mode: FileMode) -> None:
        self.files.append(FileDiff(filename=filename, mode=mode))

    def set_file_mode(self, mode: FileMode) -> None:
        self.files[-1].mode = mode

    def new_line(self, line_number: int) -> None:
        self.files[-1].lines.append(LineDiff(line_number=line_number))

    def add_text(self, text: str) -> None:
        self.files[-1].lines[-1].text += text

    def output(self) -> str:
        """Serialize into sentinel-delimited markup."""
        out: list[str] = []
        for file_diff in self.files:
            out.append(f"{DIFF_FORMAT_FILE_HEADER_LINE}\n")
            out.append(f"{DIFF_FORMAT_FILE_HEADER_CONTENT}{file_diff.mode.value}: {file_diff.filename}\n")
            out.append(f"{DIFF_FORMAT_FILE_HEADER_LINE}\n")
            for line_diff in file_diff.lines:
                out.append(
                    f"{DIFF_FORMAT_LINE_HEADER}@--- {file_diff.filename}:Line {line_diff.line_number} ---@\n"
                )
                out.append(line_diff.text)
        return "".join(out)


# Parse states.


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class FileHeader:
    filename: str
    mode: FileMode


@dataclass(frozen=True)
class FileModeChange:
    mode: FileMode


@dataclass(frozen=True)
class FileContent:
    pass


@dataclass(frozen=True)
class FileEnd:
    pass


@dataclass(frozen=True)
class LineHeader:
    line_number: int


@dataclass(frozen=True)
class LineContent:
    pass


ParseState = Start | FileHeader | FileModeChange | FileContent | FileEnd | LineHeader | LineContent


# Parse events.


@dataclass(frozen=True)
class FileDiffStart:
    filename: str
    mode: FileMode = FileMode.Modified


@dataclass(frozen=True)
class FileDiffMode:
    mode: FileMode


@dataclass(frozen=True)
class FileDiffContent:
    pass


@dataclass(frozen=True)
class FileDiffEnd:
    pass


@dataclass(frozen=True)
class LineDiffStart:
    line_number: int


@dataclass(frozen=True)
class LineDiffContent:
    pass


ParseEvent = FileDiffStart | FileDiffMode | FileDiffContent | FileDiffEnd | LineDiffStart | LineDiffContent


class DiffParseError(ValueError):
    """Raised when a line arrives in a state the diff grammar does not allow."""

    def __init__(
        self,
        message: str,
        *,
        state: ParseState | None = None,
        event: ParseEvent | None = None,
        line_number: int | None = None,
    ) -> None:
        self.state = state
        self.event = event
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (diff line {line_number})"
        super().__init__(message)


def parse_hunk_start_line(line: str) -> int:
    """Return the new-file start line of a hunk marker.

    ``@@ -1,5 +10,6 @@`` gives ``10``. A single-line range such as
    ``@@ -1 +7 @@`` carries no comma and gives ``0``.
    """
    pos = line.find(" +")
    if pos < 0:
        raise DiffParseError(f"hunk marker without new-file range: {line!r}")
    new_range = line[pos + 2 :].split(" ", 1)[0]
    if "," not in new_range:
        return 0
    start_text = new_range.split(",", 1)[0]
    try:
        return int(start_text)
    except ValueError as exc:
        raise DiffParseError(f"invalid hunk start line {start_text!r} in {line!r}") from exc


def classify_line(state: ParseState, line: str) -> ParseEvent:
    """Map one raw diff line to a parse event."""
    if line.startswith(FILE_START_MARKER):
        # diff --git a/dir/name.c b/dir/name.c
        pos = line.find(FILE_NAME_MARKER)
        if pos < 0:
            raise DiffParseError(f"file marker without target name: {line!r}")
        return FileDiffStart(line[pos + len(FILE_NAME_MARKER) :])
    if line.startswith(OLD_FILE_MARKER):
        return FileDiffContent()
    if line.startswith(NEW_FILE_MARKER):
        return FileDiffEnd()
    if line.startswith(HUNK_MARKER):
        return LineDiffStart(parse_hunk_start_line(line))

    if isinstance(state, FileHeader):
        if line.startswith(DELETED_MARKER):
            return FileDiffMode(FileMode.Deleted)
        return FileDiffContent()
    if isinstance(state, FileContent):
        return FileDiffContent()
    return LineDiffContent()


def transition(state: ParseState, event: ParseEvent) -> ParseState:
    """Return the next parse state, raising ``DiffParseError`` on invalid input."""
    if isinstance(state, Start):
        if isinstance(event, FileDiffStart):
            return FileHeader(event.filename, event.mode)
    elif isinstance(state, FileHeader):
        if isinstance(event, FileDiffMode):
            return FileModeChange(event.mode)
        return FileContent()
    elif isinstance(state, FileModeChange):
        return FileContent()
    elif isinstance(state, FileContent):
        if isinstance(event, FileDiffEnd):
            return FileEnd()
        return FileContent()
    elif isinstance(state, FileEnd):
        if isinstance(event, LineDiffStart):
            return LineHeader(event.line_number)
    elif isinstance(state, LineHeader):
        if isinstance(event, LineDiffContent):
            return LineContent()
    elif isinstance(state, LineContent):
        if isinstance(event, LineDiffContent):
            return LineContent()
        if isinstance(event, FileDiffStart):
            return FileHeader(event.filename, event.mode)
        if isinstance(event, LineDiffStart):
            return LineHeader(event.line_number)

    raise DiffParseError(
        f"unexpected {type(event).__name__} in state {type(state).__name__}",
        state=state,
        event=event,
    )


def apply_output(state: ParseState, line: str, files_diff: FilesDiff) -> None:
    """Append to ``files_diff`` according to the state just entered."""
    if isinstance(state, FileHeader):
        files_diff.new_file(state.filename, state.mode)
    elif isinstance(state, FileModeChange):
        files_diff.set_file_mode(state.mode)
    elif isinstance(state, LineHeader):
        files_diff.new_line(state.line_number)
        # text after "@@ -a,b +c,d @@ " is the enclosing-scope context
        pos = line.find(HUNK_CONTEXT_MARKER)
        if pos >= 0:
            files_diff.add_text(line[pos + len(HUNK_CONTEXT_MARKER) :] + "\n")
    elif isinstance(state, LineContent):
        files_diff.add_text(line + "\n")


def _iter_lines(text: str) -> Iterator[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def parse_files_diff(text: str) -> FilesDiff:
    """Parse raw diff text into a ``FilesDiff`` document."""
    files_diff = FilesDiff()
    state: ParseState = Start()
    for index, line in enumerate(_iter_lines(text), start=1):
        try:
            state = transition(state, classify_line(state, line))
        except DiffParseError as exc:
            raise DiffParseError(
                str(exc),
                state=exc.state if exc.state is not None else state,
                event=exc.event,
                line_number=index,
            ) from exc
        apply_output(state, line, files_diff)
    return files_diff


def format_files_diff(text: str) -> str:
    """Parse raw diff text and return renderer markup."""
    return parse_files_diff(text).output()


__all__ = [
    "DiffParseError",
    "FileDiff",
    "FileMode",
    "FilesDiff",
    "LineDiff",
    "ParseEvent",
    "ParseState",
    "apply_output",
    "classify_line",
    "format_files_diff",
    "parse_files_diff",
    "parse_hunk_start_line",
    "transition",
]
