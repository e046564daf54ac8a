"""Frame composition for the terminal UI.

Modes draw into a ``Drawer`` row by row; the loop then wraps the rows with a
header and a status line and writes the whole frame in one ``os.write``.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

from ..ansi import clip_ansi_line, display_width, sanitize_text
from ..diff.markup import read_markup_line
from ..ui_theme import DEFAULT_THEME, UITheme

if TYPE_CHECKING:
    from ..widgets import Filter, Output, SelectMenu

T = TypeVar("T")

SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")


class Drawer:
    """Row buffer for one frame body of ``viewport_size`` (columns, rows)."""

    def __init__(self, viewport_size: tuple[int, int], theme: UITheme = DEFAULT_THEME) -> None:
        self.viewport_size = viewport_size
        self.theme = theme
        self.rows: list[str] = []
        self._current: list[str] = []

    @property
    def width(self) -> int:
        return max(1, self.viewport_size[0])

    @property
    def height(self) -> int:
        return max(0, self.viewport_size[1])

    def rows_left(self) -> int:
        return max(0, self.height - len(self.rows))

    def write(self, text: str) -> None:
        self._current.append(text)

    def fmt(self, *parts: str) -> None:
        self._current.extend(parts)

    def next_line(self) -> None:
        self.rows.append("".join(self._current))
        self._current = []

    def finish(self) -> list[str]:
        """Close the pending row and return body rows clipped to the viewport."""
        if self._current:
            self.next_line()
        out: list[str] = []
        for row in self.rows[: self.height]:
            clipped = clip_ansi_line(row, self.width)
            if "\033" in clipped:
                clipped += self.theme.reset
            out.append(clipped)
        return out

    def output(self, output: Output) -> None:
        for line in output.visible_lines(self.rows_left()):
            self.write(sanitize_text(line))
            self.next_line()

    def error(self, message: str) -> None:
        for line in message.splitlines() or [""]:
            self.fmt(self.theme.error, sanitize_text(line), self.theme.reset)
            self.next_line()

    def diff_format(self, output: Output) -> None:
        """Draw renderer markup produced by the diff parser."""
        theme = self.theme
        for line in output.visible_lines(self.rows_left()):
            markup = read_markup_line(line)
            if markup.kind == "file_border":
                self.fmt(theme.diff_file_border, "─" * self.width, theme.reset)
            elif markup.kind == "file_header":
                self.fmt(theme.diff_file_header, sanitize_text(f"{markup.mode}: {markup.filename}"), theme.reset)
            elif markup.kind == "hunk_header":
                self.fmt(theme.diff_hunk_header, sanitize_text(markup.text), theme.reset)
            elif markup.text.startswith("+"):
                self.fmt(theme.diff_added, sanitize_text(markup.text), theme.reset)
            elif markup.text.startswith("-"):
                self.fmt(theme.diff_removed, sanitize_text(markup.text), theme.reset)
            else:
                self.write(sanitize_text(markup.text))
            self.next_line()

    def filter_prompt(self, text_filter: Filter) -> int:
        """Draw the filter prompt when active; returns rows used."""
        if not text_filter.is_active():
            return 0
        theme = self.theme
        if text_filter.query:
            cursor = "_" if text_filter.has_focus() else ""
            self.fmt(theme.filter_query, "filter: ", sanitize_text(text_filter.query), cursor, theme.reset)
        else:
            self.fmt(theme.filter_hint, "filter: type to filter commits", theme.reset)
        self.next_line()
        return 1

    def select_menu(
        self,
        select: SelectMenu,
        show_full_hovered: bool,
        entries: Sequence[T],
        draw_entry: Callable[[Drawer, T, bool, bool], int],
    ) -> None:
        """Draw ``entries`` starting at the menu scroll offset.

        ``draw_entry`` returns how many screen rows the entry took, which
        drives where the next entry starts.
        """
        rows_left = self.height - len(self.rows)
        index = select.scroll
        while index < len(entries) and rows_left > 0:
            hovered = index == select.cursor
            used = draw_entry(self, entries[index], hovered, hovered and show_full_hovered)
            self.next_line()
            rows_left -= max(1, used)
            index += 1


def build_bar(left_text: str, right_text: str, width: int) -> str:
    """Left and right text on one row, right text flush to the edge."""
    usable = max(1, width)
    right_width = display_width(right_text)
    if usable <= right_width:
        return clip_ansi_line(right_text, usable)
    left = clip_ansi_line(left_text, max(0, usable - right_width - 1))
    gap = " " * max(0, usable - display_width(left) - right_width)
    return f"{left}{gap}{right_text}"


def compose_frame(
    header: tuple[str, str, str],
    body_rows: list[str],
    status: str,
    viewport_size: tuple[int, int],
    theme: UITheme = DEFAULT_THEME,
) -> str:
    """Build the full-screen ANSI payload: header, body, status."""
    width, height = viewport_size
    title, left_help, right_help = header
    body_height = max(0, height - 2)

    out: list[str] = ["\033[H"]
    header_left = f"{theme.header_title}{title}{theme.reset} {theme.header_help}{left_help}{theme.reset}"
    header_right = f"{theme.header_help}{right_help}{theme.reset}"
    out.append(build_bar(header_left, header_right, width))
    out.append(f"{theme.reset}\033[K\r\n")
    for row in range(body_height):
        if row < len(body_rows):
            out.append(body_rows[row])
        out.append("\033[K\r\n")
    out.append(theme.reverse)
    out.append(build_bar(status, "q quit", width))
    out.append(f"{theme.reset}\033[K")
    return "".join(out)


def status_text(mode_title: str, waiting: bool, spinner_frame: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Status bar text; the busy form is coloured and ends back in reverse video."""
    if not waiting:
        return f" {mode_title}"
    frame = SPINNER_FRAMES[spinner_frame % len(SPINNER_FRAMES)]
    return f"{theme.status_busy} {frame} {mode_title}: waiting for backend...{theme.reset}{theme.reverse}"


def write_frame(payload: str) -> None:
    os.write(sys.stdout.fileno(), payload.encode("utf-8", errors="replace"))
