"""Commit log mode: paged history list with checkout/merge/reset/sync commands."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..ansi import count_wrapped_rows, sanitize_text, truncate_chars, wrap_ansi_line
from ..backend import Backend, BackendResult, Err, LogEntry, LogPage, Ok
from ..runtime.events import ModeChangeInfo, ModeKind, ModeResponse
from ..widgets import Filter, Output, SelectMenu
from .base import Mode, ModeContext, ModeStatus

if TYPE_CHECKING:
    from ..runtime.render import Drawer

logger = logging.getLogger(__name__)

MAX_AUTHOR_CHAR_COUNT = 18


@dataclass(frozen=True)
class LogRefresh:
    """Log page (start index, entries) or the failure message."""

    result: BackendResult[LogPage]


class WaitOperation(enum.Enum):
    REFRESH = "log"
    CHECKOUT = "checkout"
    MERGE = "merge"
    FETCH = "fetch"
    PULL = "pull"
    PUSH = "push"
    RESET = "reset"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Waiting:
    operation: WaitOperation


LogState = Idle | Waiting

BackendCommand = Callable[[Backend], BackendResult[None]]


def _send_refresh(ctx: ModeContext, result: BackendResult[LogPage]) -> None:
    ctx.event_sender.send_response(ModeResponse(ModeKind.LOG, LogRefresh(result)))


def request(ctx: ModeContext, command: BackendCommand, name: str) -> None:
    """Run ``command`` in the background, then reload the first log page.

    A failed command skips the reload and reports its own error.
    """
    available_height = ctx.available_height()

    def job() -> None:
        try:
            result = command(ctx.backend)
            if isinstance(result, Ok):
                result = ctx.backend.log(0, available_height)
        except Exception as exc:
            logger.exception("log %s request failed", name)
            result = Err(str(exc) or type(exc).__name__)
        _send_refresh(ctx, result)

    ctx.dispatcher.spawn(job, name=f"log-{name}")


def request_page(ctx: ModeContext, start: int, limit: int) -> None:
    """Fetch one more page starting at ``start``; no command, no reload."""

    def job() -> None:
        try:
            result = ctx.backend.log(start, limit)
        except Exception as exc:
            logger.exception("log page request failed")
            result = Err(str(exc) or type(exc).__name__)
        _send_refresh(ctx, result)

    ctx.dispatcher.spawn(job, name="log-page")


def draw_log_entry(drawer: Drawer, entry: LogEntry, hovered: bool, full: bool) -> int:
    """Draw one commit row and return the screen rows it takes.

    Collapsed rows show the first message line cut to the remaining width.
    The expanded row prints the whole message below the summary, wrapped to
    the viewport width.
    """
    theme = drawer.theme
    width = drawer.width

    def color(value: str) -> str:
        return theme.log_hovered if hovered else value

    author = truncate_chars(entry.author, MAX_AUTHOR_CHAR_COUNT)
    total_chars = len(entry.graph) + 1 + len(entry.hash) + 1 + len(entry.date) + 1 + len(author) + 1
    if entry.refs:
        total_chars += len(entry.refs) + 3

    message_text = sanitize_text(entry.message)
    if full:
        line_count = count_wrapped_rows(message_text, width)
        message_lines = message_text.splitlines()
    else:
        line_count = 0
        first_line = message_text.splitlines()[0] if message_text else ""
        message_lines = [truncate_chars(first_line, max(0, width - total_chars))]

    refs_begin, refs_end = ("(", ") ") if entry.refs else ("", "")
    drawer.fmt(
        color(theme.log_graph),
        entry.graph,
        " ",
        color(theme.log_hash),
        entry.hash,
        " ",
        color(theme.log_date),
        entry.date,
        " ",
        color(theme.log_author),
        author,
        " ",
        color(theme.log_refs),
        refs_begin,
        sanitize_text(entry.refs),
        refs_end,
        theme.reset,
        theme.log_hovered if hovered else "",
    )

    if full:
        rows = [chunk for line in message_lines for chunk in wrap_ansi_line(line, width)]
        if rows:
            drawer.next_line()
    else:
        rows = message_lines
    for index, row in enumerate(rows):
        if index > 0:
            drawer.next_line()
        drawer.write(row)
    drawer.write(theme.reset)

    return 1 + line_count


class LogMode(Mode):
    """History list with single-flight backend commands."""

    kind = ModeKind.LOG
    response_types = (LogRefresh,)

    def __init__(self) -> None:
        self.state: LogState = Idle()
        self.entries: list[LogEntry] = []
        self.output = Output()
        self.select = SelectMenu()
        self.filter = Filter()
        self.show_full_hovered_message = False

    def _refilter(self) -> None:
        self.filter.filter(self.entries)
        self.select.saturate_cursor(len(self.filter.visible_indices()))

    def _selected_entry(self) -> LogEntry | None:
        index = self.filter.get_visible_index(self.select.cursor)
        if index is None:
            return None
        return self.entries[index]

    def on_enter(self, ctx: ModeContext, info: ModeChangeInfo) -> None:
        if isinstance(self.state, Waiting):
            return
        self.state = Waiting(WaitOperation.REFRESH)

        self.output.set("")
        self.filter.clear()
        self._refilter()
        self.show_full_hovered_message = False

        request(ctx, lambda _backend: Ok(None), "refresh")

    def on_key(self, ctx: ModeContext, key: str) -> ModeStatus:
        if self.filter.has_focus():
            self.filter.on_key(key)
            self._refilter()
            return ModeStatus(pending_input=True)

        available_height = ctx.available_height()
        self.select.on_key(len(self.filter.visible_indices()), available_height, key)

        current_index = self.filter.get_visible_index(self.select.cursor)
        if isinstance(self.state, Idle) and current_index is not None and current_index + 1 == len(self.entries):
            self.state = Waiting(WaitOperation.REFRESH)
            request_page(ctx, len(self.entries), available_height)

        if key == "ENTER":
            entry = self._selected_entry()
            if entry is not None:
                ctx.event_sender.send_mode_change(
                    ModeKind.REVISION_DETAILS,
                    ModeChangeInfo.revision_of(ModeKind.LOG, entry.hash),
                )
        elif key == "TAB":
            self.show_full_hovered_message = not self.show_full_hovered_message
        elif key == "CTRL_F":
            self.filter.enter()
            self._refilter()
        elif isinstance(self.state, Idle):
            self._on_command_key(ctx, key)

        return ModeStatus(pending_input=False)

    def _on_command_key(self, ctx: ModeContext, key: str) -> None:
        entry = self._selected_entry()
        if key in {"c", "r", "m"}:
            if entry is None:
                return
            revision = entry.hash
            if key == "c":
                self.state = Waiting(WaitOperation.CHECKOUT)
                request(ctx, lambda backend: backend.checkout(revision), "checkout")
            elif key == "r":
                self.state = Waiting(WaitOperation.RESET)
                request(ctx, lambda backend: backend.reset(revision), "reset")
            else:
                self.state = Waiting(WaitOperation.MERGE)
                request(ctx, lambda backend: backend.merge(revision), "merge")
        elif key == "R":
            self.state = Waiting(WaitOperation.RESET)
            request(ctx, lambda backend: backend.reset(""), "reset-upstream")
        elif key == "f":
            self.state = Waiting(WaitOperation.FETCH)
            request(ctx, Backend.fetch, "fetch")
        elif key == "p":
            self.state = Waiting(WaitOperation.PULL)
            request(ctx, Backend.pull, "pull")
        elif key == "P":
            self.state = Waiting(WaitOperation.PUSH)
            request(ctx, Backend.push, "push")
        elif key == "g":
            self.state = Waiting(WaitOperation.PUSH)
            request(ctx, Backend.push_to_alternate_remote, "push-alternate")

    def on_response(self, ctx: ModeContext, response: ModeResponse) -> None:
        payload = self.unwrap_response(response)
        assert isinstance(payload, LogRefresh)
        self.output.set("")

        if isinstance(self.state, Waiting):
            self.state = Idle()

        result = payload.result
        if isinstance(result, Ok):
            start_index, new_entries = result.value
            del self.entries[start_index:]
            self.entries.extend(new_entries)
        else:
            self.entries.clear()
            self.output.set(result.message)

        self._refilter()

    def is_waiting_response(self) -> bool:
        return isinstance(self.state, Waiting)

    def header(self) -> tuple[str, str, str]:
        name = self.state.operation.value if isinstance(self.state, Waiting) else WaitOperation.REFRESH.value
        left_help = "[c]checkout [enter]details [f]fetch [p]pull [P]push [g]push alt [m]merge [r]reset [R]reset to upstream"
        right_help = "[tab]full message [arrows]move [ctrl+f]filter"
        return (name, left_help, right_help)

    def captures_text_input(self) -> bool:
        return self.filter.has_focus()

    def draw(self, drawer: Drawer) -> None:
        drawer.filter_prompt(self.filter)
        if self.output.text():
            drawer.error(self.output.text())
            return
        visible = [self.entries[index] for index in self.filter.visible_indices()]
        drawer.select_menu(self.select, self.show_full_hovered_message, visible, draw_log_entry)
