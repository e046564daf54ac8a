"""Application wiring: modes, event routing, and the interactive loop.

The UI thread owns every mode. Worker threads only talk back through the
``EventSender`` queue, which this module drains once per loop iteration.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..backend import Backend
from ..modes import RESERVED_LINES_COUNT, DiffMode, LogMode, Mode, ModeContext, RevisionDetailsMode
from ..ui_theme import DEFAULT_THEME, UITheme
from .dispatch import RequestDispatcher
from .events import EventSender, ModeChange, ModeChangeInfo, ModeKind, ModeResponse
from .input import read_key
from .render import Drawer, compose_frame, status_text, write_frame
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_timeout_ms: int = 120
    spinner_frame_seconds: float = 0.12


class Application:
    """Routes keys and tagged responses to the active mode.

    A response is delivered only when its tag matches the active mode;
    anything else is dropped on the floor. Mode switches requested while the
    active mode waits for the backend are held back (latest request wins) and
    applied once it is idle again.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        event_sender: EventSender | None = None,
        dispatcher: RequestDispatcher | None = None,
        viewport_size: tuple[int, int] = (80, 24),
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.event_sender = event_sender if event_sender is not None else EventSender()
        self.dispatcher = dispatcher if dispatcher is not None else RequestDispatcher()
        self.ctx = ModeContext(
            backend=backend,
            event_sender=self.event_sender,
            dispatcher=self.dispatcher,
            viewport_size=viewport_size,
        )
        self.theme = theme
        self.modes: dict[ModeKind, Mode] = {
            ModeKind.LOG: LogMode(),
            ModeKind.REVISION_DETAILS: RevisionDetailsMode(),
            ModeKind.DIFF: DiffMode(),
        }
        self.active = ModeKind.LOG
        self.pending_mode_change: ModeChange | None = None
        self.dirty = True
        self.should_quit = False
        self.spinner_frame = 0

    @property
    def active_mode(self) -> Mode:
        return self.modes[self.active]

    def start(self) -> None:
        self.active_mode.on_enter(self.ctx, ModeChangeInfo(from_mode=ModeKind.LOG))
        self.dirty = True

    def set_viewport_size(self, viewport_size: tuple[int, int]) -> None:
        if viewport_size == self.ctx.viewport_size:
            return
        self.ctx = replace(self.ctx, viewport_size=viewport_size)
        self.dirty = True

    def deliver_response(self, response: ModeResponse) -> bool:
        """Hand ``response`` to the active mode if it is addressed to it."""
        if response.kind is not self.active:
            logger.debug(
                "dropping %s response %s while %s is active",
                response.kind.value,
                type(response.payload).__name__,
                self.active.value,
            )
            return False
        self.active_mode.on_response(self.ctx, response)
        self.dirty = True
        return True

    def request_mode_change(self, change: ModeChange) -> None:
        self.pending_mode_change = change
        self.apply_pending_mode_change()

    def apply_pending_mode_change(self) -> bool:
        change = self.pending_mode_change
        if change is None or self.active_mode.is_waiting_response():
            return False
        self.pending_mode_change = None
        logger.debug("mode change %s -> %s", self.active.value, change.kind.value)
        self.active = change.kind
        self.active_mode.on_enter(self.ctx, change.info)
        self.dirty = True
        return True

    def process_events(self) -> None:
        """Drain worker responses and mode-change requests."""
        for event in self.event_sender.drain():
            if isinstance(event, ModeResponse):
                self.deliver_response(event)
            else:
                self.pending_mode_change = event
        self.apply_pending_mode_change()

    def handle_key(self, key: str) -> bool:
        """Dispatch one key; returns whether more input should be read first."""
        mode = self.active_mode
        if key == "CTRL_C":
            self.should_quit = True
            return False
        if not mode.captures_text_input():
            if key == "q":
                self.should_quit = True
                return False
            if key == "LEFT":
                target = mode.back_target()
                if target is not None:
                    self.request_mode_change(ModeChange(target, ModeChangeInfo(from_mode=self.active)))
                return False
        status = mode.on_key(self.ctx, key)
        self.dirty = True
        return status.pending_input

    def tick_spinner(self, now: float, frame_seconds: float) -> None:
        if not self.active_mode.is_waiting_response():
            return
        frame = int(now / frame_seconds)
        if frame != self.spinner_frame:
            self.spinner_frame = frame
            self.dirty = True

    def render(self) -> str:
        """Compose the current frame as an ANSI payload."""
        width, height = self.ctx.viewport_size
        mode = self.active_mode
        drawer = Drawer((width, max(0, height - RESERVED_LINES_COUNT)), self.theme)
        mode.draw(drawer)
        header = mode.header()
        status = status_text(header[0], mode.is_waiting_response(), self.spinner_frame, self.theme)
        return compose_frame(header, drawer.finish(), status, (width, height), self.theme)

    def run(
        self,
        terminal: TerminalController,
        stdin_fd: int,
        timing: AppTiming = AppTiming(),
        write: Callable[[str], None] = write_frame,
    ) -> None:
        """Run until a quit key; the terminal is restored on exit."""
        pending_input = False
        with terminal.raw_mode():
            self.set_viewport_size(terminal.viewport_size())
            self.start()
            while not self.should_quit:
                self.set_viewport_size(terminal.viewport_size())
                self.process_events()
                self.tick_spinner(time.monotonic(), timing.spinner_frame_seconds)
                if self.dirty and not pending_input:
                    write(self.render())
                    self.dirty = False

                key = read_key(stdin_fd, timeout_ms=0 if pending_input else timing.poll_timeout_ms)
                if key == "":
                    pending_input = False
                    continue
                pending_input = self.handle_key(key)


def run_app(backend: Backend, theme: UITheme = DEFAULT_THEME) -> None:
    """Start the interactive client on the current terminal."""
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazyvcs needs an interactive terminal.")
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    app = Application(backend, theme=theme)
    logger.info("starting with %s", type(backend).__name__)
    app.run(terminal, stdin_fd)
    logger.info("exiting")
