"""Diff mode: shows one revision's changes as parsed, styled markup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..backend import BackendResult, Err, Ok
from ..diff import DiffParseError, format_files_diff
from ..runtime.events import ModeChangeInfo, ModeKind, ModeResponse
from ..widgets import Output
from .base import Mode, ModeContext, ModeStatus

if TYPE_CHECKING:
    from ..runtime.render import Drawer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffRefresh:
    """Raw unified diff text for the requested revision."""

    result: BackendResult[str]


class DiffMode(Mode):
    """Idle/Waiting state machine around a single refresh request."""

    kind = ModeKind.DIFF
    response_types = (DiffRefresh,)

    def __init__(self) -> None:
        self.waiting = False
        self.output = Output()
        self.from_mode = ModeKind.REVISION_DETAILS
        self.revision = ""
        self.is_markup = False

    def on_enter(self, ctx: ModeContext, info: ModeChangeInfo) -> None:
        if self.waiting:
            return
        self.waiting = True
        self.from_mode = info.from_mode
        if info.revision:
            self.revision = info.revision
        self.output.set("")
        self.is_markup = False

        revision = self.revision

        def job() -> None:
            try:
                result = ctx.backend.diff(revision)
            except Exception as exc:
                logger.exception("diff request failed")
                result = Err(str(exc) or type(exc).__name__)
            ctx.event_sender.send_response(ModeResponse(ModeKind.DIFF, DiffRefresh(result)))

        ctx.dispatcher.spawn(job, name="diff")

    def on_key(self, ctx: ModeContext, key: str) -> ModeStatus:
        if not self.waiting and self.output.line_count() > 1:
            self.output.on_key(ctx.available_height(), key)
        return ModeStatus(pending_input=False)

    def on_response(self, ctx: ModeContext, response: ModeResponse) -> None:
        payload = self.unwrap_response(response)
        assert isinstance(payload, DiffRefresh)
        if self.waiting:
            self.waiting = False

        result = payload.result
        if not isinstance(result, Ok):
            self.is_markup = False
            self.output.set(result.message)
            return
        try:
            markup = format_files_diff(result.value)
        except DiffParseError as exc:
            logger.exception("could not parse diff of %s", self.revision or "working tree")
            self.is_markup = False
            self.output.set(f"could not parse diff: {exc}")
            return
        self.is_markup = True
        self.output.set(markup)

    def is_waiting_response(self) -> bool:
        return self.waiting

    def header(self) -> tuple[str, str, str]:
        return ("diff", self.revision, "[Left]back [arrows]move")

    def back_target(self) -> ModeKind | None:
        return self.from_mode

    def draw(self, drawer: Drawer) -> None:
        if self.is_markup:
            drawer.diff_format(self.output)
        else:
            drawer.output(self.output)
