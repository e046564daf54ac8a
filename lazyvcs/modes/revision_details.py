"""Revision details mode: commit header, message and file stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..backend import BackendResult, Err, Ok
from ..runtime.events import ModeChangeInfo, ModeKind, ModeResponse
from ..widgets import Output
from .base import Mode, ModeContext, ModeStatus

if TYPE_CHECKING:
    from ..runtime.render import Drawer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevisionDetailsRefresh:
    result: BackendResult[str]


class RevisionDetailsMode(Mode):
    kind = ModeKind.REVISION_DETAILS
    response_types = (RevisionDetailsRefresh,)

    def __init__(self) -> None:
        self.waiting = False
        self.output = Output()
        self.revision = ""
        self.from_mode = ModeKind.LOG

    def on_enter(self, ctx: ModeContext, info: ModeChangeInfo) -> None:
        if self.waiting:
            return
        self.waiting = True
        # coming back from the diff this mode opened keeps the original origin
        if info.from_mode is not ModeKind.DIFF:
            self.from_mode = info.from_mode
        if info.revision:
            self.revision = info.revision
        self.output.set("")

        revision = self.revision

        def job() -> None:
            try:
                result = ctx.backend.show(revision)
            except Exception as exc:
                logger.exception("revision details request failed")
                result = Err(str(exc) or type(exc).__name__)
            ctx.event_sender.send_response(ModeResponse(ModeKind.REVISION_DETAILS, RevisionDetailsRefresh(result)))

        ctx.dispatcher.spawn(job, name="revision-details")

    def on_key(self, ctx: ModeContext, key: str) -> ModeStatus:
        if self.waiting:
            return ModeStatus()
        if key == "ENTER" and self.revision:
            ctx.event_sender.send_mode_change(
                ModeKind.DIFF,
                ModeChangeInfo.revision_of(ModeKind.REVISION_DETAILS, self.revision),
            )
        elif self.output.line_count() > 1:
            self.output.on_key(ctx.available_height(), key)
        return ModeStatus()

    def on_response(self, ctx: ModeContext, response: ModeResponse) -> None:
        payload = self.unwrap_response(response)
        assert isinstance(payload, RevisionDetailsRefresh)
        self.waiting = False
        result = payload.result
        self.output.set(result.value if isinstance(result, Ok) else result.message)

    def is_waiting_response(self) -> bool:
        return self.waiting

    def header(self) -> tuple[str, str, str]:
        return ("details", f"{self.revision} [enter]diff", "[Left]back [arrows]move")

    def back_target(self) -> ModeKind | None:
        return self.from_mode

    def draw(self, drawer: Drawer) -> None:
        drawer.output(self.output)
