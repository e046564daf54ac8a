"""Events flowing from worker threads and modes back to the UI loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from queue import Empty, Queue


class ModeKind(enum.Enum):
    LOG = "log"
    REVISION_DETAILS = "revision_details"
    DIFF = "diff"


@dataclass(frozen=True)
class ModeChangeInfo:
    """Why a mode was entered: where from, and for which revision."""

    from_mode: ModeKind = ModeKind.LOG
    revision: str = ""

    @classmethod
    def revision_of(cls, from_mode: ModeKind, revision: str) -> ModeChangeInfo:
        return cls(from_mode=from_mode, revision=revision)


@dataclass(frozen=True)
class ModeResponse:
    """Backend result tagged with the mode it belongs to.

    ``payload`` is one of the owning mode's response variants.
    """

    kind: ModeKind
    payload: object


@dataclass(frozen=True)
class ModeChange:
    kind: ModeKind
    info: ModeChangeInfo


Event = ModeResponse | ModeChange


class EventSender:
    """Multi-producer, single-consumer channel into the UI thread."""

    def __init__(self) -> None:
        self._queue: Queue[Event] = Queue()

    def send_response(self, response: ModeResponse) -> None:
        self._queue.put(response)

    def send_mode_change(self, kind: ModeKind, info: ModeChangeInfo) -> None:
        self._queue.put(ModeChange(kind=kind, info=info))

    def drain(self) -> list[Event]:
        """Return every queued event without blocking."""
        out: list[Event] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "Event",
    "EventSender",
    "ModeChange",
    "ModeChangeInfo",
    "ModeKind",
    "ModeResponse",
]
