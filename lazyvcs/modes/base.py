"""Shared contract for screen modes.

A mode is a small state machine driven by the UI thread: it is entered,
receives keys, and receives tagged backend responses. Backend calls run on
worker threads started through ``ModeContext.dispatcher`` and come back as
``ModeResponse`` events, never by touching mode fields directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..backend import Backend
from ..runtime.dispatch import RequestDispatcher
from ..runtime.events import EventSender, ModeChangeInfo, ModeKind, ModeResponse

if TYPE_CHECKING:
    from ..runtime.render import Drawer

# header row + status row
RESERVED_LINES_COUNT = 2


@dataclass(frozen=True)
class ModeContext:
    """Capabilities handed to modes and captured by their background jobs."""

    backend: Backend
    event_sender: EventSender
    dispatcher: RequestDispatcher
    viewport_size: tuple[int, int] = (80, 24)

    def available_height(self) -> int:
        return max(0, self.viewport_size[1] - RESERVED_LINES_COUNT)


@dataclass(frozen=True)
class ModeStatus:
    """``pending_input`` asks the loop to read more keys before redrawing."""

    pending_input: bool = False


class UnexpectedResponseError(TypeError):
    """A response reached a mode that does not own its variant."""


class Mode:
    """Base class for modes; subclasses set ``kind`` and ``response_types``."""

    kind: ModeKind
    response_types: tuple[type, ...] = ()

    def on_enter(self, ctx: ModeContext, info: ModeChangeInfo) -> None:
        raise NotImplementedError

    def on_key(self, ctx: ModeContext, key: str) -> ModeStatus:
        raise NotImplementedError

    def on_response(self, ctx: ModeContext, response: ModeResponse) -> None:
        raise NotImplementedError

    def is_waiting_response(self) -> bool:
        raise NotImplementedError

    def header(self) -> tuple[str, str, str]:
        return (self.kind.value, "", "")

    def draw(self, drawer: Drawer) -> None:
        raise NotImplementedError

    def back_target(self) -> ModeKind | None:
        """Mode to return to on ``LEFT``, if any."""
        return None

    def captures_text_input(self) -> bool:
        """Whether printable keys are being typed into a prompt."""
        return False

    def accepts(self, response: ModeResponse) -> bool:
        return response.kind is self.kind and isinstance(response.payload, self.response_types)

    def unwrap_response(self, response: ModeResponse) -> object:
        """Return the payload, failing fast on a foreign variant."""
        if not self.accepts(response):
            raise UnexpectedResponseError(
                f"{type(self).__name__} cannot handle {response.kind.value} "
                f"response {type(response.payload).__name__}"
            )
        return response.payload
