"""Screen modes driven by the UI loop."""

from .base import RESERVED_LINES_COUNT, Mode, ModeContext, ModeStatus, UnexpectedResponseError
from .diff import DiffMode, DiffRefresh
from .log import LogMode, LogRefresh
from .revision_details import RevisionDetailsMode, RevisionDetailsRefresh

__all__ = [
    "RESERVED_LINES_COUNT",
    "DiffMode",
    "DiffRefresh",
    "LogMode",
    "LogRefresh",
    "Mode",
    "ModeContext",
    "ModeStatus",
    "RevisionDetailsMode",
    "RevisionDetailsRefresh",
    "UnexpectedResponseError",
]
