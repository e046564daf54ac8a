"""Runtime orchestration: events, background dispatch, rendering, and the loop.

``run_app`` is imported lazily to keep ``lazyvcs.modes`` free of import
cycles with the application module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import Application


def run_app(*args, **kwargs):
    """Lazily import the application entrypoint."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


def __getattr__(name: str):
    if name == "Application":
        from . import app as _app

        return _app.Application
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Application", "run_app"]
