"""Thread-per-request execution of backend calls."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Run each job on a fresh daemon thread.

    There is no pool, no bound and no cancellation: a started job always runs
    to completion and reports through the ``EventSender`` it captured. Modes
    keep themselves single-flight; this class does not serialize anything.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._spawn_count = 0

    @property
    def spawn_count(self) -> int:
        with self._lock:
            return self._spawn_count

    def _run(self, job: Callable[[], None], name: str) -> None:
        try:
            job()
        except Exception:
            logger.exception("background job %s failed", name)

    def spawn(self, job: Callable[[], None], name: str = "request") -> None:
        with self._lock:
            self._spawn_count += 1
        worker = threading.Thread(
            target=self._run,
            args=(job, name),
            name=f"lazyvcs-{name}",
            daemon=True,
        )
        worker.start()
