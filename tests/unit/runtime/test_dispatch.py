"""Background dispatcher tests using real worker threads."""

from __future__ import annotations

import threading
import time
import unittest

from lazyvcs.runtime.dispatch import RequestDispatcher
from lazyvcs.runtime.events import EventSender, ModeChangeInfo, ModeKind, ModeResponse


def _drain_until(sender: EventSender, count: int, timeout: float = 2.0) -> list:
    events: list = []
    deadline = time.monotonic() + timeout
    while len(events) < count and time.monotonic() < deadline:
        events.extend(sender.drain())
        time.sleep(0.005)
    return events


class RequestDispatcherTests(unittest.TestCase):
    def test_jobs_report_through_sender(self) -> None:
        sender = EventSender()
        dispatcher = RequestDispatcher()
        names: list[str] = []

        def job() -> None:
            names.append(threading.current_thread().name)
            sender.send_response(ModeResponse(ModeKind.LOG, "done"))

        dispatcher.spawn(job, name="log-refresh")
        events = _drain_until(sender, 1)

        self.assertEqual(events, [ModeResponse(ModeKind.LOG, "done")])
        self.assertEqual(names, ["lazyvcs-log-refresh"])
        self.assertEqual(dispatcher.spawn_count, 1)

    def test_jobs_run_concurrently(self) -> None:
        sender = EventSender()
        dispatcher = RequestDispatcher()
        release = threading.Event()

        def blocked() -> None:
            release.wait(2.0)
            sender.send_response(ModeResponse(ModeKind.LOG, "slow"))

        def quick() -> None:
            sender.send_response(ModeResponse(ModeKind.DIFF, "fast"))

        dispatcher.spawn(blocked)
        dispatcher.spawn(quick)
        first = _drain_until(sender, 1)
        release.set()
        rest = _drain_until(sender, 1)

        self.assertEqual([event.payload for event in first], ["fast"])
        self.assertEqual([event.payload for event in rest], ["slow"])
        self.assertEqual(dispatcher.spawn_count, 2)

    def test_failing_job_is_logged(self) -> None:
        dispatcher = RequestDispatcher()

        def job() -> None:
            raise RuntimeError("boom")

        with self.assertLogs("lazyvcs.runtime.dispatch", level="ERROR") as captured:
            dispatcher.spawn(job, name="broken")
            deadline = time.monotonic() + 2.0
            while not captured.records and time.monotonic() < deadline:
                time.sleep(0.005)

        self.assertIn("broken", captured.output[0])


class EventSenderTests(unittest.TestCase):
    def test_drain_keeps_send_order(self) -> None:
        sender = EventSender()
        sender.send_response(ModeResponse(ModeKind.LOG, 1))
        sender.send_mode_change(ModeKind.DIFF, ModeChangeInfo(ModeKind.LOG, "abc"))
        sender.send_response(ModeResponse(ModeKind.LOG, 2))

        events = sender.drain()
        self.assertEqual(len(events), 3)
        self.assertEqual(events[1].kind, ModeKind.DIFF)
        self.assertEqual(events[1].info.revision, "abc")
        self.assertEqual(sender.drain(), [])


if __name__ == "__main__":
    unittest.main()
