"""Revision details and diff mode tests."""

from __future__ import annotations

import unittest

from fakes import FakeBackend, RecordingDispatcher
from lazyvcs.backend import Err, Ok
from lazyvcs.modes import (
    DiffMode,
    DiffRefresh,
    LogRefresh,
    ModeContext,
    RevisionDetailsMode,
    RevisionDetailsRefresh,
    UnexpectedResponseError,
)
from lazyvcs.runtime.events import EventSender, ModeChange, ModeChangeInfo, ModeKind, ModeResponse
from lazyvcs.runtime.render import Drawer

DIFF_TEXT = (
    "diff --git a/app.py b/app.py\n"
    "index 1111111..2222222 100644\n"
    "--- a/app.py\n"
    "+++ b/app.py\n"
    "@@ -1,2 +1,2 @@\n"
    "-print('a')\n"
    "+print('b')\n"
)


class ModeTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = FakeBackend()
        self.backend.show_result = Ok("commit abc\nAuthor: Ann\n\n    subject\n")
        self.backend.diff_result = Ok(DIFF_TEXT)
        self.sender = EventSender()
        self.dispatcher = RecordingDispatcher()
        self.ctx = ModeContext(self.backend, self.sender, self.dispatcher, viewport_size=(80, 12))

    def answer(self, mode) -> None:
        """Run pending jobs and feed their responses back to ``mode``."""
        self.dispatcher.run_all()
        for event in self.sender.drain():
            mode.on_response(self.ctx, event)


class RevisionDetailsModeTests(ModeTestCase):
    def test_enter_shows_revision_once(self) -> None:
        mode = RevisionDetailsMode()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.LOG, "abc"))
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.LOG, "def"))
        self.assertTrue(mode.is_waiting_response())
        self.assertEqual(len(self.dispatcher.jobs), 1)

        self.answer(mode)
        self.assertEqual(self.backend.calls, [("show", "abc")])
        self.assertFalse(mode.is_waiting_response())
        self.assertIn("subject", mode.output.text())
        self.assertEqual(mode.back_target(), ModeKind.LOG)

    def test_enter_key_opens_diff_of_same_revision(self) -> None:
        mode = RevisionDetailsMode()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.LOG, "abc"))
        mode.on_key(self.ctx, "ENTER")
        self.assertEqual(self.sender.drain(), [])

        self.answer(mode)
        mode.on_key(self.ctx, "ENTER")
        self.assertEqual(
            self.sender.drain(),
            [ModeChange(ModeKind.DIFF, ModeChangeInfo(ModeKind.REVISION_DETAILS, "abc"))],
        )

    def test_returning_from_diff_keeps_revision_and_origin(self) -> None:
        mode = RevisionDetailsMode()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.LOG, "abc"))
        self.answer(mode)
        mode.on_enter(self.ctx, ModeChangeInfo(from_mode=ModeKind.DIFF))
        self.answer(mode)
        self.assertEqual(self.backend.calls, [("show", "abc"), ("show", "abc")])
        self.assertEqual(mode.back_target(), ModeKind.LOG)

    def test_error_is_shown_as_text(self) -> None:
        self.backend.show_result = Err("fatal: bad object abc")
        mode = RevisionDetailsMode()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.LOG, "abc"))
        self.answer(mode)
        self.assertEqual(mode.output.text(), "fatal: bad object abc")

    def test_foreign_variant_is_rejected(self) -> None:
        mode = RevisionDetailsMode()
        response = ModeResponse(ModeKind.REVISION_DETAILS, DiffRefresh(Ok("")))
        with self.assertRaises(UnexpectedResponseError):
            mode.on_response(self.ctx, response)


class DiffModeTests(ModeTestCase):
    def enter(self, revision: str = "abc") -> DiffMode:
        mode = DiffMode()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.REVISION_DETAILS, revision))
        return mode

    def test_enter_is_single_flight(self) -> None:
        mode = self.enter()
        mode.on_enter(self.ctx, ModeChangeInfo(ModeKind.REVISION_DETAILS, "other"))
        self.assertEqual(len(self.dispatcher.jobs), 1)

        self.dispatcher.run_all()
        self.assertEqual(self.backend.calls, [("diff", "abc")])
        self.assertEqual(
            self.sender.drain(),
            [ModeResponse(ModeKind.DIFF, DiffRefresh(Ok(DIFF_TEXT)))],
        )

    def test_response_is_formatted_as_markup(self) -> None:
        mode = self.enter()
        self.answer(mode)

        self.assertFalse(mode.is_waiting_response())
        self.assertTrue(mode.is_markup)
        self.assertTrue(mode.output.text().startswith("@@@L\n@@@HModified: app.py\n@@@L\n"))
        self.assertEqual(mode.back_target(), ModeKind.REVISION_DETAILS)
        self.assertEqual(mode.header()[:2], ("diff", "abc"))

    def test_markup_is_drawn_styled(self) -> None:
        mode = self.enter()
        self.answer(mode)
        drawer = Drawer((30, 10))
        mode.draw(drawer)
        rows = drawer.finish()

        self.assertIn("Modified: app.py", rows[1])
        self.assertIn("@--- app.py:Line 1 ---@", rows[3])
        self.assertIn("+print('b')", rows[5])
        self.assertFalse(any("@@@" in row for row in rows))

    def test_unparseable_diff_shows_error_text(self) -> None:
        self.backend.diff_result = Ok("not a diff at all\n")
        mode = self.enter()
        with self.assertLogs("lazyvcs.modes.diff", level="ERROR"):
            self.answer(mode)

        self.assertFalse(mode.is_markup)
        self.assertTrue(mode.output.text().startswith("could not parse diff:"))

    def test_backend_error_is_shown_as_text(self) -> None:
        self.backend.diff_result = Err("fatal: ambiguous argument 'abc'")
        mode = self.enter()
        self.answer(mode)
        self.assertFalse(mode.is_markup)
        self.assertEqual(mode.output.text(), "fatal: ambiguous argument 'abc'")

    def test_scrolling_only_when_idle(self) -> None:
        self.backend.diff_result = Err("\n".join(f"line {i}" for i in range(40)))
        mode = self.enter()
        mode.on_key(self.ctx, "DOWN")
        self.assertEqual(mode.output.scroll, 0)

        self.answer(mode)
        mode.on_key(self.ctx, "DOWN")
        self.assertEqual(mode.output.scroll, 1)

    def test_foreign_variant_is_rejected(self) -> None:
        mode = self.enter()
        with self.assertRaises(UnexpectedResponseError):
            mode.on_response(self.ctx, ModeResponse(ModeKind.DIFF, LogRefresh(Ok((0, [])))))
        with self.assertRaises(UnexpectedResponseError):
            mode.on_response(self.ctx, ModeResponse(ModeKind.DIFF, RevisionDetailsRefresh(Ok(""))))


if __name__ == "__main__":
    unittest.main()
