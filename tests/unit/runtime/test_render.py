"""Frame composition tests for the drawer and the header/status bars."""

from __future__ import annotations

import unittest

from lazyvcs.ansi import ANSI_ESCAPE_RE
from lazyvcs.runtime.render import Drawer, build_bar, compose_frame, status_text
from lazyvcs.ui_theme import MONO_THEME
from lazyvcs.widgets import Filter, Output, SelectMenu


def _plain(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


class DrawerTests(unittest.TestCase):
    def test_rows_are_clipped_to_viewport(self) -> None:
        drawer = Drawer((5, 2))
        for text in ("abcdefgh", "12", "dropped"):
            drawer.write(text)
            drawer.next_line()
        self.assertEqual(drawer.finish(), ["abcde", "12"])

    def test_output_starts_at_scroll_offset(self) -> None:
        output = Output("\n".join(f"line {i}" for i in range(10)))
        output.on_key(3, "DOWN")
        drawer = Drawer((20, 3))
        drawer.output(output)
        self.assertEqual(drawer.finish(), ["line 1", "line 2", "line 3"])

    def test_control_characters_are_removed(self) -> None:
        drawer = Drawer((40, 2))
        drawer.output(Output("evil\x1b[2Jtext"))
        self.assertEqual(drawer.finish(), ["evil[2Jtext"])

    def test_diff_markup_lines_are_styled(self) -> None:
        markup = "@@@L\n@@@HDeleted: gone.txt\n@@@L\n@@@N@--- gone.txt:Line 0 ---@\n-bye\n"
        drawer = Drawer((12, 10), MONO_THEME)
        drawer.diff_format(Output(markup))
        rows = [_plain(row) for row in drawer.finish()]
        self.assertEqual(rows[0], "─" * 12)
        self.assertEqual(rows[1], "Deleted: gon")
        self.assertEqual(rows[4], "-bye")

    def test_filter_prompt_only_when_active(self) -> None:
        text_filter = Filter()
        drawer = Drawer((40, 5))
        self.assertEqual(drawer.filter_prompt(text_filter), 0)

        text_filter.enter()
        text_filter.on_key("x")
        self.assertEqual(drawer.filter_prompt(text_filter), 1)
        self.assertEqual(_plain(drawer.finish()[0]), "filter: x_")

    def test_select_menu_advances_by_rows_used(self) -> None:
        calls: list[tuple[str, bool, bool]] = []

        def draw_entry(drawer: Drawer, entry: str, hovered: bool, full: bool) -> int:
            calls.append((entry, hovered, full))
            drawer.write(entry)
            if full:
                drawer.next_line()
                drawer.write("detail")
                return 2
            return 1

        drawer = Drawer((20, 3))
        drawer.select_menu(SelectMenu(cursor=1, scroll=1), True, ["a", "b", "c", "d", "e"], draw_entry)

        self.assertEqual(calls, [("b", True, True), ("c", False, False)])
        self.assertEqual(drawer.finish(), ["b", "detail", "c"])


class BarTests(unittest.TestCase):
    def test_bar_fills_width(self) -> None:
        self.assertEqual(build_bar("left", "right", 15), "left      right")

    def test_narrow_bar_keeps_right_text(self) -> None:
        self.assertEqual(build_bar("left", "right", 4), "righ")

    def test_status_text_spinner(self) -> None:
        self.assertEqual(status_text("log", False, 3), " log")
        busy = status_text("fetch", True, 1, MONO_THEME)
        self.assertEqual(_plain(busy), " / fetch: waiting for backend...")
        self.assertTrue(busy.startswith(MONO_THEME.status_busy))
        self.assertTrue(busy.endswith(MONO_THEME.reverse))

    def test_frame_has_header_body_and_status_rows(self) -> None:
        frame = compose_frame(("log", "[c]checkout", "[tab]"), ["row"], " log", (40, 5), MONO_THEME)
        rows = [_plain(part) for part in frame.split("\r\n")]

        self.assertEqual(len(rows), 5)
        self.assertTrue(rows[0].startswith("log [c]checkout"))
        self.assertTrue(rows[0].endswith("[tab]"))
        self.assertEqual(rows[1], "row")
        self.assertEqual(rows[2], "")
        self.assertTrue(rows[4].endswith("q quit"))


if __name__ == "__main__":
    unittest.main()
