"""Tests for the output buffer, select menu and filter widgets."""

from __future__ import annotations

import unittest
from dataclasses import dataclass

from lazyvcs.widgets import Filter, Output, SelectMenu


@dataclass
class _Item:
    text: str

    def filter_text(self) -> str:
        return self.text


class OutputTests(unittest.TestCase):
    def test_set_replaces_text_and_resets_scroll(self) -> None:
        output = Output("\n".join(str(i) for i in range(50)))
        output.on_key(10, "PAGE_DOWN")
        self.assertEqual(output.scroll, 10)

        output.set("a\nb")
        self.assertEqual(output.scroll, 0)
        self.assertEqual(output.line_count(), 2)
        self.assertEqual(output.text(), "a\nb")

    def test_scroll_is_clamped_to_last_page(self) -> None:
        output = Output("\n".join(str(i) for i in range(30)))
        output.on_key(10, "END")
        self.assertEqual(output.scroll, 20)
        self.assertFalse(output.on_key(10, "DOWN"))
        self.assertEqual(output.visible_lines(10)[-1], "29")
        output.on_key(10, "HOME")
        output.on_key(10, "UP")
        self.assertEqual(output.scroll, 0)

    def test_short_text_never_scrolls(self) -> None:
        output = Output("a\nb\nc")
        self.assertFalse(output.on_key(10, "PAGE_DOWN"))
        self.assertEqual(output.scroll, 0)


class SelectMenuTests(unittest.TestCase):
    def test_cursor_moves_within_bounds_and_scroll_follows(self) -> None:
        menu = SelectMenu()
        for _ in range(7):
            menu.on_key(10, 5, "DOWN")
        self.assertEqual(menu.cursor, 7)
        self.assertEqual(menu.scroll, 3)
        menu.on_key(10, 5, "END")
        self.assertEqual(menu.cursor, 9)
        menu.on_key(10, 5, "DOWN")
        self.assertEqual(menu.cursor, 9)
        menu.on_key(10, 5, "HOME")
        self.assertEqual((menu.cursor, menu.scroll), (0, 0))

    def test_saturate_cursor_clamps_into_range(self) -> None:
        menu = SelectMenu(cursor=8, scroll=6)
        menu.saturate_cursor(3)
        self.assertEqual((menu.cursor, menu.scroll), (2, 2))
        menu.saturate_cursor(0)
        self.assertEqual((menu.cursor, menu.scroll), (0, 0))

    def test_empty_list_ignores_navigation(self) -> None:
        menu = SelectMenu()
        self.assertFalse(menu.on_key(0, 5, "DOWN"))
        self.assertEqual(menu.cursor, 0)


class FilterTests(unittest.TestCase):
    def test_without_query_everything_is_visible(self) -> None:
        text_filter = Filter()
        text_filter.filter([_Item("a"), _Item("b")])
        self.assertEqual(text_filter.visible_indices(), [0, 1])
        self.assertFalse(text_filter.is_active())

    def test_typing_narrows_case_insensitively_with_all_terms(self) -> None:
        items = [_Item("Fix parser crash"), _Item("Add parser tests"), _Item("fix docs")]
        text_filter = Filter()
        text_filter.enter()
        for key in "FIX pa":
            text_filter.on_key(key)
        text_filter.filter(items)
        self.assertEqual(text_filter.query, "FIX pa")
        self.assertEqual(text_filter.visible_indices(), [0])
        self.assertEqual(text_filter.get_visible_index(0), 0)
        self.assertIsNone(text_filter.get_visible_index(1))

    def test_enter_keeps_query_and_escape_clears_it(self) -> None:
        text_filter = Filter()
        text_filter.enter()
        text_filter.on_key("x")
        text_filter.on_key("ENTER")
        self.assertFalse(text_filter.has_focus())
        self.assertEqual(text_filter.query, "x")

        text_filter.enter()
        text_filter.on_key("BACKSPACE")
        text_filter.on_key("y")
        text_filter.on_key("ESC")
        self.assertFalse(text_filter.has_focus())
        self.assertEqual(text_filter.query, "")

    def test_keys_are_ignored_without_focus(self) -> None:
        text_filter = Filter()
        text_filter.on_key("a")
        self.assertEqual(text_filter.query, "")


if __name__ == "__main__":
    unittest.main()
