"""Scrollable text buffer shown by a mode."""

from __future__ import annotations

SCROLL_KEYS_UP = {"UP", "k"}
SCROLL_KEYS_DOWN = {"DOWN", "j"}


class Output:
    """Text plus a vertical scroll offset.

    ``set`` replaces the whole text and rewinds to the top; key handling only
    moves the offset, clamped so the last page stays filled.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._lines = text.splitlines()
        self.scroll = 0

    def set(self, text: str) -> None:
        self._text = text
        self._lines = text.splitlines()
        self.scroll = 0

    def text(self) -> str:
        return self._text

    def lines(self) -> list[str]:
        return self._lines

    def line_count(self) -> int:
        return len(self._lines)

    def max_scroll(self, available_height: int) -> int:
        return max(0, len(self._lines) - max(1, available_height))

    def visible_lines(self, available_height: int) -> list[str]:
        return self._lines[self.scroll : self.scroll + max(0, available_height)]

    def on_key(self, available_height: int, key: str) -> bool:
        """Scroll for navigation keys; returns whether the offset changed."""
        page = max(1, available_height)
        previous = self.scroll
        if key in SCROLL_KEYS_UP:
            self.scroll -= 1
        elif key in SCROLL_KEYS_DOWN:
            self.scroll += 1
        elif key in {"PAGE_UP", "CTRL_B"}:
            self.scroll -= page
        elif key in {"PAGE_DOWN", "CTRL_D", " "}:
            self.scroll += page
        elif key in {"HOME", "g"}:
            self.scroll = 0
        elif key in {"END", "G"}:
            self.scroll = self.max_scroll(available_height)
        self.scroll = max(0, min(self.scroll, self.max_scroll(available_height)))
        return self.scroll != previous
