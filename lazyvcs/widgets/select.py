"""Cursor and scroll bookkeeping for a vertical list of entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SelectMenu:
    """Cursor over ``entry_count`` rows with a scroll window.

    The menu never owns entries; callers pass the current visible count on
    every call so the list may grow or shrink between keys.
    """

    cursor: int = 0
    scroll: int = 0

    def on_key(self, entry_count: int, available_height: int, key: str) -> bool:
        """Move the cursor for navigation keys; returns whether it moved."""
        if entry_count <= 0:
            self.cursor = 0
            self.scroll = 0
            return False
        page = max(1, available_height)
        previous = self.cursor
        if key in {"UP", "k"}:
            self.cursor -= 1
        elif key in {"DOWN", "j"}:
            self.cursor += 1
        elif key == "PAGE_UP":
            self.cursor -= page
        elif key == "PAGE_DOWN":
            self.cursor += page
        elif key == "HOME":
            self.cursor = 0
        elif key == "END":
            self.cursor = entry_count - 1
        else:
            return False
        self.cursor = max(0, min(self.cursor, entry_count - 1))
        self.follow_cursor(available_height)
        return self.cursor != previous

    def follow_cursor(self, available_height: int) -> None:
        """Scroll just enough to keep the cursor row inside the window."""
        rows = max(1, available_height)
        if self.cursor < self.scroll:
            self.scroll = self.cursor
        elif self.cursor >= self.scroll + rows:
            self.scroll = self.cursor - rows + 1

    def saturate_cursor(self, entry_count: int) -> None:
        """Clamp cursor and scroll after the entry count changed."""
        if entry_count <= 0:
            self.cursor = 0
            self.scroll = 0
            return
        self.cursor = max(0, min(self.cursor, entry_count - 1))
        self.scroll = max(0, min(self.scroll, self.cursor))
