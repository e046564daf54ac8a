"""Text filter narrowing a list of entries to the ones matching a query."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class Filterable(Protocol):
    def filter_text(self) -> str: ...


def matches_query(query_terms: list[str], text: str) -> bool:
    """Case-insensitive match requiring every whitespace-separated term."""
    folded = text.casefold()
    return all(term in folded for term in query_terms)


class Filter:
    """Query editor plus the indices of entries that pass it.

    Matching keeps entry order, so ``visible_indices`` is always ascending.
    """

    def __init__(self) -> None:
        self.query = ""
        self._has_focus = False
        self._visible_indices: list[int] = []

    def has_focus(self) -> bool:
        return self._has_focus

    def enter(self) -> None:
        self._has_focus = True

    def is_active(self) -> bool:
        return self._has_focus or bool(self.query)

    def clear(self) -> None:
        self.query = ""
        self._has_focus = False

    def on_key(self, key: str) -> None:
        """Edit the query while focused."""
        if not self._has_focus:
            return
        if key == "ESC":
            self.clear()
        elif key == "ENTER":
            self._has_focus = False
        elif key == "BACKSPACE":
            self.query = self.query[:-1]
        elif key == "CTRL_U":
            self.query = ""
        elif len(key) == 1 and key.isprintable():
            self.query += key

    def filter(self, entries: Iterable[Filterable]) -> None:
        terms = self.query.casefold().split()
        if not terms:
            self._visible_indices = [index for index, _ in enumerate(entries)]
            return
        self._visible_indices = [
            index for index, entry in enumerate(entries) if matches_query(terms, entry.filter_text())
        ]

    def visible_indices(self) -> list[int]:
        return self._visible_indices

    def get_visible_index(self, cursor: int) -> int | None:
        """Map a cursor row to an entry index, ``None`` when out of range."""
        if 0 <= cursor < len(self._visible_indices):
            return self._visible_indices[cursor]
        return None
