"""UI theme definitions and selection helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the drawer."""

    name: str
    reset: str
    reverse: str
    header_title: str
    header_help: str
    status_busy: str
    log_graph: str
    log_hash: str
    log_date: str
    log_author: str
    log_refs: str
    log_hovered: str
    filter_query: str
    filter_hint: str
    diff_file_border: str
    diff_file_header: str
    diff_hunk_header: str
    diff_added: str
    diff_removed: str
    error: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    header_title="\033[1;38;5;81m",
    header_help="\033[2;38;5;250m",
    status_busy="\033[1;38;5;214m",
    log_graph="\033[37m",
    log_hash="\033[33m",
    log_date="\033[34m",
    log_author="\033[32m",
    log_refs="\033[31m",
    log_hovered="\033[1;97m",
    filter_query="\033[1;38;5;81m",
    filter_hint="\033[2;38;5;250m",
    diff_file_border="\033[2;38;5;244m",
    diff_file_header="\033[1;38;5;229m",
    diff_hunk_header="\033[38;5;81m",
    diff_added="\033[32m",
    diff_removed="\033[31m",
    error="\033[38;5;203m",
)

MONO_THEME = UITheme(
    name="mono",
    reset="\033[0m",
    reverse="\033[7m",
    header_title="\033[1m",
    header_help="\033[2m",
    status_busy="\033[1m",
    log_graph="",
    log_hash="",
    log_date="",
    log_author="",
    log_refs="\033[1m",
    log_hovered="\033[1m",
    filter_query="\033[1m",
    filter_hint="\033[2m",
    diff_file_border="\033[2m",
    diff_file_header="\033[1m",
    diff_hunk_header="\033[4m",
    diff_added="\033[1m",
    diff_removed="\033[2m",
    error="\033[1m",
)

THEMES: dict[str, UITheme] = {theme.name: theme for theme in (DEFAULT_THEME, MONO_THEME)}


def available_theme_names() -> tuple[str, ...]:
    return tuple(THEMES)


def resolve_theme(name: str | None) -> UITheme:
    """Return the named theme, falling back to the default for unknown names."""
    if not name:
        return DEFAULT_THEME
    return THEMES.get(name.strip().lower(), DEFAULT_THEME)
