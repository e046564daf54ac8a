"""Unified-diff parsing and the renderer markup it produces."""

from .markup import MarkupLine, read_markup
from .parser import DiffParseError, FileMode, FilesDiff, format_files_diff, parse_files_diff

__all__ = [
    "DiffParseError",
    "FileMode",
    "FilesDiff",
    "MarkupLine",
    "format_files_diff",
    "parse_files_diff",
    "read_markup",
]
