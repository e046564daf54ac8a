"""Version-control backend contract and the git implementation."""

from .git import GitBackend, parse_log_output, resolve_repo_root
from .types import Backend, BackendResult, Err, LogEntry, LogPage, Ok

__all__ = [
    "Backend",
    "BackendResult",
    "Err",
    "GitBackend",
    "LogEntry",
    "LogPage",
    "Ok",
    "parse_log_output",
    "resolve_repo_root",
]
