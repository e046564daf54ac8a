"""Backend-facing value types: log entries and call results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class LogEntry:
    """One commit row as produced by the backend."""

    graph: str
    hash: str
    date: str
    author: str
    refs: str
    message: str

    def filter_text(self) -> str:
        """Text matched by the log filter."""
        return " ".join((self.hash, self.date, self.author, self.refs, self.message))


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    message: str


BackendResult = Union[Ok[T], Err]

LogPage = tuple[int, list[LogEntry]]


class Backend(ABC):
    """Version-control operations used by the modes.

    Every call returns ``Ok``/``Err`` instead of raising. Implementations must
    tolerate concurrent calls from worker threads; mutating calls are kept
    one-at-a-time by the callers (each mode is single-flight), not here.
    """

    @abstractmethod
    def log(self, start: int, limit: int) -> BackendResult[LogPage]: ...

    @abstractmethod
    def checkout(self, revision: str) -> BackendResult[None]: ...

    @abstractmethod
    def merge(self, revision: str) -> BackendResult[None]: ...

    @abstractmethod
    def reset(self, revision: str) -> BackendResult[None]:
        """Hard reset to ``revision``; an empty revision resets to upstream."""

    @abstractmethod
    def fetch(self) -> BackendResult[None]: ...

    @abstractmethod
    def pull(self) -> BackendResult[None]: ...

    @abstractmethod
    def push(self) -> BackendResult[None]: ...

    @abstractmethod
    def push_to_alternate_remote(self) -> BackendResult[None]: ...

    @abstractmethod
    def show(self, revision: str) -> BackendResult[str]:
        """Commit description (header, message, changed files)."""

    @abstractmethod
    def diff(self, revision: str) -> BackendResult[str]:
        """Raw unified diff of ``revision`` against its first parent."""
