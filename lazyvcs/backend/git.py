"""Git command-line backend.

Each operation shells out to ``git -C <root>`` and converts the process
outcome into ``Ok``/``Err``. The backend holds no mutable state, so worker
threads may call it concurrently.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from .types import Backend, BackendResult, Err, LogEntry, LogPage, Ok

logger = logging.getLogger(__name__)

FIELD_SEP = "\x1f"
RECORD_END = "\x1e"
LOG_FORMAT = f"{FIELD_SEP}%h{FIELD_SEP}%ad{FIELD_SEP}%an{FIELD_SEP}%D{FIELD_SEP}%B{RECORD_END}"
DEFAULT_TIMEOUT_SECONDS = 30.0

GitRunner = Callable[[Sequence[str], float], subprocess.CompletedProcess[str]]


def run_git_process(args: Sequence[str], timeout_seconds: float) -> subprocess.CompletedProcess[str]:
    """Run ``git`` without a tty; prompts would block the raw-mode UI."""
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    return subprocess.run(
        ["git", *args],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
        timeout=timeout_seconds,
        env=env,
    )


def parse_log_output(output: str) -> list[LogEntry]:
    """Parse ``git log --graph`` output produced with ``LOG_FORMAT``.

    A commit row starts with the graph glyphs followed by ``FIELD_SEP``.
    Continuation lines of a multi-line message carry a graph prefix of the
    same width; pure graph lines between commits are skipped.
    """
    entries: list[LogEntry] = []
    fields: list[str] | None = None
    prefix_width = 0
    message_lines: list[str] = []

    def finish() -> None:
        assert fields is not None
        graph, short_hash, date, author, refs = fields
        entries.append(
            LogEntry(
                graph=graph,
                hash=short_hash,
                date=date,
                author=author,
                refs=refs,
                message="\n".join(message_lines).strip("\n"),
            )
        )

    for line in output.split("\n"):
        if fields is None:
            if FIELD_SEP not in line:
                continue
            parts = line.split(FIELD_SEP, 5)
            if len(parts) < 6:
                continue
            prefix_width = len(parts[0])
            fields = [parts[0].rstrip(), *parts[1:5]]
            first_line = parts[5]
            message_lines = []
        else:
            first_line = line[prefix_width:]

        if RECORD_END in first_line:
            message_lines.append(first_line.split(RECORD_END, 1)[0])
            finish()
            fields = None
        else:
            message_lines.append(first_line)

    if fields is not None:
        finish()
    return entries


class GitBackend(Backend):
    """``Backend`` implementation over the ``git`` executable."""

    def __init__(
        self,
        root: Path,
        *,
        alternate_remote: str = "origin",
        alternate_push_refspec: str = "refs/for/master",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        runner: GitRunner = run_git_process,
    ) -> None:
        self.root = root
        self.alternate_remote = alternate_remote
        self.alternate_push_refspec = alternate_push_refspec
        self.timeout_seconds = timeout_seconds
        self._runner = runner

    def _run(self, *args: str) -> BackendResult[str]:
        full_args = ["-C", str(self.root), *args]
        logger.debug("git %s", " ".join(args))
        try:
            proc = self._runner(full_args, self.timeout_seconds)
        except subprocess.TimeoutExpired:
            logger.warning("git %s timed out after %.0fs", args[0], self.timeout_seconds)
            return Err(f"git {args[0]} timed out after {self.timeout_seconds:.0f}s")
        except OSError as exc:
            logger.warning("git %s could not run: %s", args[0], exc)
            return Err(f"could not run git: {exc}")
        if proc.returncode != 0:
            message = (proc.stderr or proc.stdout or "").strip() or f"git {args[0]} failed ({proc.returncode})"
            logger.warning("git %s failed: %s", args[0], message)
            return Err(message)
        return Ok(proc.stdout)

    def _run_unit(self, *args: str) -> BackendResult[None]:
        result = self._run(*args)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def log(self, start: int, limit: int) -> BackendResult[LogPage]:
        result = self._run(
            "log",
            "--all",
            "--graph",
            "--no-color",
            "--date=short",
            f"--format={LOG_FORMAT}",
            f"--skip={start}",
            f"--max-count={max(1, limit)}",
        )
        if isinstance(result, Err):
            return result
        return Ok((start, parse_log_output(result.value)))

    def checkout(self, revision: str) -> BackendResult[None]:
        return self._run_unit("checkout", revision)

    def merge(self, revision: str) -> BackendResult[None]:
        return self._run_unit("merge", "--no-edit", revision)

    def reset(self, revision: str) -> BackendResult[None]:
        return self._run_unit("reset", "--hard", revision or "@{upstream}")

    def fetch(self) -> BackendResult[None]:
        return self._run_unit("fetch", "--all")

    def pull(self) -> BackendResult[None]:
        return self._run_unit("pull")

    def push(self) -> BackendResult[None]:
        return self._run_unit("push")

    def push_to_alternate_remote(self) -> BackendResult[None]:
        return self._run_unit("push", self.alternate_remote, f"HEAD:{self.alternate_push_refspec}")

    def show(self, revision: str) -> BackendResult[str]:
        return self._run("show", "--no-color", "--stat", "--format=fuller", revision)

    def diff(self, revision: str) -> BackendResult[str]:
        result = self._run(
            "show",
            "--no-color",
            "--no-ext-diff",
            "--format=",
            "-m",
            "--first-parent",
            revision,
        )
        if isinstance(result, Err):
            return result
        return Ok(result.value.lstrip("\n"))


def resolve_repo_root(path: Path, timeout_seconds: float = 2.0) -> Path | None:
    """Return the work-tree root containing ``path`` or ``None``."""
    try:
        proc = run_git_process(["-C", str(path), "rev-parse", "--show-toplevel"], timeout_seconds)
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    root = proc.stdout.strip()
    return Path(root).resolve() if root else None
