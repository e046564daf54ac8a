"""Command-line front door for lazyvcs.

Parses CLI options, sets up file logging, resolves the repository, and
dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import shutil
from dataclasses import replace
from pathlib import Path

from .backend import GitBackend, resolve_repo_root
from .config import DEFAULT_LOG_PATH, load_settings, save_theme_name
from .runtime import run_app
from .ui_theme import available_theme_names, resolve_theme

LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def _positive_float(value: str) -> float:
    """argparse type for positive numbers."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def configure_logging(level: str, log_file: Path) -> None:
    """Send log records to ``log_file``; the terminal belongs to the UI."""
    handlers: list[logging.Handler]
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    except OSError:
        handlers = [logging.NullHandler()]
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Terminal client for browsing and syncing a git repository.")
    parser.add_argument("path", nargs="?", default=None, help="Path inside the repository. Defaults to cwd.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); saved for next runs.",
    )
    parser.add_argument("--remote", default=None, help="Remote used by the alternate push command.")
    parser.add_argument("--push-refspec", default=None, help="Target ref for the alternate push command.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds before a git call is abandoned.")
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=("debug", "info", "warning", "error"),
        help="Log verbosity.",
    )
    parser.add_argument("--log-file", default=None, help=f"Log file path (default: {DEFAULT_LOG_PATH}).")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the client on a repository."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, Path(args.log_file) if args.log_file else DEFAULT_LOG_PATH)

    if shutil.which("git") is None:
        raise SystemExit("git executable not found on PATH.")

    path = Path(args.path) if args.path else Path.cwd()
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    repo_root = resolve_repo_root(path if path.is_dir() else path.parent)
    if repo_root is None:
        raise SystemExit(f"Not inside a git repository: {path}")

    settings = load_settings()
    if args.remote:
        settings = replace(settings, alternate_remote=args.remote)
    if args.push_refspec:
        settings = replace(settings, alternate_push_refspec=args.push_refspec)
    if args.timeout is not None:
        settings = replace(settings, git_timeout_seconds=args.timeout)
    if args.theme:
        save_theme_name(args.theme)
        settings = replace(settings, theme=args.theme)

    backend = GitBackend(
        repo_root,
        alternate_remote=settings.alternate_remote,
        alternate_push_refspec=settings.alternate_push_refspec,
        timeout_seconds=settings.git_timeout_seconds,
    )
    run_app(backend, resolve_theme(settings.theme))


if __name__ == "__main__":
    main()
