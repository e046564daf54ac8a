"""Persistent JSON config helpers.

Stores the alternate push target, git timeout and UI theme. All access is
defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "lazyvcs"
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "lazyvcs.log"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME

DEFAULT_ALTERNATE_REMOTE = "origin"
DEFAULT_ALTERNATE_PUSH_REFSPEC = "refs/for/master"
DEFAULT_GIT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    alternate_remote: str = DEFAULT_ALTERNATE_REMOTE
    alternate_push_refspec: str = DEFAULT_ALTERNATE_PUSH_REFSPEC
    git_timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS
    theme: str = "default"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON, best effort."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def _string_value(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def load_settings() -> Settings:
    data = load_config()
    return Settings(
        alternate_remote=_string_value(data, "alternate_remote", DEFAULT_ALTERNATE_REMOTE),
        alternate_push_refspec=_string_value(data, "alternate_push_refspec", DEFAULT_ALTERNATE_PUSH_REFSPEC),
        git_timeout_seconds=_positive_float(data, "git_timeout_seconds", DEFAULT_GIT_TIMEOUT_SECONDS),
        theme=_string_value(data, "theme", "default"),
    )


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)
