"""Persistent JSON config helpers.

Supplies default tree options and the log level. All access is defensive:
malformed or missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

from .types import TreeOptions

APP_NAME = "treeclone"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "TREECLONE_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def config_path() -> Path:
    """Return the config file path, honoring ``TREECLONE_CONFIG`` when set."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = path if path is not None else config_path()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_bool(data: dict[str, object], key: str) -> bool:
    """Only explicit booleans count; anything else is ``False``."""
    value = data.get(key)
    return value if isinstance(value, bool) else False


def _load_max_depth(data: dict[str, object]) -> int | None:
    value = data.get("max_depth")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _load_timeout(data: dict[str, object]) -> float | None:
    value = data.get("ignore_timeout")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    return float(value)


def load_default_options(data: dict[str, object] | None = None) -> TreeOptions:
    """Build the option defaults that command-line flags start from."""
    if data is None:
        data = load_config()
    return TreeOptions(
        show_hidden=_load_bool(data, "show_hidden"),
        max_depth=_load_max_depth(data),
        ignore_vcs_excluded=_load_bool(data, "gitignore"),
        color=_load_bool(data, "color"),
        ignore_timeout=_load_timeout(data),
    )


def load_log_level(data: dict[str, object] | None = None) -> int:
    """Return the configured ``logging`` level, ``WARNING`` when unset/invalid."""
    if data is None:
        data = load_config()
    value = data.get("log_level")
    name = value.strip().upper() if isinstance(value, str) else DEFAULT_LOG_LEVEL
    if name not in LOG_LEVEL_NAMES:
        name = DEFAULT_LOG_LEVEL
    return int(getattr(logging, name))


__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "config_path",
    "load_config",
    "load_default_options",
    "load_log_level",
]
