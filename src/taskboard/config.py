"""Load optional engine configuration from ``taskboard.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .constants import CONFIG_FILE, DEFAULT_COLUMNS, DEFAULT_EVENT_HISTORY, DEFAULT_LOG_LEVEL
from .io_utils import _load_data_with_error

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def load_engine_config(path: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        path: Either the config file itself or a directory containing
            ``taskboard.yaml``.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = path.resolve()
    if path.is_dir():
        path = path / CONFIG_FILE
    data, err = _load_data_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def get_default_columns(config: dict[str, Any]) -> tuple[str, ...]:
    """Extract the starter column titles for new boards.

    Args:
        config: Engine configuration dictionary.

    Returns:
        The configured titles, or the built-in ``To Do / In Progress / Done``
        when unset or not a list of non-empty strings.
    """
    raw = _get_nested(config, "board", "default_columns")
    if raw is None:
        raw = config.get("default_columns")
    if isinstance(raw, list) and raw and all(isinstance(t, str) and t.strip() for t in raw):
        return tuple(t.strip() for t in raw)
    return DEFAULT_COLUMNS


def get_event_history(config: dict[str, Any]) -> int:
    raw = config.get("event_history")
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        return DEFAULT_EVENT_HISTORY
    return raw


def get_log_level(config: dict[str, Any]) -> str:
    raw = _get_nested(config, "logging", "level")
    if raw is None:
        raw = config.get("log_level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return raw.upper()
    return DEFAULT_LOG_LEVEL
