"""Shared defaults for the board engine."""

from __future__ import annotations

CONFIG_FILE = "taskboard.yaml"

DEFAULT_COLUMNS: tuple[str, ...] = ("To Do", "In Progress", "Done")
DEFAULT_EVENT_HISTORY = 200
DEFAULT_LOG_LEVEL = "INFO"

BOARD_ID_PREFIX = "board-"
COLUMN_ID_PREFIX = "col-"
TASK_ID_PREFIX = "task-"
