"""Board / column / task model and the immutable tree snapshot.

Entities are frozen dataclasses linked by id rather than by embedded
references: a :class:`Board` lists its ``column_ids``, a :class:`Column`
lists its ``task_ids`` and points back at ``board_id``, a :class:`Task`
points back at ``column_id``.  A :class:`Snapshot` holds the three lookup
tables plus the ordered board ids, so equality and serialization stay
straightforward and every mutation can produce a new snapshot that shares the
untouched entities with the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..utils import _now, _parse_iso, _to_iso
from .errors import NotFoundError, ValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Priority(str, Enum):
    """Task priority; ordered ``low < medium < high``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


def _coerce_priority(raw: Any, default: Priority = Priority.MEDIUM) -> Priority:
    if raw is None:
        return default
    if isinstance(raw, Priority):
        return raw
    try:
        return Priority(str(raw))
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Task:
    """A work item positioned inside one column."""

    id: str
    title: str
    column_id: str
    order: int = 0
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "due_date": _to_iso(self.due_date),
            "assigned_to": self.assigned_to,
            "created_by": self.created_by,
            "created_at": _to_iso(self.created_at),
            "updated_at": _to_iso(self.updated_at),
            "column_id": self.column_id,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from a plain dict, coercing enums and dates gracefully."""
        created_at = _parse_iso(data.get("created_at")) or _now()
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            column_id=str(data.get("column_id", "")),
            order=int(data.get("order", 0) or 0),
            description=str(data.get("description", "") or ""),
            priority=_coerce_priority(data.get("priority")),
            due_date=_parse_iso(data.get("due_date")),
            assigned_to=data.get("assigned_to"),
            created_by=data.get("created_by"),
            created_at=created_at,
            updated_at=_parse_iso(data.get("updated_at")) or created_at,
        )


@dataclass(frozen=True)
class Column:
    """An ordered list of tasks belonging to one board."""

    id: str
    title: str
    board_id: str
    order: int = 0
    task_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Board:
    """Top-level container owning an ordered list of columns."""

    id: str
    title: str
    description: str = ""
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    column_ids: tuple[str, ...] = ()


def _entity_id(raw: dict[str, Any], kind: str, seen: set[str]) -> str:
    """Return the payload id, rejecting a missing or already loaded one."""
    if raw.get("id") in (None, ""):
        raise ValidationError(f"{kind} payload is missing an id")
    entity_id = str(raw["id"])
    if entity_id in seen:
        raise ValidationError(f"duplicate {kind} id {entity_id!r}")
    seen.add(entity_id)
    return entity_id


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Snapshot:
    """The whole board tree at one point in time.

    The lookup tables are plain dicts for cheap copying; treat them as
    read-only.  The store never mutates a snapshot after handing it out.
    """

    boards: dict[str, Board] = field(default_factory=dict)
    columns: dict[str, Column] = field(default_factory=dict)
    tasks: dict[str, Task] = field(default_factory=dict)
    board_ids: tuple[str, ...] = ()

    # -- lookups ------------------------------------------------------------

    def get_board(self, board_id: str) -> Board:
        board = self.boards.get(board_id)
        if board is None:
            raise NotFoundError("board", board_id)
        return board

    def get_column(self, column_id: str) -> Column:
        column = self.columns.get(column_id)
        if column is None:
            raise NotFoundError("column", column_id)
        return column

    def get_task(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    def list_boards(self) -> list[Board]:
        return [self.boards[bid] for bid in self.board_ids]

    def columns_of(self, board_id: str) -> list[Column]:
        """Return the board's columns in canonical order."""
        board = self.get_board(board_id)
        return [self.columns[cid] for cid in board.column_ids]

    def tasks_of(self, column_id: str) -> list[Task]:
        """Return the column's tasks in canonical order."""
        column = self.get_column(column_id)
        return [self.tasks[tid] for tid in column.task_ids]

    def board_of_task(self, task_id: str) -> Board:
        task = self.get_task(task_id)
        return self.get_board(self.get_column(task.column_id).board_id)

    def task_count(self, board_id: str) -> int:
        return sum(len(col.task_ids) for col in self.columns_of(board_id))

    # -- serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a nested plain dict (boards -> columns -> tasks)."""
        boards: list[dict[str, Any]] = []
        for board in self.list_boards():
            columns: list[dict[str, Any]] = []
            for column in self.columns_of(board.id):
                columns.append({
                    "id": column.id,
                    "title": column.title,
                    "board_id": column.board_id,
                    "order": column.order,
                    "tasks": [t.to_dict() for t in self.tasks_of(column.id)],
                })
            boards.append({
                "id": board.id,
                "title": board.title,
                "description": board.description,
                "created_by": board.created_by,
                "created_at": _to_iso(board.created_at),
                "columns": columns,
            })
        return {"version": 1, "boards": boards}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        """Rebuild a snapshot from :meth:`to_dict` output.

        Parent ids and order values are taken from the nesting and list
        position, so a payload with stale or gapped ``order`` fields loads
        densely ordered.  A missing or repeated board, column or task id
        raises :class:`ValidationError`.
        """
        boards: dict[str, Board] = {}
        columns: dict[str, Column] = {}
        tasks: dict[str, Task] = {}
        board_ids: list[str] = []
        seen_boards: set[str] = set()
        seen_columns: set[str] = set()
        seen_tasks: set[str] = set()

        for raw_board in data.get("boards", []) or []:
            board_id = _entity_id(raw_board, "board", seen_boards)
            column_ids: list[str] = []
            for col_index, raw_col in enumerate(raw_board.get("columns", []) or []):
                column_id = _entity_id(raw_col, "column", seen_columns)
                task_ids: list[str] = []
                for task_index, raw_task in enumerate(raw_col.get("tasks", []) or []):
                    payload = dict(raw_task)
                    payload["id"] = _entity_id(payload, "task", seen_tasks)
                    payload["column_id"] = column_id
                    payload["order"] = task_index
                    task = Task.from_dict(payload)
                    tasks[task.id] = task
                    task_ids.append(task.id)
                columns[column_id] = Column(
                    id=column_id,
                    title=str(raw_col.get("title", "")),
                    board_id=board_id,
                    order=col_index,
                    task_ids=tuple(task_ids),
                )
                column_ids.append(column_id)
            boards[board_id] = Board(
                id=board_id,
                title=str(raw_board.get("title", "")),
                description=str(raw_board.get("description", "") or ""),
                created_by=raw_board.get("created_by"),
                created_at=_parse_iso(raw_board.get("created_at")) or _now(),
                column_ids=tuple(column_ids),
            )
            board_ids.append(board_id)

        return cls(boards=boards, columns=columns, tasks=tasks, board_ids=tuple(board_ids))
