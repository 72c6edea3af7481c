"""Ordering and view-derivation engine for the board / column / task tree.

The :class:`HierarchyStore` applies atomic, order-preserving mutations and
publishes immutable :class:`Snapshot` values; :func:`project_tasks` derives
filtered/sorted display sequences without touching canonical order.
"""

from .errors import BoardError, IndexOutOfRangeError, NotFoundError, ValidationError
from .events import ChangeEvent, EventKind
from .model import Board, Column, Priority, Snapshot, Task
from .schemas import FilterSpec, SortField, SortOrder, SortSpec
from .store import HierarchyStore
from .view import ViewState, filter_tasks, project_column, project_tasks, sort_tasks

__all__ = [
    "Board",
    "BoardError",
    "ChangeEvent",
    "Column",
    "EventKind",
    "FilterSpec",
    "HierarchyStore",
    "IndexOutOfRangeError",
    "NotFoundError",
    "Priority",
    "Snapshot",
    "SortField",
    "SortOrder",
    "SortSpec",
    "Task",
    "ValidationError",
    "ViewState",
    "filter_tasks",
    "project_column",
    "project_tasks",
    "sort_tasks",
]
