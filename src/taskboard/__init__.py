"""Provide the public `taskboard` package exports."""

from __future__ import annotations

from .bootstrap import build_store
from .engine import (
    Board,
    Column,
    FilterSpec,
    HierarchyStore,
    Priority,
    Snapshot,
    SortSpec,
    Task,
    project_tasks,
)
from .seed import seed_sample_board

__all__ = [
    "Board",
    "Column",
    "FilterSpec",
    "HierarchyStore",
    "Priority",
    "Snapshot",
    "SortSpec",
    "Task",
    "build_store",
    "project_tasks",
    "seed_sample_board",
]
