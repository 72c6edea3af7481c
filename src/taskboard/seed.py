"""Demo content for a fresh workspace."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from .engine.model import Board, Priority
from .engine.store import HierarchyStore
from .utils import _now

SAMPLE_BOARD_TITLE = "Sample Project Board"
SAMPLE_BOARD_DESCRIPTION = "A sample board to demonstrate the task management features"

# (title, description, priority, due in days, assignee id), one per starter column
_SAMPLE_TASKS = (
    ("Design landing page", "Create wireframes and mockups for the new landing page", Priority.HIGH, 3, "2"),
    ("Set up development environment", "Configure development tools and dependencies", Priority.MEDIUM, 5, "3"),
    ("Write project documentation", "Document the project setup and usage instructions", Priority.LOW, 7, "4"),
)


def seed_sample_board(store: HierarchyStore, owner_id: Optional[str] = None) -> Board:
    """Create the sample board and drop one demo task into each of its first columns."""
    board = store.create_board(SAMPLE_BOARD_TITLE, SAMPLE_BOARD_DESCRIPTION, owner_id=owner_id)
    now = _now()
    for column, (title, description, priority, days, assignee) in zip(store.columns_of(board.id), _SAMPLE_TASKS):
        store.create_task(
            column.id,
            title,
            description,
            priority=priority,
            due_date=now + timedelta(days=days),
            assigned_to=assignee,
            created_by=owner_id,
        )
    return store.get_board(board.id)
