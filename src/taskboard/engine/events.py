"""Change events describing committed mutations.

The store records one :class:`ChangeEvent` per effective mutation and hands
them to commit listeners together with the new snapshot.  They carry enough
position data (entity id, source/target container, from/to index) for a
replication or presence channel to forward the change without diffing
snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..utils import _now, _to_iso


class EventKind(str, Enum):
    BOARD_CREATED = "board_created"
    BOARD_UPDATED = "board_updated"
    BOARD_DELETED = "board_deleted"
    COLUMN_CREATED = "column_created"
    COLUMN_UPDATED = "column_updated"
    COLUMN_DELETED = "column_deleted"
    COLUMNS_REORDERED = "columns_reordered"
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    TASK_MOVED = "task_moved"
    TASKS_REORDERED = "tasks_reordered"


@dataclass(frozen=True)
class ChangeEvent:
    kind: EventKind
    entity_id: str
    board_id: str
    column_id: Optional[str] = None
    from_column_id: Optional[str] = None
    to_column_id: Optional[str] = None
    from_index: Optional[int] = None
    to_index: Optional[int] = None
    fields: tuple[str, ...] = ()
    actor: Optional[str] = None
    ts: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for forwarding; ``None`` details are omitted."""
        details: dict[str, Any] = {
            "column_id": self.column_id,
            "from_column_id": self.from_column_id,
            "to_column_id": self.to_column_id,
            "from_index": self.from_index,
            "to_index": self.to_index,
        }
        details = {k: v for k, v in details.items() if v is not None}
        if self.fields:
            details["fields"] = list(self.fields)
        payload: dict[str, Any] = {
            "ts": _to_iso(self.ts),
            "type": self.kind.value,
            "entity_id": self.entity_id,
            "board_id": self.board_id,
            "actor": self.actor,
        }
        if details:
            payload["details"] = details
        return payload
