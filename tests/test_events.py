"""Tests for change event serialization (engine/events.py)."""

from __future__ import annotations

from datetime import datetime, timezone

from taskboard.engine.events import ChangeEvent, EventKind
from taskboard.logging_utils import summarize_events

TS = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_move_event_to_dict() -> None:
    event = ChangeEvent(
        EventKind.TASK_MOVED,
        "task-1",
        "board-1",
        column_id="col-2",
        from_column_id="col-1",
        to_column_id="col-2",
        from_index=0,
        to_index=3,
        actor="u1",
        ts=TS,
    )
    assert event.to_dict() == {
        "ts": "2024-01-01T12:00:00+00:00",
        "type": "task_moved",
        "entity_id": "task-1",
        "board_id": "board-1",
        "actor": "u1",
        "details": {
            "column_id": "col-2",
            "from_column_id": "col-1",
            "to_column_id": "col-2",
            "from_index": 0,
            "to_index": 3,
        },
    }


def test_update_event_lists_fields_and_omits_empty_details() -> None:
    updated = ChangeEvent(EventKind.BOARD_UPDATED, "board-1", "board-1", fields=("title",), ts=TS)
    assert updated.to_dict()["details"] == {"fields": ["title"]}

    created = ChangeEvent(EventKind.BOARD_CREATED, "board-1", "board-1", ts=TS)
    payload = created.to_dict()
    assert "details" not in payload
    assert payload["actor"] is None


def test_summarize_events() -> None:
    events = [
        ChangeEvent(EventKind.TASK_CREATED, f"task-{i}", "board-1", ts=TS) for i in range(6)
    ] + [ChangeEvent(EventKind.TASK_MOVED, "task-0", "board-1", ts=TS)]

    summary = summarize_events(events)

    assert summary["count"] == 7
    assert summary["kinds"] == {"task_created": 6, "task_moved": 1}
    assert summary["entities"] == [f"task-{i}" for i in range(5)]
