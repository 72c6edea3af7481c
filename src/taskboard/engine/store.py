"""Hierarchy store: atomic, order-consistent mutations over the board tree.

All writes go through :meth:`HierarchyStore.transaction`, which takes the
store-wide lock, hands out a copy-on-write working set over the current
:class:`Snapshot`, and publishes the resulting snapshot only if the block
exits cleanly.  A failing operation raises before the swap, so observers
only ever see the previous snapshot or the fully applied next one, and every
published snapshot satisfies the dense-order invariant for columns within a
board and tasks within a column.
"""

from __future__ import annotations

import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence, Union

from loguru import logger

from ..config import get_default_columns, get_event_history
from ..constants import (
    BOARD_ID_PREFIX,
    COLUMN_ID_PREFIX,
    DEFAULT_COLUMNS,
    DEFAULT_EVENT_HISTORY,
    TASK_ID_PREFIX,
)
from ..ids import IdAllocator, UuidAllocator
from ..utils import _now
from .errors import BoardError
from .events import ChangeEvent, EventKind
from .model import Board, Column, Priority, Snapshot, Task
from .ordering import clamp_index, move_item
from .schemas import (
    BoardDraft,
    BoardPatch,
    ColumnDraft,
    ColumnPatch,
    TaskDraft,
    TaskPatch,
    patch_changes,
    validate_payload,
)

CommitListener = Callable[[Snapshot, list[ChangeEvent]], None]
Patch = Union[Mapping[str, Any], BoardPatch, ColumnPatch, TaskPatch]


# ---------------------------------------------------------------------------
# Transaction working set
# ---------------------------------------------------------------------------

class _BoardTx:
    """Copy-on-write working set over one snapshot.

    Entities are frozen, so edits replace dict entries rather than mutating
    shared objects; the base snapshot stays valid whatever happens here.
    """

    def __init__(self, base: Snapshot) -> None:
        self.boards: dict[str, Board] = dict(base.boards)
        self.columns: dict[str, Column] = dict(base.columns)
        self.tasks: dict[str, Task] = dict(base.tasks)
        self.board_ids: list[str] = list(base.board_ids)
        self.events: list[ChangeEvent] = []
        self.dirty = False

    # -- lookups ------------------------------------------------------------

    def view(self) -> Snapshot:
        return Snapshot(
            boards=self.boards,
            columns=self.columns,
            tasks=self.tasks,
            board_ids=tuple(self.board_ids),
        )

    def get_board(self, board_id: str) -> Board:
        return self.view().get_board(board_id)

    def get_column(self, column_id: str) -> Column:
        return self.view().get_column(column_id)

    def get_task(self, task_id: str) -> Task:
        return self.view().get_task(task_id)

    # -- ordered writes -----------------------------------------------------

    def set_column_ids(self, board_id: str, column_ids: Sequence[str]) -> None:
        """Install *column_ids* as the board's sequence and re-densify ``order``."""
        for index, column_id in enumerate(column_ids):
            column = self.columns[column_id]
            if column.order != index or column.board_id != board_id:
                self.columns[column_id] = replace(column, order=index, board_id=board_id)
        self.boards[board_id] = replace(self.boards[board_id], column_ids=tuple(column_ids))
        self.dirty = True

    def set_task_ids(self, column_id: str, task_ids: Sequence[str]) -> None:
        """Install *task_ids* as the column's sequence, re-densify and re-parent."""
        for index, task_id in enumerate(task_ids):
            task = self.tasks[task_id]
            if task.order != index or task.column_id != column_id:
                self.tasks[task_id] = replace(task, order=index, column_id=column_id)
        self.columns[column_id] = replace(self.columns[column_id], task_ids=tuple(task_ids))
        self.dirty = True

    def drop_column(self, column_id: str) -> Column:
        column = self.columns.pop(column_id)
        for task_id in column.task_ids:
            self.tasks.pop(task_id, None)
        self.dirty = True
        return column

    def emit(self, event: ChangeEvent) -> None:
        self.events.append(event)
        self.dirty = True


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class HierarchyStore:
    """Owns the canonical board tree and every mutation on it.

    Parameters
    ----------
    snapshot:
        Initial tree (e.g. reloaded through :meth:`Snapshot.from_dict`).
        Defaults to an empty tree.
    id_allocator:
        Source of fresh entity ids; defaults to :class:`UuidAllocator`.
    clock:
        Callable returning the current aware ``datetime``.
    default_columns:
        Titles of the starter columns attached to every new board.
    event_history:
        How many :class:`ChangeEvent` objects :meth:`recent_events` retains.
    """

    def __init__(
        self,
        snapshot: Optional[Snapshot] = None,
        *,
        id_allocator: Optional[IdAllocator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        default_columns: Iterable[str] = DEFAULT_COLUMNS,
        event_history: int = DEFAULT_EVENT_HISTORY,
    ) -> None:
        self._snapshot = snapshot if snapshot is not None else Snapshot()
        self._ids: IdAllocator = id_allocator or UuidAllocator()
        self._clock = clock or _now
        self.default_columns: tuple[str, ...] = tuple(default_columns)
        self._lock = threading.RLock()
        self._in_transaction = False
        self._listeners: list[CommitListener] = []
        self._events: deque[ChangeEvent] = deque(maxlen=max(event_history, 0))

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "HierarchyStore":
        """Build a store from a loaded config mapping (see :mod:`taskboard.config`)."""
        kwargs.setdefault("default_columns", get_default_columns(dict(config)))
        kwargs.setdefault("event_history", get_event_history(dict(config)))
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Snapshot access & observers
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        """The latest committed tree; never mutated after publication."""
        return self._snapshot

    def subscribe(self, listener: CommitListener) -> Callable[[], None]:
        """Call ``listener(snapshot, events)`` after every effective commit.

        Returns a callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def recent_events(self, limit: int = 100) -> list[ChangeEvent]:
        if limit < 1:
            return []
        with self._lock:
            events = list(self._events)
        return events[-limit:]

    @contextmanager
    def transaction(self) -> Iterator[_BoardTx]:
        """Acquire the lock, yield a working set, and publish it on clean exit.

        Usage::

            with store.transaction() as tx:
                column = tx.get_column(column_id)
                tx.set_task_ids(column.id, list(reversed(column.task_ids)))
                # published on exit; discarded if the block raises

        Transactions do not nest: calling a store mutation inside the block
        raises :class:`BoardError`.  Commit listeners run after the block has
        closed and may mutate the store again.
        """
        with self._lock:
            if self._in_transaction:
                raise BoardError("a transaction is already open on this store")
            self._in_transaction = True
            try:
                tx = _BoardTx(self._snapshot)
                yield tx
            finally:
                self._in_transaction = False
            if tx.dirty:
                self._commit(tx)

    def _commit(self, tx: _BoardTx) -> None:
        snapshot = tx.view()
        events = list(tx.events)
        self._snapshot = snapshot
        self._events.extend(events)
        # Listeners may commit re-entrantly; each still gets this commit's pair.
        for listener in list(self._listeners):
            try:
                listener(snapshot, list(events))
            except Exception:
                logger.exception("Commit listener {!r} failed", listener)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_board(self, board_id: str) -> Board:
        return self._snapshot.get_board(board_id)

    def get_column(self, column_id: str) -> Column:
        return self._snapshot.get_column(column_id)

    def get_task(self, task_id: str) -> Task:
        return self._snapshot.get_task(task_id)

    def list_boards(self) -> list[Board]:
        return self._snapshot.list_boards()

    def columns_of(self, board_id: str) -> list[Column]:
        return self._snapshot.columns_of(board_id)

    def tasks_of(self, column_id: str) -> list[Task]:
        return self._snapshot.tasks_of(column_id)

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------

    def create_board(
        self,
        title: str,
        description: str = "",
        owner_id: Optional[str] = None,
    ) -> Board:
        """Create a board with the starter columns, orders ``0..n-1``."""
        draft = validate_payload(BoardDraft, {"title": title, "description": description})
        board_id = self._ids.new_id(BOARD_ID_PREFIX)
        column_ids = [self._ids.new_id(COLUMN_ID_PREFIX) for _ in self.default_columns]

        with self.transaction() as tx:
            for column_id, column_title in zip(column_ids, self.default_columns):
                tx.columns[column_id] = Column(id=column_id, title=column_title, board_id=board_id)
            tx.boards[board_id] = Board(
                id=board_id,
                title=draft.title,
                description=draft.description,
                created_by=owner_id,
                created_at=self._clock(),
            )
            tx.set_column_ids(board_id, column_ids)
            tx.board_ids.append(board_id)
            tx.emit(ChangeEvent(EventKind.BOARD_CREATED, board_id, board_id, actor=owner_id, ts=self._clock()))
            board = tx.boards[board_id]

        logger.info("Created board {}: {}", board.id, board.title)
        return board

    def update_board(self, board_id: str, patch: Patch, *, actor: Optional[str] = None) -> Board:
        changes = patch_changes(validate_payload(BoardPatch, patch))
        with self.transaction() as tx:
            board = tx.get_board(board_id)
            if changes:
                board = replace(board, **changes)
                tx.boards[board_id] = board
                tx.emit(ChangeEvent(
                    EventKind.BOARD_UPDATED, board_id, board_id,
                    fields=tuple(sorted(changes)), actor=actor, ts=self._clock(),
                ))
        logger.debug("Updated board {} fields={}", board_id, sorted(changes))
        return board

    def delete_board(self, board_id: str, *, actor: Optional[str] = None) -> None:
        """Delete a board together with its columns and their tasks."""
        with self.transaction() as tx:
            board = tx.get_board(board_id)
            for column_id in board.column_ids:
                tx.drop_column(column_id)
            del tx.boards[board_id]
            tx.board_ids.remove(board_id)
            tx.emit(ChangeEvent(EventKind.BOARD_DELETED, board_id, board_id, actor=actor, ts=self._clock()))
        logger.info("Deleted board {}", board_id)

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def create_column(self, board_id: str, title: str, *, actor: Optional[str] = None) -> Column:
        """Append a new empty column to *board_id*."""
        draft = validate_payload(ColumnDraft, {"title": title})
        with self.transaction() as tx:
            board = tx.get_board(board_id)
            column_id = self._ids.new_id(COLUMN_ID_PREFIX)
            tx.columns[column_id] = Column(id=column_id, title=draft.title, board_id=board_id)
            tx.set_column_ids(board_id, [*board.column_ids, column_id])
            column = tx.columns[column_id]
            tx.emit(ChangeEvent(
                EventKind.COLUMN_CREATED, column_id, board_id,
                column_id=column_id, to_index=column.order, actor=actor, ts=self._clock(),
            ))
        logger.info("Created column {} on board {} at {}", column.id, board_id, column.order)
        return column

    def update_column(self, column_id: str, patch: Patch, *, actor: Optional[str] = None) -> Column:
        """Apply a partial update; order and parent board never change here."""
        changes = patch_changes(validate_payload(ColumnPatch, patch))
        with self.transaction() as tx:
            column = tx.get_column(column_id)
            if changes:
                column = replace(column, **changes)
                tx.columns[column_id] = column
                tx.emit(ChangeEvent(
                    EventKind.COLUMN_UPDATED, column_id, column.board_id, column_id=column_id,
                    fields=tuple(sorted(changes)), actor=actor, ts=self._clock(),
                ))
        logger.debug("Updated column {} fields={}", column_id, sorted(changes))
        return column

    def delete_column(self, column_id: str, *, actor: Optional[str] = None) -> None:
        """Delete a column and its tasks, re-densifying the remaining columns."""
        with self.transaction() as tx:
            column = tx.get_column(column_id)
            board = tx.get_board(column.board_id)
            tx.drop_column(column_id)
            tx.set_column_ids(board.id, [cid for cid in board.column_ids if cid != column_id])
            tx.emit(ChangeEvent(
                EventKind.COLUMN_DELETED, column_id, board.id,
                column_id=column_id, from_index=column.order, actor=actor, ts=self._clock(),
            ))
        logger.info("Deleted column {} ({} task(s)) from board {}", column_id, len(column.task_ids), board.id)

    def reorder_columns(
        self,
        board_id: str,
        from_index: int,
        to_index: int,
        *,
        actor: Optional[str] = None,
    ) -> None:
        """Move the column at *from_index* to *to_index* within the board."""
        with self.transaction() as tx:
            board = tx.get_board(board_id)
            column_ids = move_item(board.column_ids, from_index, to_index)
            if from_index == to_index:
                return
            tx.set_column_ids(board_id, column_ids)
            tx.emit(ChangeEvent(
                EventKind.COLUMNS_REORDERED, board.column_ids[from_index], board_id,
                from_index=from_index, to_index=to_index, actor=actor, ts=self._clock(),
            ))
        logger.debug("Reordered columns on board {}: {} -> {}", board_id, from_index, to_index)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        column_id: str,
        title: str,
        description: str = "",
        priority: Union[Priority, str] = Priority.MEDIUM,
        due_date: Optional[Union[datetime, str]] = None,
        assigned_to: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Task:
        """Append a new task to the end of *column_id*."""
        draft = validate_payload(TaskDraft, {
            "title": title,
            "description": description,
            "priority": priority,
            "due_date": due_date,
            "assigned_to": assigned_to,
            "created_by": created_by,
        })
        with self.transaction() as tx:
            column = tx.get_column(column_id)
            task_id = self._ids.new_id(TASK_ID_PREFIX)
            now = self._clock()
            tx.tasks[task_id] = Task(
                id=task_id,
                title=draft.title,
                column_id=column_id,
                description=draft.description,
                priority=draft.priority,
                due_date=draft.due_date,
                assigned_to=draft.assigned_to,
                created_by=draft.created_by,
                created_at=now,
                updated_at=now,
            )
            tx.set_task_ids(column_id, [*column.task_ids, task_id])
            task = tx.tasks[task_id]
            tx.emit(ChangeEvent(
                EventKind.TASK_CREATED, task_id, column.board_id,
                column_id=column_id, to_index=task.order, actor=created_by, ts=now,
            ))
        logger.info("Created task {} in column {}: {}", task.id, column_id, task.title)
        return task

    def update_task(self, task_id: str, patch: Patch, *, actor: Optional[str] = None) -> Task:
        """Apply a partial update and bump ``updated_at``; order and column never change here."""
        changes = patch_changes(validate_payload(TaskPatch, patch))
        with self.transaction() as tx:
            task = tx.get_task(task_id)
            if changes:
                now = self._clock()
                task = replace(task, **changes, updated_at=now)
                tx.tasks[task_id] = task
                tx.emit(ChangeEvent(
                    EventKind.TASK_UPDATED, task_id, tx.get_column(task.column_id).board_id,
                    column_id=task.column_id, fields=tuple(sorted(changes)), actor=actor, ts=now,
                ))
        logger.debug("Updated task {} fields={}", task_id, sorted(changes))
        return task

    def delete_task(self, task_id: str, *, actor: Optional[str] = None) -> None:
        """Remove a task and re-densify its former siblings."""
        with self.transaction() as tx:
            task = tx.get_task(task_id)
            column = tx.get_column(task.column_id)
            del tx.tasks[task_id]
            tx.set_task_ids(column.id, [tid for tid in column.task_ids if tid != task_id])
            tx.emit(ChangeEvent(
                EventKind.TASK_DELETED, task_id, column.board_id,
                column_id=column.id, from_index=task.order, actor=actor, ts=self._clock(),
            ))
        logger.info("Deleted task {} from column {}", task_id, column.id)

    def move_task(
        self,
        task_id: str,
        target_column_id: str,
        target_index: Optional[int] = None,
        *,
        actor: Optional[str] = None,
    ) -> Task:
        """Move a task into *target_column_id* at *target_index*.

        The task is taken out of its source column (which is re-densified),
        inserted at *target_index* clamped to ``[0, len(target)]`` (appended
        when omitted), and the target column is re-densified.  Targeting the
        task's own column without an index moves it to the end; targeting its
        own column at its current index changes nothing.

        Returns the moved task with its new ``column_id`` and ``order``.
        """
        with self.transaction() as tx:
            task = tx.get_task(task_id)
            source = tx.get_column(task.column_id)
            from_index = source.task_ids.index(task_id)
            remaining = [tid for tid in source.task_ids if tid != task_id]

            target = tx.get_column(target_column_id)
            same_column = target.id == source.id
            sequence = remaining if same_column else list(target.task_ids)
            index = clamp_index(target_index, len(sequence))
            sequence.insert(index, task_id)

            if same_column and tuple(sequence) == source.task_ids:
                return task

            if not same_column:
                tx.set_task_ids(source.id, remaining)
            tx.set_task_ids(target.id, sequence)
            tx.emit(ChangeEvent(
                EventKind.TASK_MOVED, task_id, target.board_id,
                column_id=target.id, from_column_id=source.id, to_column_id=target.id,
                from_index=from_index, to_index=index, actor=actor, ts=self._clock(),
            ))
            moved = tx.tasks[task_id]

        logger.info(
            "Moved task {} from {}[{}] to {}[{}]",
            task_id, source.id, from_index, target.id, index,
        )
        return moved

    def reorder_tasks(
        self,
        column_id: str,
        from_index: int,
        to_index: int,
        *,
        actor: Optional[str] = None,
    ) -> None:
        """Move the task at *from_index* to *to_index* within one column."""
        with self.transaction() as tx:
            column = tx.get_column(column_id)
            task_ids = move_item(column.task_ids, from_index, to_index)
            if from_index == to_index:
                return
            tx.set_task_ids(column_id, task_ids)
            tx.emit(ChangeEvent(
                EventKind.TASKS_REORDERED, column.task_ids[from_index], column.board_id,
                column_id=column_id, from_index=from_index, to_index=to_index,
                actor=actor, ts=self._clock(),
            ))
        logger.debug("Reordered tasks in column {}: {} -> {}", column_id, from_index, to_index)
