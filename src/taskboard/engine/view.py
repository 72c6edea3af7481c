"""View projector: filtered and sorted read-only task sequences for display.

Everything here is a pure function of its inputs.  The canonical order of a
column is never touched; callers get back a new list and render it.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..users import UserDirectory
from ..utils import _as_utc, _epoch_seconds
from .model import Snapshot, Task
from .schemas import FilterSpec, SortField, SortOrder, SortSpec, validate_payload

FilterLike = Union[FilterSpec, Mapping[str, Any], None]
SortLike = Union[SortSpec, Mapping[str, Any], None]


def _display_name(user_id: Optional[str], users: Optional[UserDirectory]) -> str:
    if not user_id or users is None:
        return ""
    profile = users.resolve(user_id)
    return profile.display_name if profile is not None else ""


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def matches(task: Task, filters: FilterSpec, users: Optional[UserDirectory] = None) -> bool:
    """Return True if *task* satisfies every constraint present in *filters*."""
    if filters.query:
        query = filters.query.lower()
        name = _display_name(task.assigned_to, users).lower()
        if (
            query not in task.title.lower()
            and query not in task.description.lower()
            and not (name and query in name)
        ):
            return False
    if filters.priorities and task.priority not in filters.priorities:
        return False
    if filters.assignees and task.assigned_to not in filters.assignees:
        return False
    if filters.has_due_range:
        if task.due_date is None:
            return False
        due = _as_utc(task.due_date)
        if filters.due_from is not None and due < filters.due_from:
            return False
        if filters.due_to is not None and due > filters.due_to:
            return False
    return True


def filter_tasks(
    tasks: Iterable[Task],
    filters: FilterLike = None,
    users: Optional[UserDirectory] = None,
) -> list[Task]:
    spec = validate_payload(FilterSpec, filters)
    return [t for t in tasks if matches(t, spec, users)]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def _sort_key(field: SortField, users: Optional[UserDirectory]) -> Callable[[Task], Any]:
    if field == SortField.TITLE:
        return lambda t: t.title.lower()
    if field == SortField.PRIORITY:
        return lambda t: t.priority.rank
    if field == SortField.DUE_DATE:
        return lambda t: _epoch_seconds(t.due_date)
    if field == SortField.ASSIGNED_TO:
        return lambda t: _display_name(t.assigned_to, users).lower()
    return lambda t: _epoch_seconds(t.created_at)


def sort_tasks(
    tasks: Iterable[Task],
    sort: SortLike = None,
    users: Optional[UserDirectory] = None,
) -> list[Task]:
    """Stable sort; equal keys keep their input order in both directions."""
    spec = validate_payload(SortSpec, sort)
    # sorted(reverse=True) preserves the relative order of equal keys.
    return sorted(tasks, key=_sort_key(spec.field, users), reverse=spec.order == SortOrder.DESC)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def project_tasks(
    tasks: Iterable[Task],
    filters: FilterLike = None,
    sort: SortLike = None,
    users: Optional[UserDirectory] = None,
) -> list[Task]:
    """Filter then sort *tasks* into a new list.

    Without *sort* the surviving tasks keep their input (canonical) order.
    """
    projected = filter_tasks(tasks, filters, users)
    if sort is None:
        return projected
    return sort_tasks(projected, sort, users)


def project_column(
    snapshot: Snapshot,
    column_id: str,
    filters: FilterLike = None,
    sort: SortLike = None,
    users: Optional[UserDirectory] = None,
) -> list[Task]:
    return project_tasks(snapshot.tasks_of(column_id), filters, sort, users)


class ViewState(BaseModel):
    """Current search/filter/sort selection of a board view.

    Defaults to no filters, newest tasks first.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filters: FilterSpec = Field(default_factory=FilterSpec)
    sort: SortSpec = Field(default_factory=SortSpec)

    def with_filters(self, filters: FilterLike) -> "ViewState":
        return self.model_copy(update={"filters": validate_payload(FilterSpec, filters)})

    def with_sort(self, sort: SortLike) -> "ViewState":
        return self.model_copy(update={"sort": validate_payload(SortSpec, sort)})

    def cleared(self) -> "ViewState":
        return ViewState()

    def apply(self, tasks: Iterable[Task], users: Optional[UserDirectory] = None) -> list[Task]:
        return project_tasks(tasks, self.filters, self.sort, users)
