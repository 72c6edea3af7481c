"""Pydantic input models for engine operations.

Creation drafts and partial-update patches are validated here before the
store touches its snapshot, so a bad payload can never leave a half-applied
change behind.  Pydantic failures are re-raised as the engine's own
:class:`~taskboard.engine.errors.ValidationError`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Mapping, Optional, TypeVar, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..utils import _as_utc
from .errors import ValidationError
from .model import Priority

ModelT = TypeVar("ModelT", bound=BaseModel)

# Naive datetimes are read as UTC.
Instant = Annotated[datetime, AfterValidator(_as_utc)]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class _TitledModel(_StrictModel):
    @field_validator("title", check_fields=False)
    @classmethod
    def require_title(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("title must be a non-empty string")
        return value.strip()

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def blank_description(cls, value: Any) -> Any:
        return value or ""


# ---------------------------------------------------------------------------
# Creation drafts
# ---------------------------------------------------------------------------

class BoardDraft(_TitledModel):
    title: str
    description: str = ""


class ColumnDraft(_TitledModel):
    title: str


class TaskDraft(_TitledModel):
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: Optional[Instant] = None
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------

class BoardPatch(_TitledModel):
    title: Optional[str] = None
    description: Optional[str] = None


class ColumnPatch(_TitledModel):
    title: Optional[str] = None


class TaskPatch(_TitledModel):
    """Fields a task update may touch; ``order`` and ``column_id`` are not among them."""

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[Instant] = None
    assigned_to: Optional[str] = None

    @field_validator("priority")
    @classmethod
    def require_priority(cls, value: Optional[Priority]) -> Priority:
        # Explicit null is rejected; clearing is only meaningful for due_date/assigned_to.
        if value is None:
            raise ValueError("priority cannot be null")
        return value


# ---------------------------------------------------------------------------
# View parameters
# ---------------------------------------------------------------------------

class SortField(str, Enum):
    TITLE = "title"
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    ASSIGNED_TO = "assigned_to"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterSpec(_StrictModel):
    """Task filter; every constraint is optional and they combine with AND."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: str = ""
    priorities: list[Priority] = Field(default_factory=list)
    assignees: list[str] = Field(default_factory=list)
    due_from: Optional[Instant] = None
    due_to: Optional[Instant] = None

    @property
    def has_due_range(self) -> bool:
        return self.due_from is not None or self.due_to is not None

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.priorities or self.assignees or self.has_due_range)


class SortSpec(_StrictModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def validate_payload(
    model_cls: type[ModelT],
    payload: Union[ModelT, Mapping[str, Any], None],
) -> ModelT:
    """Coerce *payload* into *model_cls*, raising the engine's ValidationError."""
    if isinstance(payload, model_cls):
        return payload
    try:
        return model_cls.model_validate(dict(payload or {}))
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False)
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or model_cls.__name__}: {err.get('msg')}"
            for err in errors
        )
        raise ValidationError(f"Invalid {model_cls.__name__}: {details}", errors) from exc
    except TypeError as exc:
        raise ValidationError(f"Invalid {model_cls.__name__}: {exc}") from exc


def patch_changes(patch: BaseModel) -> dict[str, Any]:
    """Return only the fields the caller actually set on *patch*."""
    return patch.model_dump(exclude_unset=True)
