"""Provide utility helpers for timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken as UTC so aware/naive comparisons never raise.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return _as_utc(value).isoformat()


def _parse_iso(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    try:
        if not isinstance(value, str):
            value = str(value)
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return _as_utc(datetime.fromisoformat(value))
    except ValueError:
        return None


def _epoch_seconds(value: Optional[datetime]) -> float:
    """Return *value* as POSIX seconds, treating ``None`` as the epoch."""
    if value is None:
        return 0.0
    return _as_utc(value).timestamp()
