"""Typed failures raised by the board engine.

Every failure leaves the store's current snapshot untouched, so callers can
catch these and decide whether to surface, retry or ignore them.
"""

from __future__ import annotations

from typing import Any, Optional


class BoardError(Exception):
    """Base class for all engine failures."""


class NotFoundError(BoardError, LookupError):
    """A referenced board, column or task id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id!r} not found")


class IndexOutOfRangeError(BoardError, IndexError):
    """A reorder index falls outside ``[0, length - 1]``."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        if length == 0:
            message = f"index {index} out of range for empty sequence"
        else:
            message = f"index {index} out of range [0, {length - 1}]"
        super().__init__(message)


class ValidationError(BoardError, ValueError):
    """Input payload failed validation (blank title, bad priority, ...)."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)
