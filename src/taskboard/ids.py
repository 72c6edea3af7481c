"""Identity allocation for boards, columns and tasks."""

from __future__ import annotations

import itertools
import threading
import uuid
from typing import Protocol


class IdAllocator(Protocol):
    def new_id(self, prefix: str = "") -> str:
        """Return an id never handed out before by this allocator."""
        ...


class UuidAllocator:
    """Short random ids: ``<prefix><12 hex>``."""

    def new_id(self, prefix: str = "") -> str:
        return f"{prefix}{uuid.uuid4().hex[:12]}"


class SequentialAllocator:
    """Deterministic ids (``<prefix>1``, ``<prefix>2``, ...) shared across prefixes."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def new_id(self, prefix: str = "") -> str:
        with self._lock:
            return f"{prefix}{next(self._counter)}"
