"""Index arithmetic for dense, position-equals-order sequences."""

from __future__ import annotations

from typing import Optional, Sequence, TypeVar

from .errors import IndexOutOfRangeError

T = TypeVar("T")


def check_index(index: int, length: int) -> int:
    """Return *index* if it addresses an existing element, else raise."""
    if not 0 <= index < length:
        raise IndexOutOfRangeError(index, length)
    return index


def clamp_index(index: Optional[int], length: int) -> int:
    """Clamp an insertion index to ``[0, length]``; ``None`` means append."""
    if index is None:
        return length
    return max(0, min(int(index), length))


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Remove the element at *from_index* and reinsert it at *to_index*.

    Both indices must address existing elements of *items*.
    """
    check_index(from_index, len(items))
    check_index(to_index, len(items))
    result = list(items)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result

