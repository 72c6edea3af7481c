"""Tests for dense-sequence index helpers (engine/ordering.py)."""

from __future__ import annotations

import pytest

from taskboard.engine.errors import IndexOutOfRangeError
from taskboard.engine.ordering import check_index, clamp_index, move_item


class TestMoveItem:
    def test_forward(self) -> None:
        assert move_item(["a", "b", "c"], 0, 2) == ["b", "c", "a"]

    def test_backward(self) -> None:
        assert move_item(("a", "b", "c"), 2, 0) == ["c", "a", "b"]

    def test_same_index_returns_copy(self) -> None:
        items = ["a", "b"]
        result = move_item(items, 1, 1)
        assert result == items
        assert result is not items

    @pytest.mark.parametrize("from_index, to_index", [(-1, 0), (0, 3), (3, 0), (0, -1)])
    def test_out_of_range(self, from_index: int, to_index: int) -> None:
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            move_item(["a", "b", "c"], from_index, to_index)
        assert exc_info.value.length == 3
        assert "[0, 2]" in str(exc_info.value)


class TestIndexHelpers:
    def test_check_index(self) -> None:
        assert check_index(0, 1) == 0
        with pytest.raises(IndexOutOfRangeError, match="empty"):
            check_index(0, 0)

    @pytest.mark.parametrize(
        "index, expected",
        [(None, 3), (0, 0), (2, 2), (3, 3), (10, 3), (-5, 0)],
    )
    def test_clamp_index(self, index: int | None, expected: int) -> None:
        assert clamp_index(index, 3) == expected

