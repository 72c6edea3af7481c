"""Tests for config loading and getters (config.py)."""

from __future__ import annotations

from pathlib import Path

from taskboard.config import (
    get_default_columns,
    get_event_history,
    get_log_level,
    load_engine_config,
)
from taskboard.constants import DEFAULT_COLUMNS, DEFAULT_EVENT_HISTORY
from taskboard.engine.store import HierarchyStore


class TestLoadEngineConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_engine_config(tmp_path) == ({}, None)

    def test_directory_resolves_default_name(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.yaml").write_text("event_history: 10\n", encoding="utf-8")
        config, err = load_engine_config(tmp_path)
        assert err is None
        assert config == {"event_history": 10}

    def test_explicit_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "board.json"
        path.write_text('{"log_level": "debug"}', encoding="utf-8")
        config, err = load_engine_config(path)
        assert err is None
        assert get_log_level(config) == "DEBUG"

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.yaml").write_text("", encoding="utf-8")
        assert load_engine_config(tmp_path) == ({}, None)

    def test_invalid_yaml_reports_error(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.yaml").write_text("board: [unclosed\n", encoding="utf-8")
        config, err = load_engine_config(tmp_path)
        assert config == {}
        assert err is not None
        assert "YAMLError" in err

    def test_non_mapping_reports_error(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.yaml").write_text("- a\n- b\n", encoding="utf-8")
        config, err = load_engine_config(tmp_path)
        assert config == {}
        assert "expected object" in (err or "")


class TestGetters:
    def test_default_columns_nested(self) -> None:
        config = {"board": {"default_columns": [" Backlog ", "Doing"]}}
        assert get_default_columns(config) == ("Backlog", "Doing")

    def test_default_columns_flat(self) -> None:
        assert get_default_columns({"default_columns": ["A"]}) == ("A",)

    def test_default_columns_fallback(self) -> None:
        assert get_default_columns({}) == DEFAULT_COLUMNS
        assert get_default_columns({"default_columns": []}) == DEFAULT_COLUMNS
        assert get_default_columns({"default_columns": ["ok", " "]}) == DEFAULT_COLUMNS
        assert get_default_columns({"default_columns": "To Do"}) == DEFAULT_COLUMNS

    def test_event_history(self) -> None:
        assert get_event_history({"event_history": 0}) == 0
        assert get_event_history({"event_history": -1}) == DEFAULT_EVENT_HISTORY
        assert get_event_history({"event_history": True}) == DEFAULT_EVENT_HISTORY
        assert get_event_history({"event_history": "5"}) == DEFAULT_EVENT_HISTORY

    def test_log_level(self) -> None:
        assert get_log_level({"logging": {"level": "warning"}}) == "WARNING"
        assert get_log_level({"log_level": "verbose"}) == "INFO"
        assert get_log_level({}) == "INFO"


def test_store_from_config() -> None:
    store = HierarchyStore.from_config({"board": {"default_columns": ["Inbox"]}, "event_history": 1})
    board = store.create_board("B")
    store.create_column(board.id, "Later")
    assert [c.title for c in store.columns_of(board.id)] == ["Inbox", "Later"]
    assert len(store.recent_events()) == 1
