"""Wire a ready-to-use store from an optional config file."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .config import get_log_level, load_engine_config
from .engine.events import ChangeEvent
from .engine.model import Snapshot
from .engine.store import HierarchyStore
from .logging_utils import configure_logging, summarize_events


def _log_commit(snapshot: Snapshot, events: list[ChangeEvent]) -> None:
    logger.debug("Committed {} board(s): {}", len(snapshot.board_ids), summarize_events(events))


def build_store(
    config_path: Optional[Path] = None,
    *,
    snapshot: Optional[Snapshot] = None,
    setup_logging: bool = True,
    **kwargs: Any,
) -> HierarchyStore:
    """Load config (if any), configure logging and return a new store.

    A config file that fails to parse is reported and ignored; the store is
    still built with defaults.
    """
    config: dict[str, Any] = {}
    err: Optional[str] = None
    if config_path is not None:
        config, err = load_engine_config(config_path)
    if setup_logging:
        configure_logging(get_log_level(config))
    if err:
        logger.warning("Ignoring invalid config: {}", err)

    store = HierarchyStore.from_config(config, snapshot=snapshot, **kwargs)
    store.subscribe(_log_commit)
    return store
