"""Logging setup for hosts embedding the engine."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from loguru import logger

from .engine.events import ChangeEvent


def configure_logging(level: str = "INFO", sink: TextIO | None = None) -> int:
    """Reset loguru to a single sink at *level* and return the sink id."""
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


def summarize_events(events: list[ChangeEvent]) -> dict[str, Any]:
    """Compact, JSON-friendly digest of one commit's events for log lines."""
    kinds: dict[str, int] = {}
    for event in events:
        kinds[event.kind.value] = kinds.get(event.kind.value, 0) + 1
    return {
        "count": len(events),
        "kinds": kinds,
        "entities": [e.entity_id for e in events[:5]],
    }
