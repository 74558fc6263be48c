"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Union


def resolve_level(level: Union[int, str]) -> int:
    """Accept ``logging`` constants or names such as ``"debug"``."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise RuntimeError(f"Unknown log level {level!r}")
    return resolved


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    level = resolve_level(level)
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=level,
    )
    logging.getLogger("airwatch").setLevel(level)
    # urllib3 connection chatter stays at WARNING and above
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
