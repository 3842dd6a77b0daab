"""Logging utilities tailored for the tents-and-trees solver."""

from __future__ import annotations

import logging
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
ROOT_LOGGER = "tents"


def resolve_level(level: Union[int, str]) -> int:
    """Accept either a numeric level or a name such as ``"debug"``."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    stream: Optional[TextIO] = None,
) -> None:
    """Install one stream handler on the root logger.

    Records go to stderr unless ``stream`` is given; reports use stdout.
    Per-node search messages stay at DEBUG and INFO carries one summary line
    per solve.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or ROOT_LOGGER)
