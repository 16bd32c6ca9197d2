"""Logging setup.

Library modules only do ``from loguru import logger`` and emit. Sinks are
configured once, by the entry point, through ``configure_logging()``.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

_LOGGER_CONFIGURED = False


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Replace loguru's default sink with a stderr sink (and optional file).

    Repeated calls are ignored so that embedding code and the CLI can both
    call it safely.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(log_file), level=level.upper(), format=LOG_FORMAT)

    _LOGGER_CONFIGURED = True
    logger.debug("Logging configured at level {}", level.upper())
