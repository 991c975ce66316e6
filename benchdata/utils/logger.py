"""
Logging setup on top of loguru.

Modules log through ``from loguru import logger``; this module only decides
where records go and at which level.

Usage:
    from benchdata.utils.logger import setup_logging
    setup_logging("DEBUG", log_file="logs/bench.log")
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"

_sink_ids: list[int] = []


def setup_logging(level: str = "INFO", log_file: Path | str | None = None) -> None:
    """Replace the active benchdata sinks.

    Calling it again drops the sinks added by the previous call, so it is
    safe to call once per script and again from tests. It also enables
    records from benchdata modules, which are disabled on import.

    Args:
        level: Minimum level for every sink.
        log_file: Optional file to mirror records into.
    """
    logger.enable("benchdata")
    if not _sink_ids:
        # loguru ships a stderr sink at DEBUG; drop it on first setup
        logger.remove()
    while _sink_ids:
        logger.remove(_sink_ids.pop())

    _sink_ids.append(logger.add(sys.stderr, level=level, format=LOG_FORMAT))

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _sink_ids.append(
            logger.add(
                str(log_file),
                level=level,
                format=LOG_FORMAT,
                backtrace=True,
                diagnose=False,
            )
        )

    logger.debug("Logging configured at level {}", level)
