"""Loguru configuration for the process-wide diagnostics sinks.

Call setup_logging() once at application startup. Registered streams log
through their own loguru cores, so their records never reach these sinks.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import get_settings
from .enums import Level

_handler_ids: list[int] = []


def setup_logging(level: Level | str | None = None, log_dir: Path | None = None) -> None:
    """Configure loguru with a stderr sink and a diagnostics file sink.

    Safe to call again: only the sinks added here (and loguru's default
    stderr handler) are replaced, stream handlers stay attached.

    Args:
        level: Minimum level (default settings.log_level).
        log_dir: Directory for loghandles.log (default settings.log_dir).
    """
    settings = get_settings()
    level = Level.parse(level or settings.log_level)
    log_dir = Path(log_dir or settings.log_dir)

    if _handler_ids:
        for handler_id in _handler_ids:
            logger.remove(handler_id)
        _handler_ids.clear()
    else:
        # loguru's default stderr handler is always id 0
        try:
            logger.remove(0)
        except ValueError:
            pass

    # Sink 1: stderr, human-readable
    _handler_ids.append(
        logger.add(
            sys.stderr,
            level=level.value,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        )
    )

    # Sink 2: diagnostics file, reopened by loguru if logrotate moves it
    log_dir.mkdir(parents=True, exist_ok=True)
    _handler_ids.append(
        logger.add(
            log_dir / "loghandles.log",
            level=level.value,
            watch=True,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        )
    )
