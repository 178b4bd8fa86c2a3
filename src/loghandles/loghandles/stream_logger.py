"""Per-stream loggers on top of loguru.

Each StreamLogger owns a private copy of the loguru logger with its own core,
so the only handler that ever sees its records is the one for its sink;
handlers the host adds to the global logger (including loguru's default
stderr handler) never do. Handler levels are fixed once added, so the
mutable filter level lives here and is checked before a record is handed
to loguru.
"""

import copy
import sys
import threading
from typing import Any, Callable

from loguru import logger

from .enums import Level

# Fixed, uncolored text format with a full timestamp
STREAM_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSSSSSZ} | {level: <8} | {message}"


def _independent_logger():
    """Copy of the global loguru logger with a separate, handler-less core."""
    # Sinks such as sys.stderr cannot be deep-copied, so the handler table
    # is swapped for an empty one instead of being copied.
    return copy.deepcopy(logger, {id(logger._core.handlers): {}})


def _noop_exit(code: int) -> None:
    return None


class StreamLogger:
    """Leveled logger writing to exactly one sink."""

    def __init__(
        self,
        sink: Any,
        level: Level | str = Level.INFO,
        *,
        name: str = "",
        exit_func: Callable[[int], Any] = sys.exit,
        fmt: str = STREAM_FORMAT,
    ):
        self.name = name
        self.exit_func = exit_func
        self._format = fmt
        self._level = Level.parse(level)
        self._lock = threading.Lock()
        self._core_logger = _independent_logger()
        self._logger = self._core_logger.bind(stream=name)
        self._sink = sink
        self._handler_id: int | None = self._attach(sink)

    @classmethod
    def without_exit(cls, sink: Any, level: Level | str = Level.INFO, **kwargs) -> "StreamLogger":
        """Build a logger whose shutdown/fatal never terminate the process."""
        return cls(sink, level, exit_func=_noop_exit, **kwargs)

    def _attach(self, sink: Any) -> int:
        return self._core_logger.add(
            sink,
            level=0,
            format=self._format,
            colorize=False,
        )

    @property
    def level(self) -> Level:
        return self._level

    def get_level(self) -> Level:
        return self._level

    def set_level(self, level: Level | str) -> None:
        self._level = Level.parse(level)

    def enabled_for(self, level: Level | str) -> bool:
        return Level.parse(level).no >= self._level.no

    @property
    def sink(self) -> Any:
        return self._sink

    @property
    def closed(self) -> bool:
        return self._handler_id is None

    def set_output(self, sink: Any) -> None:
        """Redirect this logger to a different sink."""
        with self._lock:
            if self._handler_id is not None:
                self._core_logger.remove(self._handler_id)
            self._sink = sink
            self._handler_id = self._attach(sink)

    def log(self, level: Level | str, message: str, *args: Any, **kwargs: Any) -> None:
        level = Level.parse(level)
        if level.no < self._level.no or self._handler_id is None:
            return
        self._logger.log(level.value, message, *args, **kwargs)

    def trace(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.TRACE, message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(Level.CRITICAL, message, *args, **kwargs)

    def fatal(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log at CRITICAL, then hand exit code 1 to the exit function."""
        self.log(Level.CRITICAL, message, *args, **kwargs)
        self.exit_func(1)

    def close(self) -> None:
        """Remove the sink handler; later records are dropped."""
        with self._lock:
            if self._handler_id is not None:
                self._core_logger.remove(self._handler_id)
                self._handler_id = None

    def shutdown(self, exit_code: int = 0) -> None:
        self.close()
        self.exit_func(exit_code)

    def __repr__(self) -> str:
        return f"StreamLogger(name={self.name!r}, level={self._level.value})"
