"""Reopen coordinator: reacts to rotation triggers.

Each trigger starts one pass over the registry under its exclusive lock.
Every stream (minus those matching the ignore prefix) gets its writer
reopened and a marker line written at INFO, whatever the stream's level.
The first failed reopen ends the pass: streams not reached yet keep their
old descriptor until the next trigger, and the error goes to on_abort.
Any other exception escapes run_once(); run() logs it and keeps waiting.
"""

import threading
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from loguru import logger

from .enums import Level
from .models import Entry
from .timestamps import utc_timestamp
from .trigger import RotationTrigger

if TYPE_CHECKING:
    from .registry import Registry


class CoordinatorState(StrEnum):
    IDLE = "idle"
    SIGNALED = "signaled"
    ITERATING = "iterating"
    STOPPED = "stopped"


def _log_abort(error: OSError) -> None:
    logger.error("Log reopen pass aborted: {}", error)


class ReopenCoordinator:
    """Long-running task reopening registered streams on each trigger."""

    def __init__(
        self,
        registry: "Registry",
        trigger: RotationTrigger,
        ignore_prefix: str = "",
        on_abort: Callable[[OSError], Any] | None = None,
    ):
        self.registry = registry
        self.trigger = trigger
        self.ignore_prefix = ignore_prefix
        self.on_abort = on_abort or _log_abort
        self.passes = 0
        self.aborted = 0
        self._state = CoordinatorState.IDLE
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def _skips(self, entry: Entry) -> bool:
        if entry.writer is None:
            return True
        return bool(self.ignore_prefix) and entry.name.startswith(self.ignore_prefix)

    def run_once(self) -> bool:
        """Run one reopen pass. Returns False if it was aborted."""
        failure: OSError | None = None
        reopened: list[str] = []

        def reopen_entry(entry: Entry) -> bool:
            nonlocal failure
            if self._skips(entry):
                return True
            try:
                entry.writer.reopen()
            except OSError as e:
                failure = e
                return False

            stream_logger = entry.logger
            level = stream_logger.level
            stream_logger.set_level(Level.INFO)
            try:
                stream_logger.info(
                    "Reopened logfile `{}` for logrotate at {}",
                    entry.name,
                    utc_timestamp(),
                )
            finally:
                stream_logger.set_level(level)
            reopened.append(entry.name)
            return True

        self._state = CoordinatorState.ITERATING
        try:
            self.registry.visit(reopen_entry)
        finally:
            self._state = CoordinatorState.IDLE
        self.passes += 1

        if failure is not None:
            self.aborted += 1
            logger.warning(
                "Reopen pass aborted after {} stream(s): {}", len(reopened), failure
            )
            self.on_abort(failure)
            return False

        logger.info("Reopened {} log stream(s) for rotation", len(reopened))
        return True

    def run(self) -> None:
        """Wait for triggers and run a pass for each, until stopped or closed."""
        self._state = CoordinatorState.IDLE
        try:
            while not self._stop.is_set():
                if not self.trigger.wait():
                    if self.trigger.closed:
                        break
                    continue
                if self._stop.is_set():
                    break
                self._state = CoordinatorState.SIGNALED
                try:
                    self.run_once()
                except Exception:
                    logger.exception("Reopen pass failed; waiting for the next trigger")
        finally:
            self._state = CoordinatorState.STOPPED
        logger.debug("Reopen coordinator stopped after {} pass(es)", self.passes)

    def start(self, name: str = "loghandles-reopen") -> threading.Thread:
        thread = threading.Thread(target=self.run, name=name, daemon=True)
        self._thread = thread
        thread.start()
        return thread

    def stop(self, timeout: float | None = None) -> None:
        """Ask run() to return; joins the background thread if start() was used.

        The rotation trigger subscription itself stays open.
        """
        self._stop.set()
        self.trigger.interrupt()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
