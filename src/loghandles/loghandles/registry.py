"""Concurrent registry of named, reopenable log streams.

A Registry maps stream names to Entry objects under one reader/writer lock.
It is created either configured (Registry.new) or as a bootstrap registry
(Registry.bootstrap) that only carries a stderr logger until promote()
supplies the base directory and subscribes the rotation trigger.

Lock policy:
    - writer lookups and name reads take the shared lock
    - add/delete/promote take the exclusive lock
    - get_logger takes the exclusive lock, since callers mutate loggers
      (e.g. set_level) and the reopen pass toggles levels too
    - visit() holds the exclusive lock for the whole walk
"""

import os
import signal
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from .enums import Level
from .errors import NotConfiguredError, ReservedNameError
from .locks import ReadWriteLock
from .models import EARLY_NAME, Configured, Entry, Unconfigured
from .reopen import ReopenCoordinator
from .stream_logger import StreamLogger
from .timestamps import utc_timestamp
from .trigger import RotationTrigger
from .writer import FileWriter, StderrWriter

Visitor = Callable[[Entry], bool | None]


class Registry:
    """Name -> Entry map with a bootstrap/configured lifecycle."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._entries: dict[str, Entry] = {}
        self._state: Unconfigured | Configured = Unconfigured()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(
        cls,
        base_path: str | os.PathLike[str],
        rotation_signal: int | None = signal.SIGUSR2,
    ) -> tuple["Registry", RotationTrigger]:
        """Return a configured registry and its rotation trigger."""
        registry = cls()
        trigger = RotationTrigger(rotation_signal)
        registry._state = Configured(base_path=Path(base_path), trigger=trigger)
        logger.debug("Log handle registry configured at {}", base_path)
        return registry, trigger

    @classmethod
    def bootstrap(cls, level: Level | str = Level.DEBUG) -> "Registry":
        """Return an unconfigured registry holding only the early stderr logger.

        The early logger never terminates the process: its shutdown() and
        fatal() only log.
        """
        registry = cls()
        early = StreamLogger.without_exit(StderrWriter(), Level.INFO, name=EARLY_NAME)
        early.info("Started early logging at {}", utc_timestamp())
        early.set_level(level)
        registry._entries[EARLY_NAME] = Entry(name=EARLY_NAME, logger=early)
        return registry

    def promote(
        self,
        base_path: str | os.PathLike[str],
        rotation_signal: int | None = signal.SIGUSR2,
    ) -> RotationTrigger:
        """Upgrade a bootstrap registry; idempotent once configured.

        A configured registry returns its existing trigger and ignores the
        arguments.
        """
        with self._lock.exclusive():
            if isinstance(self._state, Configured):
                return self._state.trigger

            # subscribe first: signal.signal() raises outside the main thread
            trigger = RotationTrigger(rotation_signal)

            early = self._entries.pop(EARLY_NAME, None)
            if early is not None:
                early.logger.shutdown(0)
            self._state = Configured(base_path=Path(base_path), trigger=trigger)
        logger.info("Log handle registry promoted, base path {}", base_path)
        return trigger

    # ------------------------------------------------------------------
    # Lifecycle state
    # ------------------------------------------------------------------

    @property
    def configured(self) -> bool:
        return isinstance(self._state, Configured)

    def _require_configured(self) -> Configured:
        state = self._state
        if not isinstance(state, Configured):
            raise NotConfiguredError("registry has not been promoted to a base path yet")
        return state

    @property
    def base_path(self) -> Path:
        return self._require_configured().base_path

    @property
    def trigger(self) -> RotationTrigger:
        return self._require_configured().trigger

    # ------------------------------------------------------------------
    # Early logging
    # ------------------------------------------------------------------

    def early_log(self, message: str, *args: Any) -> None:
        """Log through the bootstrap logger; no-op once configured."""
        with self._lock.shared():
            if isinstance(self._state, Configured):
                return
            self._entries[EARLY_NAME].logger.info(message, *args)

    def early_fatal(self, message: str, *args: Any) -> None:
        """Log at CRITICAL through the bootstrap logger; no-op once configured."""
        with self._lock.shared():
            if isinstance(self._state, Configured):
                return
            self._entries[EARLY_NAME].logger.fatal(message, *args)

    # ------------------------------------------------------------------
    # Map operations
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        writer: FileWriter | StderrWriter | None,
        stream_logger: StreamLogger,
    ) -> None:
        """Register (or replace) the entry for name.

        A replaced entry is dropped without closing its writer or logger.
        """
        if name == EARLY_NAME:
            raise ReservedNameError(name)
        entry = Entry(name=name, writer=writer, logger=stream_logger)
        with self._lock.exclusive():
            self._entries[name] = entry

    def get_writer(self, name: str) -> FileWriter | StderrWriter | None:
        with self._lock.shared():
            entry = self._entries.get(name)
        return entry.writer if entry is not None else None

    def get_logger(self, name: str) -> StreamLogger | None:
        with self._lock.exclusive():
            entry = self._entries.get(name)
        return entry.logger if entry is not None else None

    def delete(self, name: str) -> Entry | None:
        """Remove the writer and logger registered under name together.

        The removed entry is returned unclosed; closing it is up to the caller.
        """
        with self._lock.exclusive():
            entry = self._entries.pop(name, None)
        if entry is not None:
            logger.debug("Removed log stream {}", name)
        return entry

    def names(self) -> list[str]:
        with self._lock.shared():
            return list(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock.shared():
            return name in self._entries

    def __len__(self) -> int:
        with self._lock.shared():
            return len(self._entries)

    def visit(self, visitor: Visitor) -> None:
        """Call visitor once per entry while holding the exclusive lock.

        Entries are visited in registration order. A visitor returning False
        ends the walk early. The lock is released on every exit path.
        """
        with self._lock.exclusive():
            for entry in list(self._entries.values()):
                if visitor(entry) is False:
                    break

    # ------------------------------------------------------------------
    # Stream opener
    # ------------------------------------------------------------------

    def open(self, name: str, level: Level | str = Level.INFO) -> StreamLogger:
        """Create the stream ``<base_path>/<name>.log`` and register it.

        An existing file at that path is first renamed to
        ``<name>.log.<UTC RFC 3339 timestamp>`` when possible. Failing to
        create the new file raises OSError and registers nothing.
        """
        if name == EARLY_NAME:
            raise ReservedNameError(name)
        level = Level.parse(level)
        path = self.base_path / f"{name}.log"

        stamp = utc_timestamp()
        try:
            os.rename(path, path.with_name(f"{path.name}.{stamp}"))
        except OSError as e:
            # nothing to move aside, or lost a race for it
            logger.debug("Not moving aside {}: {}", path, e)

        writer = FileWriter(path)
        stream_logger = StreamLogger(writer, Level.INFO, name=name)
        stream_logger.info("Started logfile `{}` at {}", name, utc_timestamp())
        stream_logger.set_level(level)

        self.add(name, writer, stream_logger)
        logger.debug("Opened log stream {} at {} (level {})", name, path, level.value)
        return stream_logger

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def coordinator(
        self,
        ignore_prefix: str = "",
        on_abort: Callable[[OSError], Any] | None = None,
    ) -> ReopenCoordinator:
        return ReopenCoordinator(self, self.trigger, ignore_prefix, on_abort)

    def run_reopen_loop(
        self,
        ignore_prefix: str = "",
        on_abort: Callable[[OSError], Any] | None = None,
    ) -> None:
        """Reopen all streams on every rotation trigger; blocks until stopped."""
        self.coordinator(ignore_prefix, on_abort).run()

    def start_reopen_loop(
        self,
        ignore_prefix: str = "",
        on_abort: Callable[[OSError], Any] | None = None,
    ) -> ReopenCoordinator:
        """Run the reopen loop in a daemon thread; stop it via the coordinator."""
        coordinator = self.coordinator(ignore_prefix, on_abort)
        coordinator.start()
        return coordinator

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the trigger, every logger and every writer. Idempotent."""
        with self._lock.exclusive():
            entries = list(self._entries.values())
            self._entries.clear()
            state = self._state
        if isinstance(state, Configured):
            state.trigger.close()
        for entry in entries:
            entry.close()

    def __enter__(self) -> "Registry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "configured" if self.configured else "bootstrap"
        return f"Registry({state}, streams={len(self)})"
