"""Rotation trigger subscription.

Wraps the process signal table in an explicit object: the registry owns one
RotationTrigger and hands it to the reopen coordinator, instead of both
reaching for a global handler.
"""

import queue
import signal
import threading
from types import FrameType
from typing import Any

from loguru import logger

_ROTATE = "rotate"
_WAKE = "wake"


class RotationTrigger:
    """Coalescing rotation notifications, optionally fed by an OS signal.

    Every fire() is queued. wait() takes the first trigger and folds in any
    others already queued, so a burst of signals before a pass starts costs
    one pass, and a signal arriving during a pass costs exactly one more.
    fire() only touches a SimpleQueue, so it is safe to call from a signal
    handler.
    """

    def __init__(self, signum: int | None = signal.SIGUSR2):
        self._queue: queue.SimpleQueue[str] = queue.SimpleQueue()
        self._closed = False
        self._signum = signal.Signals(signum) if signum is not None else None
        self._previous: Any = None
        if self._signum is not None:
            self._previous = signal.signal(self._signum, self._handle)
            logger.debug("Subscribed to {} for log rotation", self._signum.name)

    @property
    def signum(self) -> signal.Signals | None:
        return self._signum

    @property
    def closed(self) -> bool:
        return self._closed

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        self.fire()
        if callable(self._previous):
            self._previous(signum, frame)

    def fire(self) -> None:
        """Queue one rotation trigger."""
        if self._closed:
            return
        self._queue.put(_ROTATE)

    def interrupt(self) -> None:
        """Wake a blocked wait() without delivering a trigger."""
        self._queue.put(_WAKE)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until a trigger arrives.

        Returns True for a trigger, False on interrupt(), close() or timeout.
        """
        if self._closed and self._queue.empty():
            return False
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        if item != _ROTATE:
            return False
        self._drain()
        return True

    def _drain(self) -> None:
        woken = False
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            woken = woken or item == _WAKE
        if woken:
            # keep the wakeup for the next wait()
            self._queue.put(_WAKE)

    def close(self) -> None:
        """Unsubscribe from the signal and wake any waiter. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._signum is not None:
            if threading.current_thread() is threading.main_thread():
                previous = self._previous if self._previous is not None else signal.SIG_DFL
                signal.signal(self._signum, previous)
                logger.debug("Unsubscribed from {}", self._signum.name)
            else:
                logger.debug(
                    "Leaving {} handler installed; close() called off the main thread",
                    self._signum.name,
                )
        self._queue.put(_WAKE)

    def __enter__(self) -> "RotationTrigger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        name = self._signum.name if self._signum is not None else None
        return f"RotationTrigger(signum={name}, closed={self._closed})"
