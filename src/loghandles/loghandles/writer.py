"""Reopenable byte sinks backing the log streams.

A FileWriter keeps one append-mode descriptor for a path. After an external
tool renames the file, reopen() creates a fresh file at the same path and
swaps it in under the writer's lock, so concurrent writes never see a
closed descriptor.
"""

import os
import sys
import threading
from pathlib import Path
from typing import BinaryIO


class FileWriter:
    """Thread-safe append-only writer bound to a filesystem path."""

    def __init__(self, path: str | os.PathLike[str]):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._fh: BinaryIO | None = self._open()

    def _open(self) -> BinaryIO:
        # O_WRONLY | O_APPEND | O_CREAT, mode 0o666 minus umask
        return open(self._path, "ab")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._fh is None

    def write(self, data: str | bytes) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")
        with self._lock:
            if self._fh is None:
                raise ValueError(f"write to closed writer for {self._path}")
            written = self._fh.write(data)
            self._fh.flush()
            return written

    def flush(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.flush()

    def reopen(self) -> None:
        """Point the writer at a fresh descriptor for the same path.

        Raises OSError if the path cannot be opened; the previous
        descriptor stays in use in that case.
        """
        with self._lock:
            fresh = self._open()
            old, self._fh = self._fh, fresh
            if old is not None:
                old.close()

    def close(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None

    def __repr__(self) -> str:
        return f"FileWriter({str(self._path)!r})"


class StderrWriter:
    """Sink for the bootstrap logger; reopening it does nothing."""

    def write(self, data: str | bytes) -> int:
        # Looked up per call so redirected/captured stderr is honoured.
        stream = sys.stderr
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        written = stream.write(data)
        stream.flush()
        return written

    def flush(self) -> None:
        sys.stderr.flush()

    def reopen(self) -> None:
        return None

    def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return "StderrWriter()"
