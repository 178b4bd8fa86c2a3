"""Shared pytest fixtures for loghandles tests."""

import errno
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from loghandles.enums import Level
from loghandles.registry import Registry
from loghandles.stream_logger import StreamLogger
from loghandles.trigger import RotationTrigger
from loghandles.writer import FileWriter


class CountingWriter(FileWriter):
    """FileWriter that records how often it was reopened."""

    def __init__(self, path, on_reopen: Callable[[], None] | None = None):
        super().__init__(path)
        self.reopen_calls = 0
        self.on_reopen = on_reopen

    def reopen(self) -> None:
        self.reopen_calls += 1
        if self.on_reopen is not None:
            self.on_reopen()
        super().reopen()


class FailingWriter(FileWriter):
    """FileWriter whose reopen always fails."""

    def __init__(self, path):
        super().__init__(path)
        self.reopen_calls = 0
        self.error = OSError(errno.EACCES, "Permission denied", str(path))

    def reopen(self) -> None:
        self.reopen_calls += 1
        raise self.error


def read_lines(path: Path) -> list[str]:
    """Return the lines of a stream file (empty if it does not exist)."""
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


def markers(path: Path) -> list[str]:
    """Return the rotation marker lines of a stream file."""
    return [line for line in read_lines(path) if "for logrotate at" in line]


@pytest.fixture
def base_path(tmp_path: Path) -> Path:
    """Directory holding the stream files."""
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def configured(base_path: Path) -> Iterator[tuple[Registry, RotationTrigger]]:
    """A configured registry whose trigger is fed only through fire()."""
    registry, trigger = Registry.new(base_path, rotation_signal=None)
    yield registry, trigger
    registry.close()


@pytest.fixture
def registry(configured: tuple[Registry, RotationTrigger]) -> Registry:
    return configured[0]


@pytest.fixture
def bootstrap_registry() -> Iterator[Registry]:
    """An unconfigured registry carrying only the early logger."""
    registry = Registry.bootstrap()
    yield registry
    registry.close()


@pytest.fixture
def add_stream(registry: Registry):
    """Register a stream backed by a test writer; returns (writer, logger)."""

    def _add(name: str, writer_cls=CountingWriter, level: Level = Level.INFO, **kwargs):
        writer = writer_cls(registry.base_path / f"{name}.log", **kwargs)
        stream_logger = StreamLogger(writer, level, name=name)
        registry.add(name, writer, stream_logger)
        return writer, stream_logger

    return _add
