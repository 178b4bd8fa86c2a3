"""Tests for the reopenable writers."""

from pathlib import Path

import pytest

from loghandles.writer import FileWriter, StderrWriter


class TestFileWriter:
    def test_creates_and_appends(self, tmp_path: Path):
        path = tmp_path / "a.log"
        path.write_text("existing\n")

        writer = FileWriter(path)
        writer.write("text line\n")
        writer.write(b"bytes line\n")
        writer.close()

        assert path.read_text() == "existing\ntext line\nbytes line\n"

    def test_reopen_after_rename_creates_fresh_file(self, tmp_path: Path):
        path = tmp_path / "a.log"
        writer = FileWriter(path)
        writer.write("one\n")
        path.rename(tmp_path / "a.log.1")
        writer.write("two\n")

        writer.reopen()
        writer.write("three\n")
        writer.close()

        assert (tmp_path / "a.log.1").read_text() == "one\ntwo\n"
        assert path.read_text() == "three\n"

    def test_failed_reopen_keeps_old_descriptor(self, tmp_path: Path):
        """If the path cannot be reopened, writes keep going to the old file."""
        directory = tmp_path / "gone"
        directory.mkdir()
        writer = FileWriter(directory / "a.log")
        (directory / "a.log").rename(tmp_path / "moved.log")
        directory.rmdir()

        with pytest.raises(FileNotFoundError):
            writer.reopen()
        writer.write("still here\n")
        writer.close()

        assert (tmp_path / "moved.log").read_text() == "still here\n"

    def test_write_after_close_raises(self, tmp_path: Path):
        writer = FileWriter(tmp_path / "a.log")
        writer.close()
        assert writer.closed
        with pytest.raises(ValueError):
            writer.write("late\n")

    def test_close_is_idempotent(self, tmp_path: Path):
        writer = FileWriter(tmp_path / "a.log")
        writer.close()
        writer.close()

    def test_open_failure_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            FileWriter(tmp_path / "missing" / "a.log")


class TestStderrWriter:
    def test_writes_to_current_stderr(self, capsys):
        StderrWriter().write("to stderr\n")
        assert capsys.readouterr().err == "to stderr\n"

    def test_decodes_bytes(self, capsys):
        StderrWriter().write(b"raw\n")
        assert capsys.readouterr().err == "raw\n"

    def test_reopen_is_noop(self, capsys):
        writer = StderrWriter()
        writer.reopen()
        writer.close()
        writer.write("after\n")
        assert capsys.readouterr().err == "after\n"
