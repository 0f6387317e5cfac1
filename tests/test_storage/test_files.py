"""Tests for LocalFileSystem primitives."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from lhc_telemetry.storage.files import LocalFileSystem


@pytest.fixture()
def fs() -> LocalFileSystem:
    return LocalFileSystem()


class TestWriteText:
    """Atomic whole-file replacement."""

    def test_creates_and_replaces(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        fs.write_text(path, "first\n")
        fs.write_text(path, "second\n")
        assert path.read_text(encoding="utf-8") == "second\n"

    def test_failed_replace_keeps_old_content(
        self, fs: LocalFileSystem, tmp_path: Path
    ) -> None:
        path = tmp_path / "out.json"
        path.write_text("old\n", encoding="utf-8")
        with patch("lhc_telemetry.storage.files.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError, match="boom"):
                fs.write_text(path, "new\n")
        assert path.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]


class TestReadTail:
    """Bounded reads from the end of a file."""

    def test_small_file_is_whole(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        path.write_text("a\nb\n", encoding="utf-8")
        assert fs.read_tail(path, 4096) == ("a\nb\n", True)

    def test_large_file_is_partial(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        path.write_text("0123456789\n" * 10, encoding="utf-8")
        text, whole = fs.read_tail(path, 15)
        assert whole is False
        assert text == "456789\n0123456789\n"[-15:]

    def test_cut_multibyte_character_is_replaced(
        self, fs: LocalFileSystem, tmp_path: Path
    ) -> None:
        path = tmp_path / "h.jsonl"
        path.write_bytes("xé\n".encode("utf-8"))
        text, whole = fs.read_tail(path, 2)
        assert whole is False
        assert text == "\ufffd\n"


class TestAppendLine:
    """Line-oriented appends."""

    def test_creates_file(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        fs.append_line(path, "one")
        fs.append_line(path, "two")
        assert path.read_text(encoding="utf-8") == "one\ntwo\n"

    def test_repairs_missing_newline(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        path.write_text("partial", encoding="utf-8")
        fs.append_line(path, "next")
        assert path.read_text(encoding="utf-8") == "partial\nnext\n"


class TestDirectories:
    """Pre-flight helpers."""

    def test_ensure_dir_nested(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"
        fs.ensure_dir(target)
        fs.check_writable(target)
        assert target.is_dir()

    def test_check_writable_rejects_file(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "plain"
        path.write_text("", encoding="utf-8")
        with pytest.raises(NotADirectoryError):
            fs.check_writable(path)

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_check_writable_rejects_read_only(
        self, fs: LocalFileSystem, tmp_path: Path
    ) -> None:
        target = tmp_path / "ro"
        target.mkdir()
        target.chmod(0o500)
        try:
            with pytest.raises(PermissionError):
                fs.check_writable(target)
        finally:
            target.chmod(0o700)


class TestTouchAndRead:
    """Creating empty files and lenient decoding."""

    def test_touch_creates_empty(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        fs.touch(path)
        assert path.read_bytes() == b""

    def test_touch_keeps_content(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        path.write_text("kept\n", encoding="utf-8")
        fs.touch(path)
        assert path.read_text(encoding="utf-8") == "kept\n"

    def test_read_text_strict_by_default(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        path = tmp_path / "h.jsonl"
        path.write_bytes(b"ok\n\xff\n")
        with pytest.raises(UnicodeDecodeError):
            fs.read_text(path)
        assert fs.read_text(path, errors="replace") == "ok\n\ufffd\n"
