"""Local file-system primitives used by the stores.

Whole-file writes go through a temporary file in the target directory and
``os.replace``, so readers see either the old or the new content. Appends
are plain appends.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


class LocalFileSystem:
    """Thin ``pathlib`` wrapper; all text is UTF-8."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def check_writable(self, path: Path) -> None:
        """Raise ``PermissionError`` unless *path* is a writable directory."""
        if not path.is_dir():
            raise NotADirectoryError(f"{path} is not a directory")
        if not os.access(path, os.W_OK | os.X_OK):
            raise PermissionError(f"{path} is not writable")

    def touch(self, path: Path) -> None:
        """Create *path* empty if it does not exist; never truncates."""
        path.touch(exist_ok=True)

    def read_text(self, path: Path, errors: str = "strict") -> str:
        return path.read_text(encoding="utf-8", errors=errors)

    def read_tail(self, path: Path, max_bytes: int) -> tuple[str, bool]:
        """Read at most *max_bytes* from the end of *path*.

        Returns:
            The decoded tail and whether it starts at the beginning of the
            file. Undecodable bytes at a cut multi-byte character are replaced.
        """
        with path.open("rb") as handle:
            handle.seek(0, os.SEEK_END)
            size = handle.tell()
            start = max(0, size - max_bytes)
            handle.seek(start)
            data = handle.read()
        return data.decode("utf-8", errors="replace"), start == 0

    def write_text(self, path: Path, text: str) -> None:
        """Replace the content of *path* atomically."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def append_line(self, path: Path, line: str) -> None:
        """Append *line* plus a newline, repairing a missing final newline."""
        prefix = ""
        if path.exists() and path.stat().st_size > 0:
            with path.open("rb") as handle:
                handle.seek(-1, os.SEEK_END)
                if handle.read(1) != b"\n":
                    prefix = "\n"
        with path.open("a", encoding="utf-8", newline="\n") as handle:
            handle.write(prefix + line + "\n")
