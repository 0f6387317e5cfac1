"""Latest-sample snapshot: one pretty-printed JSON object, replaced every cycle."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from lhc_telemetry.exceptions import StorageError
from lhc_telemetry.storage.files import LocalFileSystem

if TYPE_CHECKING:
    from pathlib import Path

    from lhc_telemetry.sample import Sample


class SnapshotWriter:
    """Overwrites the latest snapshot. Last write wins; nothing is merged.

    Args:
        path: Snapshot file.
        fs: File-system primitives; defaults to :class:`LocalFileSystem`.
    """

    def __init__(self, path: Path, fs: LocalFileSystem | None = None) -> None:
        self._path = path
        self._fs = fs or LocalFileSystem()

    @property
    def path(self) -> Path:
        return self._path

    def write_latest(self, sample: Sample) -> None:
        """Replace the snapshot with *sample*, provenance included.

        Raises:
            StorageError: If the file cannot be written.
        """
        text = json.dumps(sample.to_record(include_provenance=True), indent=2) + "\n"
        try:
            self._fs.write_text(self._path, text)
        except OSError as exc:
            raise StorageError(f"Cannot write snapshot {self._path}: {exc}") from exc
