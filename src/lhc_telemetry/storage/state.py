"""Persisted classifier state: the last resolved species.

The file holds ``{"species": "<protons|ions>"}``. A missing or unreadable
file means no prior state; it never fails the cycle on read.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from lhc_telemetry.classification.classifier import KNOWN_SPECIES
from lhc_telemetry.exceptions import StorageError
from lhc_telemetry.storage.files import LocalFileSystem

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("lhc_telemetry")


class ClassifierStateStore:
    """Reads and writes the last-known species.

    Args:
        path: State file.
        fs: File-system primitives; defaults to :class:`LocalFileSystem`.
    """

    def __init__(self, path: Path, fs: LocalFileSystem | None = None) -> None:
        self._path = path
        self._fs = fs or LocalFileSystem()

    def load(self) -> str | None:
        """Return the persisted species, or ``None`` when there is none."""
        if not self._fs.exists(self._path):
            return None
        try:
            state = json.loads(self._fs.read_text(self._path))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable classifier state %s: %s", self._path, exc)
            return None
        species = state.get("species") if isinstance(state, dict) else None
        return species if species in KNOWN_SPECIES else None

    def save(self, species: str) -> bool:
        """Persist *species* if it is a known species.

        Returns:
            ``True`` if the state file was written.

        Raises:
            StorageError: If the file cannot be written.
        """
        if species not in KNOWN_SPECIES:
            return False
        try:
            self._fs.write_text(self._path, json.dumps({"species": species}) + "\n")
        except OSError as exc:
            raise StorageError(f"Cannot write classifier state {self._path}: {exc}") from exc
        return True
