"""Persistence for the history log, latest snapshot, and classifier state."""

from lhc_telemetry.storage.files import LocalFileSystem
from lhc_telemetry.storage.history import HistoryStore, RetentionPolicy, TrimResult, parse_record
from lhc_telemetry.storage.snapshot import SnapshotWriter
from lhc_telemetry.storage.state import ClassifierStateStore

__all__ = [
    "ClassifierStateStore",
    "HistoryStore",
    "LocalFileSystem",
    "RetentionPolicy",
    "SnapshotWriter",
    "TrimResult",
    "parse_record",
]
