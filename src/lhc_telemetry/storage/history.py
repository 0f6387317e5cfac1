"""Append-only JSON Lines history with deduplication and retention trimming.

Invariants after every append + trim:

- records are in non-decreasing ``timestamp`` order,
- at most one record per bucket,
- every record is within the retention window and the count is capped.

The append decision reads only the tail of the file. Trimming reads the
whole file, drops lines that are not valid UTF-8 JSON objects with a numeric
``timestamp``, and rewrites the file only when its content changes. A failed
trim is logged and leaves the file as it was; a failed append propagates.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lhc_telemetry.exceptions import StorageError
from lhc_telemetry.sample import TRACKED_FIELDS
from lhc_telemetry.storage.files import LocalFileSystem

if TYPE_CHECKING:
    from pathlib import Path

    from lhc_telemetry.config import TelemetryConfig
    from lhc_telemetry.sample import Sample

logger = logging.getLogger("lhc_telemetry")

# Initial tail window; doubled until a whole parseable line is recovered.
TAIL_BYTES = 4096

EXACT = "exact"
TOLERANCE = "tolerance"


@dataclass(frozen=True, slots=True)
class RetentionPolicy:
    """Bucketing and retention settings for one history file.

    Attributes:
        retention_seconds: Maximum record age kept by trimming.
        max_points: Maximum number of records kept by trimming.
        bucket_mode: ``"exact"`` (fixed interval boundaries) or
            ``"tolerance"`` (same bucket when close in time and equal).
        interval_seconds: Bucket width in exact mode.
        tolerance_seconds: Same-bucket window in tolerance mode.
    """

    retention_seconds: int
    max_points: int
    bucket_mode: str = EXACT
    interval_seconds: int = 600
    tolerance_seconds: int = 60

    @classmethod
    def from_config(cls, config: TelemetryConfig) -> RetentionPolicy:
        return cls(
            retention_seconds=config.retention_window_seconds,
            max_points=config.max_points,
            bucket_mode=config.bucket_mode,
            interval_seconds=config.sample_interval_seconds,
            tolerance_seconds=config.dedup_tolerance_seconds,
        )


@dataclass(frozen=True, slots=True)
class TrimResult:
    """Outcome of one trim pass.

    Attributes:
        before: Non-empty lines in the file before trimming.
        after: Records kept.
        corrupt: Lines dropped because they did not parse.
        rewritten: Whether the file was rewritten.
        error: Failure text when the trim was skipped.
    """

    before: int = 0
    after: int = 0
    corrupt: int = 0
    rewritten: bool = False
    error: str | None = None


def parse_record(line: str) -> dict[str, Any] | None:
    """Parse one history line, or return ``None`` if it is unusable."""
    try:
        record = json.loads(line)
    except (ValueError, RecursionError):
        return None
    if not isinstance(record, dict):
        return None
    timestamp = record.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    if not math.isfinite(timestamp):
        return None
    return record


class HistoryStore:
    """Owns the history log file.

    Args:
        path: JSON Lines file holding one sample per line.
        policy: Bucketing and retention settings.
        fs: File-system primitives; defaults to :class:`LocalFileSystem`.
    """

    def __init__(
        self,
        path: Path,
        policy: RetentionPolicy,
        fs: LocalFileSystem | None = None,
    ) -> None:
        self._path = path
        self._policy = policy
        self._fs = fs or LocalFileSystem()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def policy(self) -> RetentionPolicy:
        return self._policy

    def bucket_for(self, now: float) -> int:
        """Return the bucket timestamp for an observation made at *now*.

        Exact mode floors to the interval boundary; tolerance mode keeps the
        whole-second fetch time and defers bucketing to the append decision.
        """
        if self._policy.bucket_mode == EXACT:
            interval = self._policy.interval_seconds
            return int(now // interval) * interval
        return int(now)

    def last_record(self) -> dict[str, Any] | None:
        """Return the newest parseable record from the tail of the file."""
        if not self._fs.exists(self._path):
            return None
        window = TAIL_BYTES
        while True:
            tail, whole = self._fs.read_tail(self._path, window)
            lines = tail.splitlines()
            if not whole:
                # The first line of a partial window may be cut.
                lines = lines[1:]
            for line in reversed(lines):
                if line.strip():
                    record = parse_record(line)
                    if record is not None:
                        return record
            if whole:
                return None
            window *= 2

    def is_duplicate(self, sample: Sample, last: dict[str, Any] | None) -> bool:
        """Decide whether *sample* belongs to the bucket of *last*.

        Exact mode: duplicate unless the bucket is strictly newer.
        Tolerance mode: duplicate when within the tolerance and every tracked
        field is equal. A sample older than *last* is never appended.
        """
        if last is None:
            return False
        last_ts = last["timestamp"]
        if self._policy.bucket_mode == EXACT:
            return sample.timestamp <= last_ts
        if sample.timestamp < last_ts:
            return True
        if sample.timestamp - last_ts > self._policy.tolerance_seconds:
            return False
        signals = sample.signals()
        return all(last.get(name) == signals[name] for name in TRACKED_FIELDS)

    def append(self, sample: Sample) -> bool:
        """Append *sample* unless it duplicates the last stored bucket.

        Returns:
            ``True`` if a line was appended.

        Raises:
            StorageError: If the file cannot be read or appended to.
        """
        try:
            last = self.last_record()
            if self.is_duplicate(sample, last):
                logger.info(
                    "Skip append (duplicate bucket): last=%s t=%d",
                    last["timestamp"] if last else None,
                    sample.timestamp,
                )
                return False
            line = json.dumps(sample.to_record(include_provenance=False), separators=(",", ":"))
            self._fs.append_line(self._path, line)
        except OSError as exc:
            raise StorageError(f"Cannot append to {self._path}: {exc}") from exc
        logger.info("Appended bucket t=%d", sample.timestamp)
        return True

    def trim(self, now: float) -> TrimResult:
        """Apply the retention window and point cap.

        Never raises. Undecodable or unparseable lines count as corrupt and
        are dropped; an I/O failure is logged and reported in the result,
        leaving the file untouched.

        Args:
            now: Current time in seconds since the epoch.
        """
        try:
            if not self._fs.exists(self._path):
                return TrimResult()
            text = self._fs.read_text(self._path, errors="replace")
            lines = [line.strip() for line in text.splitlines()]
            lines = [line for line in lines if line]

            valid: list[tuple[float, str]] = []
            for line in lines:
                record = parse_record(line)
                if record is not None:
                    valid.append((record["timestamp"], line))
            corrupt = len(lines) - len(valid)

            cutoff = now - self._policy.retention_seconds
            kept = [line for timestamp, line in valid if timestamp >= cutoff]
            if len(kept) > self._policy.max_points:
                kept = kept[len(kept) - self._policy.max_points :]

            rewritten = len(kept) != len(lines)
            if rewritten:
                self._fs.write_text(self._path, "".join(line + "\n" for line in kept))
                logger.info("Trimmed history: %d -> %d (%d corrupt)", len(lines), len(kept), corrupt)
            else:
                logger.debug("No trim needed: %d points", len(kept))
            return TrimResult(
                before=len(lines),
                after=len(kept),
                corrupt=corrupt,
                rewritten=rewritten,
            )
        except (OSError, ValueError) as exc:
            logger.warning("Trim step skipped: %s", exc)
            return TrimResult(error=str(exc))
