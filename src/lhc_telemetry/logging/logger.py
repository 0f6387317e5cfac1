"""Diagnostic logger for pull-and-persist cycles.

Uses the standard ``logging`` module with the ``"lhc_telemetry"`` logger.
No ``print()`` statements. Supports three verbosity levels and an in-memory
diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lhc_telemetry.config import TelemetryConfig
    from lhc_telemetry.logging.types import CycleRecord

logger = logging.getLogger("lhc_telemetry")


def _fmt(value: float | None) -> str:
    return "null" if value is None else f"{value:.6g}"


class CycleLogger:
    """Per-cycle diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per cycle with the resolved values, missing
        signals, species and rule, append/trim outcome, and timing.

        ``"full"``: Full JSON dump of all record fields.
    """

    def __init__(self, config: TelemetryConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[CycleRecord] = []

    def log_cycle(self, record: CycleRecord) -> None:
        """Log one completed cycle.

        Args:
            record: Immutable summary of the cycle.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "t=%d species=%s (%s) energy=%s speed=%s ib1=%s ib2=%s lumi=%s "
                "missing=[%s] appended=%s history=%d->%d%s fetch=%.2fms total=%.2fms",
                record.timestamp,
                record.species,
                record.rule,
                _fmt(record.energy),
                _fmt(record.speed),
                _fmt(record.beam_intensity_1),
                _fmt(record.beam_intensity_2),
                _fmt(record.luminosity),
                ",".join(record.missing_signals),
                record.appended,
                record.history_before,
                record.history_after,
                f" corrupt={record.corrupt_lines}" if record.corrupt_lines else "",
                record.fetch_ms,
                record.total_ms,
            )
        elif self._log_level == "full":
            logger.info("cycle_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[CycleRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        n = len(self._records)
        appended = sum(1 for r in self._records if r.appended)
        degraded = sum(1 for r in self._records if r.missing_signals)
        return {
            "total_cycles": n,
            "appended_count": appended,
            "duplicate_count": n - appended,
            "degraded_count": degraded,
            "species_counts": dict(Counter(r.species for r in self._records)),
            "mean_fetch_ms": sum(r.fetch_ms for r in self._records) / n,
            "mean_total_ms": sum(r.total_ms for r in self._records) / n,
            "max_total_ms": max(r.total_ms for r in self._records),
        }
