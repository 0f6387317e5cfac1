"""Tests for CycleLogger and CycleRecord."""

from __future__ import annotations

import logging

import pytest

from lhc_telemetry.config import TelemetryConfig
from lhc_telemetry.logging.logger import CycleLogger
from lhc_telemetry.logging.types import CycleRecord


def _make_record(**overrides: object) -> CycleRecord:
    """Create a CycleRecord with sensible defaults, overridable."""
    defaults: dict[str, object] = {
        "timestamp": 1_699_999_800,
        "source": "https://example.invalid/vistars.json",
        "species": "protons",
        "rule": "energy",
        "energy": 6800.0,
        "speed": 0.99999999,
        "beam_intensity_1": 1.1e14,
        "beam_intensity_2": 1.0e14,
        "luminosity": None,
        "missing_signals": ("luminosity",),
        "appended": True,
        "history_before": 10,
        "history_after": 10,
        "corrupt_lines": 0,
        "trim_error": None,
        "fetch_ms": 1.5,
        "total_ms": 3.0,
    }
    defaults.update(overrides)
    return CycleRecord(**defaults)  # type: ignore[arg-type]


def _config(log_level: str, diagnostic_mode: bool = False) -> TelemetryConfig:
    return TelemetryConfig(
        _env_file=None,
        log_level=log_level,
        diagnostic_mode=diagnostic_mode,  # type: ignore[call-arg]
    )


class TestCycleRecord:
    """Tests for CycleRecord immutability."""

    def test_frozen(self) -> None:
        """CycleRecord should reject attribute mutation."""
        record = _make_record()
        with pytest.raises(AttributeError):
            record.species = "ions"  # type: ignore[misc]

    def test_slots(self) -> None:
        record = _make_record()
        assert hasattr(record, "__slots__")


class TestCycleLogger:
    """Tests for CycleLogger."""

    def test_log_level_none_no_output(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_level='none' should produce no log output."""
        log = CycleLogger(_config("none"))
        with caplog.at_level(logging.DEBUG, logger="lhc_telemetry"):
            log.log_cycle(_make_record())
        assert len(caplog.records) == 0

    def test_log_level_summary_output(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_level='summary' should produce a one-line summary."""
        log = CycleLogger(_config("summary"))
        with caplog.at_level(logging.DEBUG, logger="lhc_telemetry"):
            log.log_cycle(_make_record())
        assert len(caplog.records) == 1
        msg = caplog.records[0].message
        assert "t=1699999800" in msg
        assert "species=protons (energy)" in msg
        assert "energy=6800" in msg
        assert "lumi=null" in msg
        assert "missing=[luminosity]" in msg
        assert "history=10->10" in msg
        assert "corrupt=" not in msg

    def test_summary_reports_corrupt_lines(self, caplog: pytest.LogCaptureFixture) -> None:
        log = CycleLogger(_config("summary"))
        with caplog.at_level(logging.DEBUG, logger="lhc_telemetry"):
            log.log_cycle(_make_record(corrupt_lines=2, history_after=8))
        assert "history=10->8 corrupt=2" in caplog.records[0].message

    def test_log_level_full_json(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_level='full' should produce a JSON dump."""
        log = CycleLogger(_config("full"))
        with caplog.at_level(logging.DEBUG, logger="lhc_telemetry"):
            log.log_cycle(_make_record())
        assert len(caplog.records) == 1
        msg = caplog.records[0].message
        assert "cycle_record:" in msg
        assert '"species": "protons"' in msg
        assert '"luminosity": null' in msg

    def test_diagnostic_mode_stores_records(self) -> None:
        log = CycleLogger(_config("none", diagnostic_mode=True))
        for timestamp in (600, 1200, 1800):
            log.log_cycle(_make_record(timestamp=timestamp))
        data = log.get_diagnostic_data()
        assert [r.timestamp for r in data] == [600, 1200, 1800]

    def test_diagnostic_mode_false_no_storage(self) -> None:
        log = CycleLogger(_config("summary"))
        log.log_cycle(_make_record())
        assert log.get_diagnostic_data() == []

    def test_get_diagnostic_data_returns_copy(self) -> None:
        """get_diagnostic_data() should return a copy, not the internal list."""
        log = CycleLogger(_config("none", diagnostic_mode=True))
        log.log_cycle(_make_record())
        data = log.get_diagnostic_data()
        data.clear()
        assert len(log.get_diagnostic_data()) == 1

    def test_summary_stats_empty(self) -> None:
        log = CycleLogger(_config("none", diagnostic_mode=True))
        assert log.get_summary_stats() == {}

    def test_summary_stats_computed(self) -> None:
        """Summary stats should aggregate appends, species, and timings."""
        log = CycleLogger(_config("none", diagnostic_mode=True))
        log.log_cycle(_make_record(fetch_ms=1.0, total_ms=2.0))
        log.log_cycle(
            _make_record(
                appended=False,
                species="ions",
                missing_signals=(),
                fetch_ms=3.0,
                total_ms=4.0,
            )
        )
        log.log_cycle(_make_record(appended=True, missing_signals=(), fetch_ms=2.0, total_ms=6.0))

        stats = log.get_summary_stats()
        assert stats["total_cycles"] == 3
        assert stats["appended_count"] == 2
        assert stats["duplicate_count"] == 1
        assert stats["degraded_count"] == 1
        assert stats["species_counts"] == {"protons": 2, "ions": 1}
        assert abs(stats["mean_fetch_ms"] - 2.0) < 1e-10
        assert abs(stats["mean_total_ms"] - 4.0) < 1e-10
        assert stats["max_total_ms"] == 6.0
