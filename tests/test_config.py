"""Tests for lhc_telemetry.config.

Covers:
- Default values
- Environment variable loading (monkeypatch os.environ)
- Retention horizon precedence (seconds over days over default)
- FORCE_SPECIES normalization and rejection
- Bucket mode and log level validation
- Derived paths and per-signal endpoints
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lhc_telemetry.config import (
    DEFAULT_MAX_POINTS,
    TelemetryConfig,
    load_config,
)
from lhc_telemetry.exceptions import ConfigValidationError


def _config(**overrides: object) -> TelemetryConfig:
    return TelemetryConfig(_env_file=None, **overrides)  # type: ignore[call-arg]


class TestDefaults:
    """Verify default values."""

    def test_source_defaults(self) -> None:
        cfg = _config()
        assert cfg.source_url == "https://lhcstatus2.ovh/vistars.json"
        assert cfg.signal_endpoints() == {}
        assert cfg.effective_source_type == "http"
        assert cfg.http_timeout_s == 20.0

    def test_retention_defaults(self) -> None:
        cfg = _config()
        assert cfg.retention_window_seconds == 50 * 24 * 3600
        assert cfg.max_points == DEFAULT_MAX_POINTS == 7200
        assert cfg.sample_interval_seconds == 600
        assert cfg.bucket_mode == "exact"
        assert cfg.dedup_tolerance_seconds == 60

    def test_storage_defaults(self) -> None:
        cfg = _config()
        assert cfg.latest_path == Path("data") / "latest.json"
        assert cfg.history_path == Path("data") / "lhc_history.jsonl"
        assert cfg.state_path == Path("data") / "classifier_state.json"
        assert cfg.raw_dump_path is None

    def test_classification_and_logging_defaults(self) -> None:
        cfg = _config()
        assert cfg.force_species == ""
        assert cfg.log_level == "summary"
        assert cfg.diagnostic_mode is False


class TestEnvironment:
    """Configuration is read from unprefixed environment variables."""

    def test_recognized_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCE_URL", "https://example.test/status.json")
        monkeypatch.setenv("RETENTION_SECONDS", "3600")
        monkeypatch.setenv("MAX_POINTS", "60")
        monkeypatch.setenv("FORCE_SPECIES", "Ion")
        monkeypatch.setenv("SAMPLE_INTERVAL_SECONDS", "300")
        cfg = _config()
        assert cfg.source_url == "https://example.test/status.json"
        assert cfg.retention_window_seconds == 3600
        assert cfg.max_points == 60
        assert cfg.force_species == "ions"
        assert cfg.sample_interval_seconds == 300

    def test_retention_days(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RETENTION_DAYS", "2")
        assert _config().retention_window_seconds == 2 * 24 * 3600

    def test_seconds_win_over_days(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RETENTION_DAYS", "2")
        monkeypatch.setenv("RETENTION_SECONDS", "7200")
        assert _config().retention_window_seconds == 7200

    def test_empty_force_species(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FORCE_SPECIES", "")
        assert _config().force_species == ""

    def test_mock_switch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOCK", "1")
        assert _config().effective_source_type == "mock"

    def test_init_kwargs_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_POINTS", "60")
        assert _config(max_points=10).max_points == 10

    def test_per_signal_endpoints(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENERGY_URL", "https://example.test/energy")
        monkeypatch.setenv("LUMI_URL", "https://example.test/lumi")
        assert _config().signal_endpoints() == {
            "energy": "https://example.test/energy",
            "luminosity": "https://example.test/lumi",
        }


class TestValidation:
    """Invalid values are rejected as ConfigValidationError by load_config."""

    @pytest.mark.parametrize("value", ["protons", "PROTON", "ions", "ion"])
    def test_force_species_accepted(self, value: str) -> None:
        cfg = load_config(_env_file=None, force_species=value)
        assert cfg.force_species in {"protons", "ions"}

    def test_force_species_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="force_species"):
            load_config(_env_file=None, force_species="electrons")

    def test_bucket_mode_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="bucket_mode"):
            load_config(_env_file=None, bucket_mode="sliding")

    def test_bucket_mode_normalized(self) -> None:
        assert load_config(_env_file=None, bucket_mode=" Tolerance ").bucket_mode == "tolerance"

    def test_log_level_rejected(self) -> None:
        with pytest.raises(ConfigValidationError, match="log_level"):
            load_config(_env_file=None, log_level="verbose")

    @pytest.mark.parametrize(
        "field",
        ["max_points", "sample_interval_seconds", "retention_seconds", "retention_days"],
    )
    def test_non_positive_rejected(self, field: str) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(_env_file=None, **{field: 0})

    def test_non_numeric_env_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_POINTS", "lots")
        with pytest.raises(ConfigValidationError, match="max_points"):
            load_config(_env_file=None)
