"""Configuration system for lhc-telemetry.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables -> .env file -> field defaults.

Environment names carry no prefix (``SOURCE_URL``, ``RETENTION_DAYS``,
``FORCE_SPECIES``, ...) so that a scheduler can drive the job with the same
variables it has always exported.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lhc_telemetry.classification.classifier import normalize_species
from lhc_telemetry.exceptions import ConfigValidationError

_SECONDS_PER_DAY = 24 * 3600

# 50 days at one sample per 10 minutes.
DEFAULT_RETENTION_DAYS = 50
DEFAULT_MAX_POINTS = DEFAULT_RETENTION_DAYS * 24 * 6

_BUCKET_MODES: frozenset[str] = frozenset({"exact", "tolerance"})
_LOG_LEVELS: frozenset[str] = frozenset({"none", "summary", "full"})


class TelemetryConfig(BaseSettings):
    """Configuration for one pull-and-persist cycle.

    Resolution order: init kwargs -> env vars -> .env file -> defaults.

    Fields are grouped by concern:
    - **Source**: endpoint(s), transport timeouts, mock switch.
    - **Storage**: output directory and file names.
    - **Retention**: trim horizon, point cap, bucketing discipline.
    - **Classification**: operator species override.
    - **Logging**: per-cycle verbosity and diagnostic mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # --- Source ---

    source_url: str = Field(
        default="https://lhcstatus2.ovh/vistars.json",
        description="Combined telemetry endpoint (used when no per-signal URL is set)",
    )
    energy_url: str = Field(default="", description="Optional endpoint for beam energy")
    ib1_url: str = Field(default="", description="Optional endpoint for beam-1 intensity")
    ib2_url: str = Field(default="", description="Optional endpoint for beam-2 intensity")
    lumi_url: str = Field(default="", description="Optional endpoint for luminosity")
    source_type: str = Field(
        default="http",
        description="Registered telemetry source: 'http' or 'mock'",
    )
    mock: bool = Field(
        default=False,
        description="Use the synthetic mock source regardless of source_type",
    )
    http_timeout_s: float = Field(
        default=20.0,
        gt=0,
        description="Per-request HTTP timeout in seconds",
    )
    user_agent: str = Field(
        default="lhc-telemetry fetcher",
        description="User-Agent header sent with every request",
    )

    # --- Storage ---

    data_dir: Path = Field(default=Path("data"), description="Directory for all output files")
    latest_file: str = Field(default="latest.json", description="Latest snapshot file name")
    history_file: str = Field(default="lhc_history.jsonl", description="History log file name")
    state_file: str = Field(
        default="classifier_state.json",
        description="Persisted last-known species file name",
    )
    raw_dump_file: str = Field(
        default="",
        description="Raw payload dump file name (empty disables the dump)",
    )

    # --- Retention ---

    retention_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Trim horizon in seconds (takes precedence over retention_days)",
    )
    retention_days: float | None = Field(
        default=None,
        gt=0,
        description="Trim horizon in days",
    )
    max_points: int = Field(
        default=DEFAULT_MAX_POINTS,
        gt=0,
        description="Hard cap on stored history records",
    )
    sample_interval_seconds: int = Field(
        default=600,
        gt=0,
        description="Bucket width for exact-bucket mode",
    )
    bucket_mode: str = Field(
        default="exact",
        description="Deduplication discipline: 'exact' or 'tolerance'",
    )
    dedup_tolerance_seconds: int = Field(
        default=60,
        ge=0,
        description="Same-bucket window for tolerance mode",
    )
    append_empty_samples: bool = Field(
        default=True,
        description="Append samples whose four signals are all missing",
    )
    write_degraded_snapshot: bool = Field(
        default=True,
        description="Overwrite the latest snapshot with a degraded record on fetch failure",
    )

    # --- Classification ---

    force_species: str = Field(
        default="",
        description="Operator override: '', 'protons' or 'ions'",
    )

    # --- Logging ---

    log_level: str = Field(
        default="summary",
        description="Cycle logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all cycle records in memory for analysis",
    )

    @field_validator("force_species", mode="before")
    @classmethod
    def _normalize_force_species(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            return ""
        species = normalize_species(text)
        if species is None:
            raise ValueError(f"force_species must be 'protons' or 'ions', got {value!r}")
        return species

    @field_validator("bucket_mode")
    @classmethod
    def _check_bucket_mode(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in _BUCKET_MODES:
            raise ValueError(f"bucket_mode must be one of {sorted(_BUCKET_MODES)}, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return value

    # --- Derived values ---

    @property
    def effective_source_type(self) -> str:
        """Source name after applying the ``mock`` shortcut."""
        return "mock" if self.mock else self.source_type

    @property
    def retention_window_seconds(self) -> int:
        """Trim horizon: seconds wins over days, 50 days when neither is set."""
        if self.retention_seconds is not None:
            return self.retention_seconds
        if self.retention_days is not None:
            return int(self.retention_days * _SECONDS_PER_DAY)
        return DEFAULT_RETENTION_DAYS * _SECONDS_PER_DAY

    @property
    def latest_path(self) -> Path:
        return self.data_dir / self.latest_file

    @property
    def history_path(self) -> Path:
        return self.data_dir / self.history_file

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.state_file

    @property
    def raw_dump_path(self) -> Path | None:
        return self.data_dir / self.raw_dump_file if self.raw_dump_file else None

    def signal_endpoints(self) -> dict[str, str]:
        """Return the configured per-signal endpoints, keyed by signal name.

        Empty when the combined ``source_url`` is to be used instead.
        """
        endpoints = {
            "energy": self.energy_url,
            "beamIntensity1": self.ib1_url,
            "beamIntensity2": self.ib2_url,
            "luminosity": self.lumi_url,
        }
        return {name: url for name, url in endpoints.items() if url}


def load_config(**overrides: Any) -> TelemetryConfig:
    """Build a :class:`TelemetryConfig`, reporting bad values uniformly.

    Args:
        **overrides: Init kwargs, taking precedence over the environment.

    Returns:
        The validated configuration.

    Raises:
        ConfigValidationError: If any field fails validation.
    """
    try:
        return TelemetryConfig(**overrides)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
