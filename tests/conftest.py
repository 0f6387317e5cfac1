"""Shared pytest fixtures for lhc-telemetry tests.

Provides isolated configuration objects, a fixed clock, and in-process
telemetry sources so that no test touches the network or the real
environment.
"""

from __future__ import annotations

from typing import Any

import pytest

from lhc_telemetry.config import TelemetryConfig
from lhc_telemetry.exceptions import TransportError
from lhc_telemetry.sources.base import TelemetrySource
from lhc_telemetry.sources.types import COMBINED, FetchResult

# 2023-11-14T22:13:20Z; not aligned to a 600 s boundary.
NOW = 1_700_000_000


class StaticSource(TelemetrySource):
    """Test double: returns the same payload on every fetch."""

    def __init__(self, document: Any, status: int = 200) -> None:
        self.document = document
        self.status = status
        self.fetch_count = 0
        self.closed = False

    @property
    def name(self) -> str:
        return "static"

    def fetch(self) -> FetchResult:
        self.fetch_count += 1
        return FetchResult(
            documents={COMBINED: self.document},
            source="static://payload",
            fetched_at="2023-11-14T22:13:20+00:00",
            status=self.status,
            raw_text=str(self.document),
            elapsed_ms=1.0,
        )

    def close(self) -> None:
        self.closed = True


class FailingSource(TelemetrySource):
    """Test double: always raises the given transport error."""

    def __init__(self, error: TransportError | None = None) -> None:
        self.error = error or TransportError("HTTP 503 for static://payload")

    @property
    def name(self) -> str:
        return "failing"

    def fetch(self) -> FetchResult:
        raise self.error


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every configuration variable from the process environment."""
    for name in TelemetryConfig.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def make_config(tmp_path: Any) -> Any:
    """Factory for configs rooted in a temporary data directory."""

    def _make(**overrides: Any) -> TelemetryConfig:
        values: dict[str, Any] = {"data_dir": tmp_path / "data", "log_level": "none"}
        values.update(overrides)
        return TelemetryConfig(_env_file=None, **values)  # type: ignore[call-arg]

    return _make


@pytest.fixture
def config(make_config: Any) -> TelemetryConfig:
    """Default config with a temporary data directory and silent cycle logs."""
    return make_config()
