"""Synthetic telemetry source for dry runs and tests.

Produces a proton-physics payload around 6800 GeV with random jitter, in the
same nested shape a live endpoint might use, so that the full extraction and
classification path is exercised.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import numpy as np

from lhc_telemetry.sources.base import TelemetrySource
from lhc_telemetry.sources.registry import register_source
from lhc_telemetry.sources.types import COMBINED, FetchResult

if TYPE_CHECKING:
    from lhc_telemetry.config import TelemetryConfig


@register_source("mock")
class MockTelemetrySource(TelemetrySource):
    """Seeded generator of plausible stable-beam payloads.

    Args:
        config: Unused; accepted for registry construction.
        seed: Optional RNG seed for reproducible output.
    """

    BASE_ENERGY_GEV: float = 6800.0
    BASE_INTENSITY: float = 1.1e14
    BASE_LUMINOSITY: float = 8e33

    def __init__(self, config: TelemetryConfig | None = None, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)

    @property
    def name(self) -> str:
        """Return ``'mock'``."""
        return "mock"

    def _jitter(self, amplitude: float) -> float:
        return float((self._rng.random() - 0.5) * amplitude)

    def payload(self) -> dict[str, Any]:
        """Return one freshly jittered payload."""
        return {
            "mode": "proton physics",
            "beam": {
                "energy": {"value": self.BASE_ENERGY_GEV + self._jitter(50.0), "unit": "GeV"},
            },
            "ib1": self.BASE_INTENSITY + self._jitter(5e12),
            "ib2": self.BASE_INTENSITY + self._jitter(5e12),
            "luminosity": {"value": self.BASE_LUMINOSITY + self._jitter(5e32)},
        }

    def fetch(self) -> FetchResult:
        document = self.payload()
        return FetchResult(
            documents={COMBINED: document},
            source=self.name,
            fetched_at=datetime.now(timezone.utc).isoformat(),
            raw_text=json.dumps(document, indent=2),
        )
