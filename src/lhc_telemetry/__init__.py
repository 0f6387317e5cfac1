"""lhc-telemetry: sample the LHC operating state into a bounded history.

Each invocation fetches the status payload once, extracts beam energy, beam
intensities and luminosity heuristically, derives relativistic beta,
classifies the beam species, overwrites a latest snapshot, and appends to a
deduplicated, retention-trimmed JSON Lines history.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("lhc-telemetry")
except PackageNotFoundError:
    __version__ = "0.0.0"

from lhc_telemetry.config import TelemetryConfig, load_config
from lhc_telemetry.exceptions import (
    ConfigValidationError,
    PayloadParseError,
    StorageError,
    TelemetryError,
    TransportError,
)
from lhc_telemetry.pipeline import CycleResult, TelemetryPipeline
from lhc_telemetry.sample import Provenance, Sample

__all__ = [
    "ConfigValidationError",
    "CycleResult",
    "PayloadParseError",
    "Provenance",
    "Sample",
    "StorageError",
    "TelemetryConfig",
    "TelemetryError",
    "TelemetryPipeline",
    "TransportError",
    "__version__",
    "load_config",
]
