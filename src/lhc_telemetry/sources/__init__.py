"""Telemetry source subsystem for lhc-telemetry.

Re-exports the ABC, registry, and all built-in source implementations::

    from lhc_telemetry.sources import SourceRegistry, HttpTelemetrySource
"""

from lhc_telemetry.sources.base import TelemetrySource
from lhc_telemetry.sources.http import HttpTelemetrySource
from lhc_telemetry.sources.mock import MockTelemetrySource
from lhc_telemetry.sources.registry import SourceRegistry, register_source
from lhc_telemetry.sources.types import COMBINED, FetchResult

__all__ = [
    "COMBINED",
    "FetchResult",
    "HttpTelemetrySource",
    "MockTelemetrySource",
    "SourceRegistry",
    "TelemetrySource",
    "register_source",
]
