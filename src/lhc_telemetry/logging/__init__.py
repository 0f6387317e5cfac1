"""Diagnostic logging subsystem for lhc-telemetry.

Provides immutable per-cycle records and a configurable logger that supports
none/summary/full verbosity and in-memory diagnostic mode.
"""

from lhc_telemetry.logging.logger import CycleLogger
from lhc_telemetry.logging.types import CycleRecord

__all__ = [
    "CycleLogger",
    "CycleRecord",
]
