"""Heuristic field extraction from schema-less telemetry payloads."""

from lhc_telemetry.extraction.extractor import FieldMatch, extract_field, find_field, to_number
from lhc_telemetry.extraction.patterns import (
    BEAM_INTENSITY_1_PATTERN,
    BEAM_INTENSITY_2_PATTERN,
    ENERGY_PATTERN,
    LUMINOSITY_PATTERN,
    SIGNAL_PATTERNS,
    SignalPattern,
)

__all__ = [
    "BEAM_INTENSITY_1_PATTERN",
    "BEAM_INTENSITY_2_PATTERN",
    "ENERGY_PATTERN",
    "LUMINOSITY_PATTERN",
    "SIGNAL_PATTERNS",
    "FieldMatch",
    "SignalPattern",
    "extract_field",
    "find_field",
    "to_number",
]
