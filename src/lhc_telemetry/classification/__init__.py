"""Species classification: override, textual signature, thresholds, hysteresis."""

from lhc_telemetry.classification.classifier import (
    IONS,
    KNOWN_SPECIES,
    PROTONS,
    SpeciesClassifier,
    normalize_species,
    signature_species,
)
from lhc_telemetry.classification.types import ClassificationResult

__all__ = [
    "IONS",
    "KNOWN_SPECIES",
    "PROTONS",
    "ClassificationResult",
    "SpeciesClassifier",
    "normalize_species",
    "signature_species",
]
