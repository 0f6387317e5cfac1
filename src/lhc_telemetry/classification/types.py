"""Data types for the species classification subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Outcome of one classification.

    Attributes:
        species: ``"protons"``, ``"ions"``, or ``"unknown"``.
        rule: Name of the decision rule that fired (``"override"``,
            ``"signature"``, ``"energy"``, ``"energy_intensity"``,
            ``"intensity"``, ``"hysteresis"``, ``"default"``).
    """

    species: str
    rule: str
