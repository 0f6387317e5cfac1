"""Species classification with operator override and hysteresis.

Rules are evaluated in a fixed order and the first one that fires wins:

    1. override        explicit ``FORCE_SPECIES`` directive
    2. signature       payload text mentions one species and not the other
    3. energy          total energy >= 4000 GeV -> protons
    4. energy_intensity  energy <= 3500 GeV and max intensity in (0, 1e12) -> ions
    5. intensity       no energy: intensity > 1e13 -> protons, in (0, 5e11) -> ions
    6. hysteresis      repeat the last known species
    7. default         protons

The numeric thresholds are empirical constants for the LHC operating modes.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from lhc_telemetry.classification.types import ClassificationResult
from lhc_telemetry.sample import BEAM_INTENSITY_1, BEAM_INTENSITY_2, ENERGY, UNKNOWN_SPECIES

if TYPE_CHECKING:
    from collections.abc import Mapping

PROTONS = "protons"
IONS = "ions"
KNOWN_SPECIES: frozenset[str] = frozenset({PROTONS, IONS})

PROTON_MIN_ENERGY_GEV = 4000.0
ION_MAX_ENERGY_GEV = 3500.0
ION_MAX_INTENSITY = 1e12
PROTON_MIN_INTENSITY_NO_ENERGY = 1e13
ION_MAX_INTENSITY_NO_ENERGY = 5e11

# Letters on either side break a match, so "position" is not an ion signature
# while "heavy_ion" and "Pb-Pb" are.
_ION_SIGNATURE = re.compile(r"(?<![a-z])(?:ions?|lead|pb|heavy)(?![a-z])")
_PROTON_SIGNATURE = re.compile(r"(?<![a-z])(?:protons?|pp|p-beam|pbeam)(?![a-z])")

_SPECIES_ALIASES: dict[str, str] = {
    "proton": PROTONS,
    "protons": PROTONS,
    "ion": IONS,
    "ions": IONS,
}


def normalize_species(value: str | None) -> str | None:
    """Map ``"Proton"``, ``"IONS"`` etc. onto a canonical species, else ``None``."""
    if not value:
        return None
    return _SPECIES_ALIASES.get(value.strip().lower())


def _payload_text(payload: Any) -> str:
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload.lower()
    return json.dumps(payload, default=str).lower()


def signature_species(payload: Any) -> str | None:
    """Return the species the payload text unambiguously names, if any."""
    text = _payload_text(payload)
    if not text:
        return None
    is_ion = _ION_SIGNATURE.search(text) is not None
    is_proton = _PROTON_SIGNATURE.search(text) is not None
    if is_ion and not is_proton:
        return IONS
    if is_proton and not is_ion:
        return PROTONS
    return None


def _max_intensity(readings: Mapping[str, float | None]) -> float | None:
    values = [
        value
        for value in (readings.get(BEAM_INTENSITY_1), readings.get(BEAM_INTENSITY_2))
        if value is not None
    ]
    return max(values) if values else None


class SpeciesClassifier:
    """Decision-table classifier over the four signals plus payload text.

    The only state is ``last_known``, passed in by the caller and persisted
    by :class:`~lhc_telemetry.storage.state.ClassifierStateStore`.
    """

    def resolve(
        self,
        readings: Mapping[str, float | None],
        last_known: str | None = None,
        forced_override: str | None = None,
        payload: Any = None,
    ) -> ClassificationResult:
        """Classify one set of readings.

        Args:
            readings: Signal name -> value (``None`` when absent).
            last_known: Previously resolved species, for hysteresis.
            forced_override: Operator directive; ignored unless it names
                protons or ions.
            payload: Decoded payload(s) scanned for textual signatures.

        Returns:
            The species and the name of the rule that produced it.
        """
        forced = normalize_species(forced_override)
        if forced is not None:
            return ClassificationResult(species=forced, rule="override")

        signed = signature_species(payload)
        if signed is not None:
            return ClassificationResult(species=signed, rule="signature")

        energy = readings.get(ENERGY)
        intensity = _max_intensity(readings)

        if energy is not None:
            if energy >= PROTON_MIN_ENERGY_GEV:
                return ClassificationResult(species=PROTONS, rule="energy")
            if (
                energy <= ION_MAX_ENERGY_GEV
                and intensity is not None
                and 0 < intensity < ION_MAX_INTENSITY
            ):
                return ClassificationResult(species=IONS, rule="energy_intensity")
        elif intensity is not None:
            if intensity > PROTON_MIN_INTENSITY_NO_ENERGY:
                return ClassificationResult(species=PROTONS, rule="intensity")
            if 0 < intensity < ION_MAX_INTENSITY_NO_ENERGY:
                return ClassificationResult(species=IONS, rule="intensity")

        if last_known in KNOWN_SPECIES:
            return ClassificationResult(species=last_known, rule="hysteresis")

        # Proton running is the most common operating mode.
        return ClassificationResult(species=PROTONS, rule="default")

    def classify(
        self,
        readings: Mapping[str, float | None],
        last_known: str | None = None,
        forced_override: str | None = None,
        payload: Any = None,
    ) -> str:
        """Return only the species of :meth:`resolve`."""
        return self.resolve(readings, last_known, forced_override, payload).species
