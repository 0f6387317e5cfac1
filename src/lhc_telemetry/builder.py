"""Assembles one :class:`~lhc_telemetry.sample.Sample` from a fetch result.

    payload(s) -> field extraction (x4) -> beta -> species -> Sample

Each signal is extracted independently; a miss leaves that field ``None``
without affecting the others. The builder performs no I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lhc_telemetry.classification.classifier import SpeciesClassifier
from lhc_telemetry.extraction.extractor import find_field
from lhc_telemetry.extraction.patterns import SIGNAL_PATTERNS
from lhc_telemetry.physics import beta_from_energy
from lhc_telemetry.sample import (
    BEAM_INTENSITY_1,
    BEAM_INTENSITY_2,
    ENERGY,
    LUMINOSITY,
    Provenance,
    Sample,
)

if TYPE_CHECKING:
    from lhc_telemetry.sources.types import FetchResult


class SampleBuilder:
    """Turns raw payloads into an immutable, classified sample.

    Args:
        classifier: Species classifier; a default one is created if omitted.
    """

    def __init__(self, classifier: SpeciesClassifier | None = None) -> None:
        self._classifier = classifier or SpeciesClassifier()

    def build(
        self,
        fetch_result: FetchResult,
        last_known: str | None,
        forced_override: str | None,
        bucket_time: int,
        raw_payload: str | None = None,
    ) -> Sample:
        """Extract, derive, and classify one observation.

        Args:
            fetch_result: Payload(s) from the telemetry source.
            last_known: Persisted species from the previous cycle.
            forced_override: Operator species directive (may be empty).
            bucket_time: Timestamp to stamp on the sample.
            raw_payload: Path of the raw payload dump, for provenance.

        Returns:
            The assembled sample.
        """
        readings: dict[str, float | None] = {}
        keys_found: dict[str, str | None] = {}
        for pattern in SIGNAL_PATTERNS:
            document = fetch_result.document_for(pattern.signal)
            match = find_field(document, pattern) if document is not None else None
            readings[pattern.signal] = match.value if match else None
            keys_found[pattern.signal] = match.key if match else None

        energy = readings[ENERGY]
        speed = beta_from_energy(energy) if energy is not None else None

        classification = self._classifier.resolve(
            readings,
            last_known=last_known,
            forced_override=forced_override,
            payload=fetch_result.documents,
        )

        resolved = any(value is not None for value in readings.values())
        provenance = Provenance(
            fetched_at=fetch_result.fetched_at,
            source=fetch_result.source,
            ok=True,
            reason="ok" if resolved else "no matching fields",
            status=fetch_result.status,
            keys_found=keys_found,
            rule=classification.rule,
            raw_payload=raw_payload,
            elapsed_ms=fetch_result.elapsed_ms,
        )

        return Sample(
            timestamp=bucket_time,
            energy=energy,
            speed=speed,
            beam_intensity_1=readings[BEAM_INTENSITY_1],
            beam_intensity_2=readings[BEAM_INTENSITY_2],
            luminosity=readings[LUMINOSITY],
            species=classification.species,
            provenance=provenance,
        )
