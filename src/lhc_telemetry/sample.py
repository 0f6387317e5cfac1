"""Immutable sample types shared by the ingestion pipeline.

A :class:`Sample` is one observation of the accelerator state. Its
:class:`Provenance` travels with it for diagnostics only and is excluded from
equality, hashing, and deduplication.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_SPECIES = "unknown"

# Signal names double as the JSON keys of a serialized sample.
ENERGY = "energy"
BEAM_INTENSITY_1 = "beamIntensity1"
BEAM_INTENSITY_2 = "beamIntensity2"
LUMINOSITY = "luminosity"

SIGNAL_NAMES: tuple[str, ...] = (ENERGY, BEAM_INTENSITY_1, BEAM_INTENSITY_2, LUMINOSITY)

# Fields compared by tolerance-mode deduplication.
TRACKED_FIELDS: tuple[str, ...] = SIGNAL_NAMES


@dataclass(frozen=True, slots=True)
class Provenance:
    """Diagnostic metadata describing how a sample was obtained.

    Attributes:
        fetched_at: ISO 8601 wall-clock time of the fetch (UTC).
        source: Endpoint or source name the payload came from.
        ok: Whether the fetch succeeded.
        reason: ``"ok"``, ``"no matching fields"``, or the failure text.
        status: HTTP status of the (first) response, if any.
        keys_found: Signal name -> payload key that resolved it, or ``None``.
        rule: Classification rule that produced the species.
        raw_payload: Path of the raw payload dump, if one was written.
        elapsed_ms: Fetch duration in milliseconds.
    """

    fetched_at: str
    source: str
    ok: bool = True
    reason: str = "ok"
    status: int | None = None
    keys_found: dict[str, str | None] = field(default_factory=dict)
    rule: str | None = None
    raw_payload: str | None = None
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "fetchedAt": self.fetched_at,
            "source": self.source,
            "ok": self.ok,
            "reason": self.reason,
            "status": self.status,
            "keysFound": dict(self.keys_found),
            "rule": self.rule,
            "rawPayload": self.raw_payload,
            "elapsedMs": round(self.elapsed_ms, 3),
        }


@dataclass(frozen=True, slots=True)
class Sample:
    """One observation, bucketed to ``timestamp``.

    ``speed`` is present exactly when ``energy`` is, and lies in [0, 1].
    Every signal field may independently be ``None``.
    """

    timestamp: int
    energy: float | None
    speed: float | None
    beam_intensity_1: float | None
    beam_intensity_2: float | None
    luminosity: float | None
    species: str
    provenance: Provenance | None = field(default=None, compare=False)

    @classmethod
    def degraded(cls, timestamp: int, provenance: Provenance) -> Sample:
        """Build the all-null ``"unknown"`` record written on fetch failure."""
        return cls(
            timestamp=timestamp,
            energy=None,
            speed=None,
            beam_intensity_1=None,
            beam_intensity_2=None,
            luminosity=None,
            species=UNKNOWN_SPECIES,
            provenance=provenance,
        )

    def signals(self) -> dict[str, float | None]:
        """Return the four signal values keyed by signal name."""
        return {
            ENERGY: self.energy,
            BEAM_INTENSITY_1: self.beam_intensity_1,
            BEAM_INTENSITY_2: self.beam_intensity_2,
            LUMINOSITY: self.luminosity,
        }

    def has_signal(self) -> bool:
        return any(value is not None for value in self.signals().values())

    def to_record(self, include_provenance: bool = True) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape.

        Args:
            include_provenance: Attach the ``provenance`` object (snapshot)
                or omit it (compact history lines).
        """
        record: dict[str, Any] = {
            "timestamp": self.timestamp,
            ENERGY: self.energy,
            "speed": self.speed,
            BEAM_INTENSITY_1: self.beam_intensity_1,
            BEAM_INTENSITY_2: self.beam_intensity_2,
            LUMINOSITY: self.luminosity,
            "species": self.species,
        }
        if include_provenance:
            record["provenance"] = self.provenance.to_dict() if self.provenance else None
        return record
