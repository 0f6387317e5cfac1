"""Data types for the cycle logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CycleRecord:
    """Immutable record of one pull-and-persist cycle.

    Attributes:
        timestamp: Bucket timestamp of the sample (seconds since epoch).
        source: Source the payload came from.
        species: Resolved species.
        rule: Classification rule that fired.
        energy: Beam energy in GeV, or ``None``.
        speed: Beta, or ``None``.
        beam_intensity_1: Beam-1 intensity, or ``None``.
        beam_intensity_2: Beam-2 intensity, or ``None``.
        luminosity: Luminosity, or ``None``.
        missing_signals: Names of signals that did not resolve.
        appended: Whether a history line was appended.
        history_before: History lines before trimming.
        history_after: History records after trimming.
        corrupt_lines: History lines dropped as unparseable.
        trim_error: Failure text if the trim was skipped.
        fetch_ms: Time spent fetching (milliseconds).
        total_ms: Time for the whole cycle (milliseconds).
    """

    # Sample
    timestamp: int
    source: str
    species: str
    rule: str
    energy: float | None
    speed: float | None
    beam_intensity_1: float | None
    beam_intensity_2: float | None
    luminosity: float | None
    missing_signals: tuple[str, ...]

    # Persistence
    appended: bool
    history_before: int
    history_after: int
    corrupt_lines: int
    trim_error: str | None

    # Timing
    fetch_ms: float
    total_ms: float
