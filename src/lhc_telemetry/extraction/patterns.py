"""Key-name patterns for the four recognized telemetry signals.

Each pattern is matched case-insensitively with :func:`re.search` against
every object key in a payload. The upstream schema is not under our control,
so the patterns are deliberately loose.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lhc_telemetry.sample import BEAM_INTENSITY_1, BEAM_INTENSITY_2, ENERGY, LUMINOSITY


@dataclass(frozen=True, slots=True)
class SignalPattern:
    """A named, compiled key pattern.

    Attributes:
        signal: Signal name the pattern resolves (e.g. ``"energy"``).
        regex: Case-insensitive compiled key pattern.
    """

    signal: str
    regex: re.Pattern[str]

    def matches(self, key: str) -> bool:
        return self.regex.search(key) is not None


def _compile(signal: str, pattern: str) -> SignalPattern:
    return SignalPattern(signal=signal, regex=re.compile(pattern, re.IGNORECASE))


ENERGY_PATTERN = _compile(
    ENERGY, r"(^|_)energy($|_)|beam.?energy|lhc.?energy|total.?energy"
)
BEAM_INTENSITY_1_PATTERN = _compile(BEAM_INTENSITY_1, r"ib1|beam.?1.*(intensity|current)")
BEAM_INTENSITY_2_PATTERN = _compile(BEAM_INTENSITY_2, r"ib2|beam.?2.*(intensity|current)")
LUMINOSITY_PATTERN = _compile(LUMINOSITY, r"lumi|luminosit")

SIGNAL_PATTERNS: tuple[SignalPattern, ...] = (
    ENERGY_PATTERN,
    BEAM_INTENSITY_1_PATTERN,
    BEAM_INTENSITY_2_PATTERN,
    LUMINOSITY_PATTERN,
)
