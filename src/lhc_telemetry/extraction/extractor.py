"""Deep heuristic search for named numeric fields in arbitrary JSON.

The search is breadth-first over object entries in the order the payload
presents them. The first key matching the pattern whose value coerces to a
finite number wins. When several keys match, the result depends on payload
order; that is an accepted limitation of a schema-less source, not something
to resolve by scoring candidates.

Nothing in this module raises on malformed input.
"""

from __future__ import annotations

import math
import re
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lhc_telemetry.extraction.patterns import SignalPattern

# Leading floating literal, as a lenient parseFloat would accept it.
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True, slots=True)
class FieldMatch:
    """A resolved field.

    Attributes:
        key: The payload key that matched.
        value: Its finite numeric value.
    """

    key: str
    value: float


def to_number(value: Any) -> float | None:
    """Coerce a JSON value to a finite float, or ``None``.

    Numbers pass through when finite. Booleans are not numbers. Anything else
    is stringified, its first decimal comma replaced by a period, and its
    leading floating literal parsed (``"6800 GeV"`` -> ``6800.0``).

    Args:
        value: Any decoded JSON value.

    Returns:
        The finite float, or ``None`` if no finite number can be read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    match = _FLOAT_PREFIX.match(str(value).replace(",", ".", 1))
    if match is None:
        return None
    number = float(match.group())
    return number if math.isfinite(number) else None


def _resolve(value: Any) -> float | None:
    if isinstance(value, dict) and value.get("value") is not None:
        return to_number(value["value"])
    return to_number(value)


def _entries(node: Any) -> list[tuple[str, Any]]:
    if isinstance(node, dict):
        return [(str(key), child) for key, child in node.items()]
    if isinstance(node, list):
        return [(str(index), child) for index, child in enumerate(node)]
    return []


def find_field(document: Any, pattern: SignalPattern) -> FieldMatch | None:
    """Breadth-first search for the first numeric field matching *pattern*.

    Args:
        document: Decoded JSON of any shape.
        pattern: Key pattern for one signal.

    Returns:
        The first match that resolves to a finite number, or ``None``.
    """
    queue: deque[Any] = deque([document])
    while queue:
        node = queue.popleft()
        for key, child in _entries(node):
            if pattern.matches(key):
                number = _resolve(child)
                if number is not None:
                    return FieldMatch(key=key, value=number)
            if isinstance(child, (dict, list)):
                queue.append(child)
    return None


def extract_field(document: Any, pattern: SignalPattern) -> float | None:
    """Return the value of :func:`find_field`, or ``None`` on a miss."""
    match = find_field(document, pattern)
    return match.value if match is not None else None
