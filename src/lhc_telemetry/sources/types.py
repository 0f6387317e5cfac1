"""Data types for the telemetry source subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Key under which a single combined payload is stored.
COMBINED = "combined"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Payload(s) returned by one fetch.

    Attributes:
        documents: Decoded JSON keyed by signal name (per-signal endpoints)
            or by :data:`COMBINED` (one endpoint serving every signal).
        source: Endpoint URL(s) or source name, for provenance.
        fetched_at: ISO 8601 UTC time the fetch started.
        status: HTTP status of the first response, if any.
        raw_text: Raw body (single endpoint) or a JSON dump of all documents.
        elapsed_ms: Wall-clock duration of the fetch in milliseconds.
        errors: Endpoint name -> failure text for endpoints that failed
            while others succeeded.
    """

    documents: dict[str, Any]
    source: str
    fetched_at: str
    status: int | None = None
    raw_text: str = ""
    elapsed_ms: float = 0.0
    errors: dict[str, str] = field(default_factory=dict)

    def document_for(self, signal: str) -> Any:
        """Return the payload to search for *signal*, or ``None``.

        A per-signal document takes precedence over the combined one; a
        signal with neither was not fetched this cycle.
        """
        if signal in self.documents:
            return self.documents[signal]
        return self.documents.get(COMBINED)
