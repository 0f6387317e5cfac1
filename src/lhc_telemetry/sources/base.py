"""Abstract base class for all telemetry sources.

Every source, whether a live HTTP endpoint or the synthetic mock, implements
this interface. A source performs exactly one fetch attempt per call; the
external scheduler's next tick is the retry mechanism.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lhc_telemetry.sources.types import FetchResult


class TelemetrySource(ABC):
    """Abstract base for all telemetry sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'http'``, ``'mock'``)."""

    @abstractmethod
    def fetch(self) -> FetchResult:
        """Fetch the current accelerator state.

        Returns:
            The decoded payload(s) with transport metadata.

        Raises:
            TransportError: If the source cannot be read.
            PayloadParseError: If the body is not valid JSON.
        """

    def close(self) -> None:
        """Release resources. The default implementation holds none."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": True}
