"""HTTP telemetry source backed by ``httpx``.

Two modes, chosen by configuration:

- **Combined**: one GET of ``source_url`` whose payload serves all four
  signals. Any failure is fatal for the cycle.
- **Per-signal**: up to four endpoints (``ENERGY_URL``, ``IB1_URL``, ...)
  fetched concurrently on one ``httpx.AsyncClient``. All requests are awaited
  before returning. A failed endpoint leaves its signal absent; only when
  every endpoint fails does the fetch fail.

One attempt per endpoint per call. No retry, no backoff.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import httpx

from lhc_telemetry.exceptions import PayloadParseError, TelemetryError, TransportError
from lhc_telemetry.sources.base import TelemetrySource
from lhc_telemetry.sources.registry import register_source
from lhc_telemetry.sources.types import COMBINED, FetchResult

if TYPE_CHECKING:
    from lhc_telemetry.config import TelemetryConfig

logger = logging.getLogger("lhc_telemetry")


@dataclass(frozen=True, slots=True)
class _Response:
    name: str
    status: int
    text: str
    document: Any


@register_source("http")
class HttpTelemetrySource(TelemetrySource):
    """Fetch telemetry JSON over HTTP.

    Args:
        config: Telemetry configuration with endpoint and timeout settings.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``
            in tests.
    """

    def __init__(
        self,
        config: TelemetryConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoints = config.signal_endpoints() or {COMBINED: config.source_url}
        self._timeout_s = config.http_timeout_s
        self._transport = transport
        self._headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json,text/plain;q=0.9,*/*;q=0.8",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    @property
    def name(self) -> str:
        """Return ``'http'``."""
        return "http"

    @property
    def endpoints(self) -> dict[str, str]:
        return dict(self._endpoints)

    def fetch(self) -> FetchResult:
        """Fetch every configured endpoint once.

        Returns:
            Documents keyed by signal name, or by ``COMBINED``.

        Raises:
            TransportError: If no endpoint could be read.
            PayloadParseError: If the only (or every) body is not JSON.
        """
        fetched_at = datetime.now(timezone.utc).isoformat()
        t0 = time.perf_counter()
        outcomes = asyncio.run(self._fetch_all())
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        responses: list[_Response] = []
        failures: dict[str, TelemetryError] = {}
        for name, outcome in zip(self._endpoints, outcomes):
            if isinstance(outcome, TelemetryError):
                failures[name] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                responses.append(outcome)

        if not responses:
            raise next(iter(failures.values()))

        for name, error in failures.items():
            logger.warning("Endpoint %r failed, signal left empty: %s", name, error)

        documents = {response.name: response.document for response in responses}
        if COMBINED in documents:
            raw_text = responses[0].text
        else:
            raw_text = json.dumps(documents, indent=2)

        return FetchResult(
            documents=documents,
            source=", ".join(self._endpoints.values()),
            fetched_at=fetched_at,
            status=responses[0].status,
            raw_text=raw_text,
            elapsed_ms=elapsed_ms,
            errors={name: str(error) for name, error in failures.items()},
        )

    async def _fetch_all(self) -> list[_Response | BaseException]:
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout_s,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            return await asyncio.gather(
                *(self._fetch_one(client, name, url) for name, url in self._endpoints.items()),
                return_exceptions=True,
            )

    async def _fetch_one(self, client: httpx.AsyncClient, name: str, url: str) -> _Response:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if not response.is_success:
            raise TransportError(f"HTTP {response.status_code} for {url}")

        try:
            document = response.json()
        except ValueError as exc:
            raise PayloadParseError(f"Response from {url} is not valid JSON: {exc}") from exc

        return _Response(name=name, status=response.status_code, text=response.text, document=document)
