"""One pull-and-persist cycle.

    pre-flight -> fetch -> extract/derive/classify -> snapshot -> state
    -> history append -> history trim -> cycle log

The pipeline has no loop of its own: an external scheduler calls
:meth:`TelemetryPipeline.run_cycle` once per tick and must not overlap
invocations. The snapshot, state, and history writes are independent; when a
later one fails, the earlier ones stay written.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from lhc_telemetry.builder import SampleBuilder
from lhc_telemetry.exceptions import StorageError, TransportError
from lhc_telemetry.logging.logger import CycleLogger
from lhc_telemetry.logging.types import CycleRecord
from lhc_telemetry.sample import Provenance, Sample
from lhc_telemetry.sources.registry import SourceRegistry
from lhc_telemetry.storage.files import LocalFileSystem
from lhc_telemetry.storage.history import HistoryStore, RetentionPolicy, TrimResult
from lhc_telemetry.storage.snapshot import SnapshotWriter
from lhc_telemetry.storage.state import ClassifierStateStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from lhc_telemetry.config import TelemetryConfig
    from lhc_telemetry.sources.base import TelemetrySource
    from lhc_telemetry.sources.types import FetchResult

logger = logging.getLogger("lhc_telemetry")


@dataclass(frozen=True, slots=True)
class CycleResult:
    """What one successful cycle produced.

    Attributes:
        sample: The sample written to the snapshot.
        appended: Whether it was appended to the history.
        trim: Outcome of the trim pass.
        record: The diagnostic record that was logged.
    """

    sample: Sample
    appended: bool
    trim: TrimResult
    record: CycleRecord


class TelemetryPipeline:
    """Wires a telemetry source to the snapshot, state, and history stores.

    Args:
        config: Active configuration.
        source: Telemetry source; built from the registry if omitted.
        fs: File-system primitives shared by all stores.
        clock: Returns the current time in seconds since the epoch.
    """

    def __init__(
        self,
        config: TelemetryConfig,
        source: TelemetrySource | None = None,
        fs: LocalFileSystem | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._fs = fs or LocalFileSystem()
        self._source = source or SourceRegistry.build(config)
        self._clock = clock
        self._builder = SampleBuilder()
        self._history = HistoryStore(
            config.history_path,
            RetentionPolicy.from_config(config),
            self._fs,
        )
        self._snapshot = SnapshotWriter(config.latest_path, self._fs)
        self._state = ClassifierStateStore(config.state_path, self._fs)
        self._cycle_logger = CycleLogger(config)

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def cycle_logger(self) -> CycleLogger:
        return self._cycle_logger

    def run_cycle(self) -> CycleResult:
        """Fetch once and persist the result.

        Returns:
            The sample and persistence outcome.

        Raises:
            TransportError: If the source cannot be read (a degraded
                snapshot is written first when configured).
            StorageError: If the data directory, snapshot, state, or history
                cannot be written.
        """
        t_start = time.perf_counter()
        self._preflight()

        now = self._clock()
        bucket = self._history.bucket_for(now)

        try:
            fetched = self._source.fetch()
        except TransportError as exc:
            logger.error("Fetch from %s failed: %s", self._source.name, exc)
            if self._config.write_degraded_snapshot:
                self._write_degraded(bucket, exc)
            raise

        raw_pointer = self._dump_raw(fetched)
        last_known = self._state.load()
        sample = self._builder.build(
            fetched,
            last_known=last_known,
            forced_override=self._config.force_species,
            bucket_time=bucket,
            raw_payload=raw_pointer,
        )

        self._snapshot.write_latest(sample)
        self._state.save(sample.species)

        appended = False
        if sample.has_signal() or self._config.append_empty_samples:
            appended = self._history.append(sample)
        else:
            logger.info("Skip append: no signal resolved for t=%d", sample.timestamp)

        trim = self._history.trim(now)

        signals = sample.signals()
        record = CycleRecord(
            timestamp=sample.timestamp,
            source=fetched.source,
            species=sample.species,
            rule=sample.provenance.rule if sample.provenance else "",
            energy=sample.energy,
            speed=sample.speed,
            beam_intensity_1=sample.beam_intensity_1,
            beam_intensity_2=sample.beam_intensity_2,
            luminosity=sample.luminosity,
            missing_signals=tuple(name for name, value in signals.items() if value is None),
            appended=appended,
            history_before=trim.before,
            history_after=trim.after,
            corrupt_lines=trim.corrupt,
            trim_error=trim.error,
            fetch_ms=fetched.elapsed_ms,
            total_ms=(time.perf_counter() - t_start) * 1000.0,
        )
        self._cycle_logger.log_cycle(record)
        return CycleResult(sample=sample, appended=appended, trim=trim, record=record)

    def close(self) -> None:
        self._source.close()

    def _preflight(self) -> None:
        """Fail before touching any file if the data directory is unusable.

        Creates the history log empty on the first run.
        """
        data_dir = self._config.data_dir
        try:
            self._fs.ensure_dir(data_dir)
            self._fs.check_writable(data_dir)
            self._fs.touch(self._history.path)
        except OSError as exc:
            raise StorageError(f"Data directory {data_dir} is not usable: {exc}") from exc

    def _dump_raw(self, fetched: FetchResult) -> str | None:
        path = self._config.raw_dump_path
        if path is None:
            return None
        try:
            self._fs.write_text(path, fetched.raw_text)
        except OSError as exc:
            logger.warning("Raw payload dump to %s failed: %s", path, exc)
            return None
        return str(path)

    def _write_degraded(self, bucket: int, error: Exception) -> None:
        provenance = Provenance(
            fetched_at=datetime.now(timezone.utc).isoformat(),
            source=self._source.name,
            ok=False,
            reason=str(error),
        )
        try:
            self._snapshot.write_latest(Sample.degraded(bucket, provenance))
        except StorageError as exc:
            logger.warning("Degraded snapshot not written: %s", exc)
