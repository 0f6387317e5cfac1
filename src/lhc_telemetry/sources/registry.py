"""Name -> class lookup for telemetry sources.

``http`` and ``mock`` register themselves with ``@register_source`` when
:mod:`lhc_telemetry.sources` is imported. Sources shipped by other
distributions are advertised under the ``lhc_telemetry.sources`` entry-point
group and scanned once, the first time a name is not found among the
registered ones. ``SOURCE_TYPE`` (or ``MOCK=1``) picks the source to build.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from lhc_telemetry.config import TelemetryConfig
    from lhc_telemetry.sources.base import TelemetrySource

logger = logging.getLogger("lhc_telemetry")

PLUGIN_GROUP = "lhc_telemetry.sources"


class SourceRegistry:
    """Class-level table of telemetry sources keyed by ``SOURCE_TYPE`` name.

    Registered names win over plugins advertising the same name. A plugin
    that fails to import is skipped with a warning and never retried in the
    same process.
    """

    _sources: ClassVar[dict[str, type[TelemetrySource]]] = {}
    _plugins_scanned: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[TelemetrySource]], type[TelemetrySource]]:
        """Return a class decorator that files the source under *name*."""

        def decorator(source_cls: type[TelemetrySource]) -> type[TelemetrySource]:
            cls._sources[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[TelemetrySource]:
        """Return the source class registered as *name*.

        Raises:
            KeyError: If neither a registered source nor a plugin has that name.
        """
        if name not in cls._sources and not cls._plugins_scanned:
            cls._scan_plugins()
        try:
            return cls._sources[name]
        except KeyError:
            known = ", ".join(sorted(cls._sources)) or "(none)"
            raise KeyError(f"Unknown telemetry source: {name!r}. Available: {known}") from None

    @classmethod
    def build(cls, config: TelemetryConfig) -> TelemetrySource:
        """Construct the source selected by *config*."""
        return cls.get(config.effective_source_type)(config)  # type: ignore[call-arg]

    @classmethod
    def list_available(cls) -> list[str]:
        """Return every source name, plugins included."""
        if not cls._plugins_scanned:
            cls._scan_plugins()
        return sorted(cls._sources)

    @classmethod
    def _scan_plugins(cls) -> None:
        cls._plugins_scanned = True
        for ep in importlib.metadata.entry_points(group=PLUGIN_GROUP):
            if ep.name in cls._sources:
                continue
            try:
                cls._sources[ep.name] = ep.load()
            except Exception:  # Intentional: a broken plugin must not hide the built-ins
                logger.warning(
                    "Skipping telemetry source plugin %r (%s)", ep.name, ep.value, exc_info=True
                )
                continue
            logger.debug("Loaded telemetry source plugin %r", ep.name)


register_source = SourceRegistry.register
