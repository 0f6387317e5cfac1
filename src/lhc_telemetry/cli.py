"""Command-line entry point: run exactly one pull-and-persist cycle.

Exit codes:
    0  cycle completed (even if every signal was missing)
    1  fetch or payload parse failure
    2  snapshot, state, or history write failure
    3  invalid configuration
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from lhc_telemetry.config import load_config
from lhc_telemetry.exceptions import ConfigValidationError, StorageError, TransportError
from lhc_telemetry.pipeline import TelemetryPipeline

logger = logging.getLogger("lhc_telemetry")

EXIT_OK = 0
EXIT_TRANSPORT = 1
EXIT_STORAGE = 2
EXIT_CONFIG = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lhc-telemetry",
        description="Sample the LHC status endpoint once and update the latest snapshot and history.",
    )
    parser.add_argument("--source-url", help="Combined telemetry endpoint (SOURCE_URL)")
    parser.add_argument("--data-dir", help="Output directory (DATA_DIR)")
    parser.add_argument(
        "--force-species",
        help="Operator species override: protons or ions (FORCE_SPECIES)",
    )
    parser.add_argument(
        "--log-level",
        choices=["none", "summary", "full"],
        help="Cycle logging verbosity (LOG_LEVEL)",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        default=None,
        help="Use the synthetic source instead of HTTP (MOCK)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    candidates = {
        "source_url": args.source_url,
        "data_dir": args.data_dir,
        "force_species": args.force_species,
        "log_level": args.log_level,
        "mock": args.mock,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def main(argv: list[str] | None = None) -> int:
    """Run one cycle and return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(**_overrides(args))
    except ConfigValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG

    try:
        pipeline = TelemetryPipeline(config)
    except KeyError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG

    try:
        pipeline.run_cycle()
    except TransportError as exc:
        logger.error("Cycle failed, source unavailable: %s", exc)
        return EXIT_TRANSPORT
    except StorageError as exc:
        logger.error("Cycle failed, could not persist: %s", exc)
        return EXIT_STORAGE
    finally:
        pipeline.close()
    return EXIT_OK
