"""Allow ``python -m lhc_telemetry``."""

from lhc_telemetry.cli import main

raise SystemExit(main())
