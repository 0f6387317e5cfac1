"""Exception hierarchy for lhc-telemetry.

All exceptions derive from TelemetryError, enabling broad catch patterns
at the command-line boundary while allowing fine-grained handling internally.

Extraction misses and corrupt history lines are deliberately *not* errors:
they surface as ``None`` fields and silently dropped lines respectively.
"""


class TelemetryError(Exception):
    """Base exception for all lhc-telemetry errors."""


class TransportError(TelemetryError):
    """The telemetry source could not be read.

    Raised when the endpoint is unreachable, times out, or answers with a
    non-success HTTP status. Fatal for the current cycle.
    """


class PayloadParseError(TransportError):
    """The response body is not valid JSON.

    Propagates exactly like :class:`TransportError`.
    """


class ConfigValidationError(TelemetryError):
    """Configuration field validation failed.

    Raised when an environment variable or init kwarg cannot be coerced, or
    names an unknown bucket mode, species override, or source type.
    """


class StorageError(TelemetryError):
    """Writing the snapshot, history log, or classifier state failed.

    Wraps the underlying ``OSError``. Fatal for the current cycle.
    """
