class TelemetryError(RuntimeError):
    """Base class for all errors reported by the telemetry core."""

    status_code = 500


class SourceUnavailable(TelemetryError):
    """A counter file or the disk report command could not be read."""

    status_code = 503


class ParseError(TelemetryError):
    """Counter text was malformed, incomplete or produced an undefined ratio."""

    status_code = 500


class StoreError(TelemetryError):
    """The history database could not be created, written or queried."""

    status_code = 503


class InvalidRequest(TelemetryError):
    """A history request carried malformed range or limit parameters."""

    status_code = 400
