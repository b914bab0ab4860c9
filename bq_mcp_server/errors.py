"""Exception types surfaced by tool invocations.

FastMCP turns any exception raised by a tool into an error result whose
text is the exception message, so messages here are user-facing.
"""


class BigQueryMCPError(Exception):
    """Base class for all errors raised by this package."""


class BackendError(BigQueryMCPError):
    """A BigQuery call failed. Carries the backend's original message."""


class GuardRejection(BigQueryMCPError):
    """The dry-run estimate exceeds the configured scan budget."""

    def __init__(self, estimated_bytes: int, max_bytes: int):
        self.estimated_bytes = estimated_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"query would scan {estimated_bytes} bytes (limit {max_bytes})"
        )


class SourceReadError(BigQueryMCPError):
    """A SQL file could not be read."""


class SerializationError(BigQueryMCPError):
    """A result could not be encoded as JSON."""
