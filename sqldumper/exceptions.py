"""
Exception hierarchy for SQL Dumper.

Every failure is fatal for the run: nothing is retried or downgraded to a
warning, and the caller receives the first error raised.
"""


class DumpError(Exception):
    """Base exception for all dump errors."""

    pass


class ConfigurationError(DumpError):
    """Raised for unknown or invalid dump settings and malformed DSN strings."""

    pass


class ConnectionError(DumpError):
    """Raised when the driver fails to connect or a query fails."""

    pass


class DiscoveryError(DumpError):
    """Raised when requested tables or views are not found in the database."""

    pass


class StructureError(DumpError):
    """Raised when a SHOW CREATE query returns no usable row."""

    pass


class OutputError(DumpError):
    """Raised when the output destination cannot be opened or written."""

    pass
