"""
SQL Dumper
==========
Dumps a MySQL or SQLite database into a replayable SQL script with support for:
- Table include/exclude lists (literal names or /regex/ patterns)
- Views, triggers, stored procedures and events
- Extended inserts bounded by net_buffer_length
- Gzip and bzip2 compression
"""

__version__ = "1.0.0"

from .config import ConfigLoader
from .connection import DatabaseConnection, SQLiteConnection
from .dumper import Dumper
from .dsn import ConnectionDescriptor, parse_dsn
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    DiscoveryError,
    DumpError,
    OutputError,
    StructureError,
)
from .main import main
from .models import (
    ColumnInfo,
    ColumnTypeInfo,
    CompressMethod,
    Dialect,
    DumpSettings,
    DumpStats,
)
from .utils import format_settings_display, print_dry_run_info, setup_logging

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "SQLiteConnection",
    "Dumper",
    "ConnectionDescriptor",
    "parse_dsn",
    # Models
    "ColumnInfo",
    "ColumnTypeInfo",
    "CompressMethod",
    "Dialect",
    "DumpSettings",
    "DumpStats",
    # Errors
    "DumpError",
    "ConfigurationError",
    "ConnectionError",
    "DiscoveryError",
    "StructureError",
    "OutputError",
    # Utilities
    "format_settings_display",
    "print_dry_run_info",
    "setup_logging",
]
