"""
Utility functions for SQL Dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .dsn import ConnectionDescriptor
from .models import DumpSettings


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Log records go to stderr so a dump written to stdout stays clean.
    """
    log_level = getattr(logging, str(log_settings.get('level', 'INFO')).upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def format_settings_display(settings: DumpSettings) -> list[str]:
    """Format the options that differ from their defaults for display."""
    defaults = DumpSettings().to_dict()
    parts = []
    for name, value in settings.to_dict().items():
        if value == defaults[name]:
            continue
        if isinstance(value, list):
            value = ','.join(value)
        elif isinstance(value, str):
            value = f"'{value}'"
        parts.append(f"{name}={value}")
    return parts


def print_dry_run_info(
    descriptor: ConnectionDescriptor,
    settings: DumpSettings,
    destination: Optional[str]
) -> None:
    """Print information about what would be dumped in dry-run mode."""
    logging.info(
        f"Would dump database: {descriptor.dbname} from {descriptor.dialect.value} "
        f"at {descriptor.location}"
    )
    logging.info(f"  Output: {destination or 'stdout'}")

    extension = settings.compress.extension
    if destination and extension and not destination.endswith(extension):
        logging.warning(
            f"  Output is {settings.compress.value} compressed but {destination} "
            f"does not end with {extension}"
        )

    if settings.include_tables:
        logging.info(f"  - Only: {', '.join(settings.include_tables)}")
    else:
        logging.info("  - All tables and views")

    parts = format_settings_display(settings)
    if parts:
        logging.info(f"  Options: {', '.join(parts)}")
    else:
        logging.info("  Options: defaults")
