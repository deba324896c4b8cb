#!/usr/bin/env python3
"""
SQL Dumper - CLI Entry Point
============================
Dumps a MySQL or SQLite database into a replayable SQL script with support for:
- Table include/exclude lists (literal names or /regex/ patterns)
- Views, triggers, stored procedures and events
- Extended inserts bounded by net_buffer_length
- Gzip and bzip2 compression
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .dsn import parse_dsn
from .dumper import Dumper
from .exceptions import DumpError
from .utils import print_dry_run_info, setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='SQL Dumper - dump a MySQL or SQLite database as SQL'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-o', '--output',
        help="Output file, '-' for stdout (overrides output.file)"
    )
    parser.add_argument(
        '--dsn',
        help='Connection DSN (overrides connection.dsn)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(1)
    except DumpError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    connection = config.get_connection()
    dsn = args.dsn or connection['dsn']
    destination = args.output or config.get_output_settings().get('file')

    try:
        settings = config.get_dump_settings()

        # Dry run mode
        if args.dry_run:
            logging.info("DRY RUN MODE - No data will be dumped")
            print_dry_run_info(parse_dsn(dsn), settings, destination)
            sys.exit(0)

        dumper = Dumper(dsn, connection['user'], connection['password'], settings)
        stats = dumper.start(destination)

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {stats.tables}")
        logging.info(f"Views: {stats.views}")
        logging.info(f"Triggers: {stats.triggers}")
        if stats.procedures or stats.events:
            logging.info(f"Procedures: {stats.procedures}, Events: {stats.events}")
        logging.info(f"Total Rows: {stats.total_rows}")

    except DumpError as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
