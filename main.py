#!/usr/bin/env python
# ============================================================================
# SQL EXPORTER - COMMAND LINE ENTRY POINT
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - CLI entry point
# PURPOSE: Load options, run one export, report the outcome
# CREATED: 19 OCT 2026
# USAGE:
#   pgsql-exporter --config export.env            # Export, pack, mail
#   pgsql-exporter --config export.env --print-sql  # Script to stdout
#   PGEXPORT_DB_NAME=shop ... pgsql-exporter      # Options from environment
# ============================================================================
"""
SQL Exporter Main

Exit status is 0 when an archive (or, with --print-sql, a script) was
produced and 1 otherwise. Logs go to stderr.
"""

import argparse
import dataclasses
import os
import sys
from typing import List, Optional

import psycopg

from __version__ import __version__
from core.config import ExportOptions
from core.errors import ExportError
from core.logging import ComponentType, configure_logging, get_logger
from services import PostgresExportService

logger = get_logger(__name__, ComponentType.CLI)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgsql-exporter",
        description="Export a PostgreSQL database to a replayable SQL script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pgsql-exporter --config export.env                # Export to archive
  pgsql-exporter --config export.env --print-sql    # Print the script
  pgsql-exporter --env-prefix BACKUP_               # Read BACKUP_DB_NAME etc.

Configuration keys:
  DB_USERNAME, DB_PASSWORD       Credentials (required)
  DB_NAME | DB_CONNECTION_STRING Target database (one required)
  SQL_FILE_NAME, TEMP_DIR        Output naming and location
  ADD_IF_NOT_EXISTS              Guard CREATE statements (default true)
  PRESERVE_GENERATED_ZIP         Keep the archive after delivery
  EMAIL_*                        Mail the archive when all are set
        """
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Dotenv-style property file (default: read the environment)"
    )
    parser.add_argument(
        "--env-prefix",
        type=str,
        default="PGEXPORT_",
        help="Environment variable prefix when no --config is given"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Temp directory root (overrides TEMP_DIR)"
    )
    parser.add_argument(
        "--print-sql",
        action="store_true",
        help="Write the script to stdout instead of packing it"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def load_options(args: argparse.Namespace) -> ExportOptions:
    if args.config:
        if not os.path.isfile(args.config):
            raise FileNotFoundError(f"Config file not found: {args.config}")
        options = ExportOptions.from_file(args.config)
    else:
        options = ExportOptions.from_env(args.env_prefix)
    if args.output_dir:
        options = dataclasses.replace(options, temp_dir=args.output_dir)
    return options


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else os.environ.get("LOG_LEVEL", "INFO"),
        json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
    )

    try:
        options = load_options(args)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot load options: {e}")
        return 1

    service = PostgresExportService(options)
    try:
        if args.print_sql:
            text = service.build_sql()
            if text is None:
                return 1
            sys.stdout.write(text)
            sys.stdout.write("\n")
            return 0

        archive = service.export()
    except (ExportError, psycopg.Error) as e:
        logger.error(f"Export failed: {e}")
        return 1

    if archive is None:
        return 1

    if service.skipped_tables:
        logger.warning(f"Skipped tables: {', '.join(service.skipped_tables)}")
    kept = service.generated_archive
    logger.info(f"Export finished: {kept if kept else archive.name + ' (removed after cleanup)'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
