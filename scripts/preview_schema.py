#!/usr/bin/env python
# ============================================================================
# SCHEMA PREVIEW SCRIPT
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# PURPOSE: Print sequence and table DDL for a database without dumping rows
# USAGE:
#   python scripts/preview_schema.py --config export.env
#   python scripts/preview_schema.py --config export.env --list
# ============================================================================

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ExportOptions
from core.logging import configure_logging
from core.schema import DdlGenerator
from infrastructure import DdlHelper, PostgreSQLConnector
from repositories import CatalogRepository


def main():
    parser = argparse.ArgumentParser(
        description="Preview the schema section of an export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/preview_schema.py --config export.env          # Print DDL
  python scripts/preview_schema.py --config export.env --list   # Names only

Without --config, options are read from PGEXPORT_* environment variables.
        """
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to a KEY=VALUE options file"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List sequences and tables without rendering DDL"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "WARNING")

    options = ExportOptions.from_file(args.config) if args.config else ExportOptions.from_env()
    missing = options.missing_required()
    if missing:
        print(f"Missing options: {', '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    connector = PostgreSQLConnector(options.database)

    print("=" * 70)
    print(f"Database: {connector.describe()}")
    print("=" * 70)

    with connector.get_connection() as conn:
        with DdlHelper(conn, schema=options.helper_schema) as helper:
            catalog = CatalogRepository(conn, helper)
            sequences = catalog.list_sequences()
            tables = catalog.list_tables()

            if args.list:
                print(f"\nSequences ({len(sequences)}):")
                for seq in sequences:
                    print(f"  - {seq.qualified_name}")
                print(f"\nTables ({len(tables)}):")
                for table in tables:
                    print(f"  - {table.qualified_name}")
                return

            generator = DdlGenerator(catalog, add_if_not_exists=options.add_if_not_exists)
            for seq in sequences:
                print(generator.render_sequence(seq))
            for table in tables:
                print(generator.render_table(table))

    print("=" * 70)


if __name__ == "__main__":
    main()
