#!/usr/bin/env python3
# StrikeZone - Dataset Seeding
# ===========================
# Builds the SQLite dataset from the Lahman CSV files
"""
Dataset Seeding Script

Builds the read-only query dataset from the Lahman Baseball Database:
1. Reads People.csv, Teams.csv and Pitching.csv from the input directory
2. Keeps the schema columns and the requested season range
3. Drops pitching rows whose player is not in People.csv
4. Recreates the people, teams and pitching tables in one transaction
5. Optionally writes the equivalent seed.sql script

Usage:
    python scripts/seed_database.py --input data/raw --output data/lahman.db

    # Different season range
    python scripts/seed_database.py --input data/raw --output data/lahman.db --min-year 2015 --max-year 2024

    # Also write seed.sql
    python scripts/seed_database.py --input data/raw --output data/lahman.db --sql-out seed.sql
"""

import sys
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.data.lahman_loader import (
    LahmanLoader, LOAD_ORDER, DEFAULT_MIN_YEAR, DEFAULT_MAX_YEAR
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_summary(results, counts) -> None:
    """Print a per-table summary."""
    print("\n" + "=" * 60)
    print("SEEDING SUMMARY")
    print("=" * 60)
    for table in LOAD_ORDER:
        result = results[table]
        status = "OK" if result.success else f"FAILED ({result.error})"
        print(f"  {table:<10} {counts.get(table, 0):>8} rows  "
              f"(dropped {result.rows_dropped})  {status}")
    print("=" * 60)


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description='StrikeZone - Lahman CSV to SQLite seeding',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/seed_database.py --input data/raw --output data/lahman.db
  python scripts/seed_database.py --input data/raw --output data/lahman.db --sql-out seed.sql
        """
    )

    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing People.csv, Teams.csv and Pitching.csv'
    )

    parser.add_argument(
        '--output', '-o',
        default='data/lahman.db',
        help='Output SQLite database path (default: data/lahman.db)'
    )

    parser.add_argument(
        '--min-year',
        type=int,
        default=DEFAULT_MIN_YEAR,
        help=f'First season to keep (default: {DEFAULT_MIN_YEAR})'
    )

    parser.add_argument(
        '--max-year',
        type=int,
        default=DEFAULT_MAX_YEAR,
        help=f'Last season to keep (default: {DEFAULT_MAX_YEAR})'
    )

    parser.add_argument(
        '--sql-out',
        help='Also write an equivalent seed.sql script to this path'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.min_year > args.max_year:
        parser.error('--min-year must not be greater than --max-year')

    loader = LahmanLoader(args.output, min_year=args.min_year, max_year=args.max_year)

    try:
        frames = loader.read_directory(args.input)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot read source files: {e}")
        sys.exit(1)

    results = loader.load(frames)
    if not all(result.success for result in results.values()):
        print_summary(results, {})
        sys.exit(1)

    if args.sql_out:
        loader.write_seed_sql(frames, args.sql_out)

    print_summary(results, loader.get_table_counts())
    sys.exit(0)


if __name__ == '__main__':
    main()
