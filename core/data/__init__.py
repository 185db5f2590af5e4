# StrikeZone Data Module
# ======================
"""
Dataset construction for the Lahman Baseball Database subset.

This module provides:
- LahmanLoader: Read the Lahman CSV files and load them into SQLite
- Schema constants shared with the seeding script
"""

from .lahman_loader import (
    LahmanLoader,
    LoadResult,
    TABLE_COLUMNS,
    PRIMARY_KEYS,
    SOURCE_FILES,
    LOAD_ORDER,
    DEFAULT_MIN_YEAR,
    DEFAULT_MAX_YEAR,
    build_create_statement,
    sql_literal,
)

__all__ = [
    'LahmanLoader',
    'LoadResult',
    'TABLE_COLUMNS',
    'PRIMARY_KEYS',
    'SOURCE_FILES',
    'LOAD_ORDER',
    'DEFAULT_MIN_YEAR',
    'DEFAULT_MAX_YEAR',
    'build_create_statement',
    'sql_literal',
]
