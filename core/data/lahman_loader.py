# StrikeZone - Lahman Loader Module
# ================================
# Loads the Lahman Baseball Database CSV subset into SQLite
"""
SQLite loader for the Lahman Baseball Database subset with support for:
- Reading People.csv, Teams.csv and Pitching.csv with pandas
- Keeping only the columns the query schema exposes
- Season range filtering
- Referential checks (every pitching row must reference a person)
- Writing an equivalent seed.sql script of DROP/CREATE/INSERT statements
"""

import sqlite3
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterable
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

logger = logging.getLogger(__name__)


# =============================================================================
# SCHEMA
# =============================================================================

# Column name -> SQLite type, in table order
TABLE_COLUMNS: Dict[str, Dict[str, str]] = {
    'people': {
        'playerID': 'TEXT',
        'nameFirst': 'TEXT',
        'nameLast': 'TEXT',
    },
    'teams': {
        'yearID': 'INTEGER',
        'lgID': 'TEXT',
        'teamID': 'TEXT',
        'franchID': 'TEXT',
        'divID': 'TEXT',
        'name': 'TEXT',
        'G': 'INTEGER',
        'W': 'INTEGER',
        'L': 'INTEGER',
    },
    'pitching': {
        'playerID': 'TEXT',
        'yearID': 'INTEGER',
        'stint': 'INTEGER',
        'teamID': 'TEXT',
        'lgID': 'TEXT',
        'W': 'INTEGER',
        'L': 'INTEGER',
        'G': 'INTEGER',
        'GS': 'INTEGER',
        'SV': 'INTEGER',
        'IPouts': 'INTEGER',
        'H': 'INTEGER',
        'ER': 'INTEGER',
        'HR': 'INTEGER',
        'BB': 'INTEGER',
        'SO': 'INTEGER',
        'ERA': 'REAL',
    },
}

PRIMARY_KEYS: Dict[str, List[str]] = {
    'people': ['playerID'],
    'teams': ['yearID', 'teamID'],
    'pitching': ['playerID', 'yearID', 'teamID', 'stint'],
}

SOURCE_FILES: Dict[str, str] = {
    'people': 'People.csv',
    'teams': 'Teams.csv',
    'pitching': 'Pitching.csv',
}

# people must exist before pitching references it
LOAD_ORDER = ('people', 'teams', 'pitching')
DROP_ORDER = tuple(reversed(LOAD_ORDER))

DEFAULT_MIN_YEAR = 2018
DEFAULT_MAX_YEAR = 2024


def build_create_statement(table: str) -> str:
    """CREATE TABLE statement for one of the schema tables."""
    lines = [f"    {name} {sql_type}" for name, sql_type in TABLE_COLUMNS[table].items()]

    keys = PRIMARY_KEYS[table]
    if len(keys) == 1:
        lines[0] += " PRIMARY KEY"
    else:
        lines.append(f"    PRIMARY KEY ({', '.join(keys)})")

    if table == 'pitching':
        lines.append("    FOREIGN KEY (playerID) REFERENCES people(playerID)")

    return f"CREATE TABLE {table} (\n" + ",\n".join(lines) + "\n);"


def build_insert_statement(table: str) -> str:
    """Parameterized INSERT statement for bulk loading."""
    columns = list(TABLE_COLUMNS[table])
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"


def sql_literal(value: Any) -> str:
    """
    Render a value as a SQL literal for seed.sql.

    None/empty -> NULL, numbers unquoted, strings single-quoted with '' escaping.
    """
    if value is None or value == '':
        return 'NULL'
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    return "'" + text.replace("'", "''") + "'"


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class LoadResult:
    """Result of loading one table."""
    success: bool
    table_name: str
    rows_loaded: int
    rows_dropped: int = 0
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0


# =============================================================================
# LOADER
# =============================================================================

class LahmanLoader:
    """
    Loader for the Lahman subset into SQLite.

    Example:
        loader = LahmanLoader('data/lahman.db')

        frames = loader.read_directory('data/raw')
        results = loader.load(frames)

        loader.write_seed_sql(frames, 'seed.sql')
    """

    def __init__(self,
                 db_path: str,
                 min_year: Optional[int] = DEFAULT_MIN_YEAR,
                 max_year: Optional[int] = DEFAULT_MAX_YEAR):
        """
        Initialize loader.

        Args:
            db_path: Path to the SQLite database file (created if missing)
            min_year: First season kept for teams and pitching (None = no bound)
            max_year: Last season kept for teams and pitching (None = no bound)
        """
        self.db_path = Path(db_path)
        self.min_year = min_year
        self.max_year = max_year

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def read_csv(self, path: str, table: str) -> pd.DataFrame:
        """
        Read one Lahman CSV file, keeping only the schema columns.

        Args:
            path: CSV file path
            table: Target table name (people, teams or pitching)

        Returns:
            DataFrame with typed columns in schema order

        Raises:
            ValueError: If the file lacks a schema column
        """
        columns = TABLE_COLUMNS[table]
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding='utf-8')
        df.columns = [str(c).strip() for c in df.columns]

        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(f"{Path(path).name} is missing columns: {', '.join(missing)}")

        df = df[list(columns)].apply(lambda s: s.str.strip())
        logger.info(f"Read {len(df)} rows from {Path(path).name}")
        return self._coerce_types(df, table)

    def read_directory(self, input_dir: str) -> Dict[str, pd.DataFrame]:
        """
        Read People.csv, Teams.csv and Pitching.csv from a directory.

        Raises:
            FileNotFoundError: If any of the three files is missing
        """
        input_path = Path(input_dir)
        frames = {}
        for table in LOAD_ORDER:
            path = input_path / SOURCE_FILES[table]
            if not path.exists():
                raise FileNotFoundError(f"Source file not found: {path}")
            frames[table] = self.read_csv(str(path), table)
        return frames

    @staticmethod
    def _coerce_types(df: pd.DataFrame, table: str) -> pd.DataFrame:
        """Convert numeric columns; empty strings and inf/nan become missing values."""
        df = df.copy()
        for name, sql_type in TABLE_COLUMNS[table].items():
            if sql_type in ('INTEGER', 'REAL'):
                values = pd.to_numeric(df[name], errors='coerce')
                values = values.where(values.abs() != float('inf'))
                df[name] = values.astype('Int64') if sql_type == 'INTEGER' else values
            else:
                df[name] = df[name].where(df[name] != '', None)
        return df

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter_years(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep rows whose yearID falls inside the configured season range."""
        mask = pd.Series(True, index=df.index)
        if self.min_year is not None:
            mask &= (df['yearID'] >= self.min_year).fillna(False)
        if self.max_year is not None:
            mask &= (df['yearID'] <= self.max_year).fillna(False)
        return df[mask.astype(bool)]

    def prepare(self, frames: Dict[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
        """
        Apply season filtering, key deduplication and the person reference check.

        Args:
            frames: Raw frames keyed by table name

        Returns:
            Frames ready for insertion, keyed by table name
        """
        prepared = {}
        for table in LOAD_ORDER:
            df = frames[table]

            if 'yearID' in df.columns:
                before = len(df)
                df = self.filter_years(df)
                if len(df) != before:
                    logger.info(f"{table}: kept {len(df)} of {before} rows in season range")

            keys = PRIMARY_KEYS[table]
            missing_key = df[keys].isna().any(axis=1)
            if missing_key.any():
                logger.warning(f"{table}: dropping {int(missing_key.sum())} rows with an empty key")
                df = df[~missing_key]

            duplicated = df.duplicated(subset=keys, keep='first')
            if duplicated.any():
                logger.warning(f"{table}: dropping {int(duplicated.sum())} duplicate key rows")
                df = df[~duplicated]

            if table == 'pitching':
                known = set(prepared['people']['playerID'])
                orphan = ~df['playerID'].isin(known)
                if orphan.any():
                    logger.warning(
                        f"pitching: dropping {int(orphan.sum())} rows whose playerID "
                        f"is not in people"
                    )
                    df = df[~orphan]

            prepared[table] = df.reset_index(drop=True)

        return prepared

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    @staticmethod
    def iter_rows(df: pd.DataFrame) -> Iterable[tuple]:
        """Yield rows as tuples of plain Python values (missing -> None)."""
        values = df.astype(object).where(df.notna(), None)
        return values.itertuples(index=False, name=None)

    def load(self, frames: Dict[str, pd.DataFrame]) -> Dict[str, LoadResult]:
        """
        Recreate the three tables and insert the frames in one transaction.

        Args:
            frames: Frames keyed by table name, as returned by read_directory()

        Returns:
            LoadResult per table
        """
        start_time = datetime.now()
        prepared = self.prepare(frames)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        results = {}
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            with conn:
                conn.execute("BEGIN")
                for table in DROP_ORDER:
                    conn.execute(f"DROP TABLE IF EXISTS {table}")
                for table in LOAD_ORDER:
                    df = prepared[table]
                    conn.execute(build_create_statement(table))
                    conn.executemany(build_insert_statement(table), self.iter_rows(df))
                    results[table] = LoadResult(
                        success=True,
                        table_name=table,
                        rows_loaded=len(df),
                        rows_dropped=len(frames[table]) - len(df)
                    )
        except sqlite3.Error as e:
            logger.error(f"Failed to load dataset into {self.db_path}: {e}")
            return {
                table: LoadResult(success=False, table_name=table, rows_loaded=0, error=str(e))
                for table in LOAD_ORDER
            }
        finally:
            conn.close()

        duration = (datetime.now() - start_time).total_seconds()
        for table, result in results.items():
            result.duration_seconds = duration
            logger.info(f"Loaded {result.rows_loaded} rows into {table}")

        return results

    def write_seed_sql(self, frames: Dict[str, pd.DataFrame], output_path: str) -> int:
        """
        Write the equivalent seed.sql script.

        Args:
            frames: Frames keyed by table name
            output_path: Destination file

        Returns:
            Number of INSERT statements written
        """
        prepared = self.prepare(frames)
        lines = [f"DROP TABLE IF EXISTS {table};" for table in DROP_ORDER]
        lines.append("")

        for table in LOAD_ORDER:
            lines.append(build_create_statement(table))
            lines.append("")

        inserts = 0
        for table in LOAD_ORDER:
            columns = ", ".join(TABLE_COLUMNS[table])
            lines.append(f"-- Insert {table}")
            for row in self.iter_rows(prepared[table]):
                values = ", ".join(sql_literal(v) for v in row)
                lines.append(f"INSERT INTO {table} ({columns}) VALUES ({values});")
                inserts += 1
            lines.append("")

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines), encoding='utf-8')
        logger.info(f"Wrote {inserts} INSERT statements to {path}")
        return inserts

    def get_table_counts(self) -> Dict[str, int]:
        """Row count per table in the loaded database."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            return {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in LOAD_ORDER
            }
        finally:
            conn.close()
