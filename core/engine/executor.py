# StrikeZone - SQL Executor
# ========================
"""
SQL Executor
============
Executes a statement against the SQLite dataset through a read-only
connection and returns the rows as column-keyed dicts.

Any engine error is re-raised as QueryExecutionFailure carrying the engine's
message. There is no retry and no partial-result salvage.

This is STEP 4 of the pipeline.
"""

import math
import time
import sqlite3
import logging
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass

from .errors import QueryExecutionFailure
from .models import ExecutionResult

logger = logging.getLogger(__name__)


def finite_or_none(value):
    """Map inf and nan to None so rows stay JSON-serializable."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


@dataclass
class ExecutorConfig:
    """Configuration for SQL executor."""
    # Maximum rows fetched from the cursor
    max_rows: int = 1000

    # Open the database file with mode=ro (should always be True)
    read_only: bool = True


class SQLExecutor:
    """
    Executes SQL against the SQLite dataset.

    Each call opens its own connection and closes it afterwards, so the
    executor holds no state between requests.

    Example:
        executor = SQLExecutor("data/lahman.db")
        result = executor.execute("SELECT COUNT(*) FROM people;")
        print(result.data)
    """

    def __init__(self,
                 db_path: str,
                 config: Optional[ExecutorConfig] = None,
                 connection: Optional[sqlite3.Connection] = None):
        """
        Initialize executor.

        Args:
            db_path: Path to the SQLite database file
            config: Executor configuration
            connection: Optional pre-opened connection (used instead of db_path)
        """
        self.db_path = db_path
        self.config = config or ExecutorConfig()
        self._shared_connection = connection

    def _connect(self) -> sqlite3.Connection:
        """Open a connection to the dataset."""
        if self.config.read_only:
            uri = f"{Path(self.db_path).resolve().as_uri()}?mode=ro"
            return sqlite3.connect(uri, uri=True)
        return sqlite3.connect(self.db_path)

    def execute(self, sql: str) -> ExecutionResult:
        """
        Execute SQL statement.

        Args:
            sql: Statement to run as-is (no parameter binding)

        Returns:
            ExecutionResult with zero or more rows

        Raises:
            QueryExecutionFailure: If the engine rejects or fails the statement
        """
        start_time = time.time()

        try:
            if self._shared_connection is not None:
                conn = self._shared_connection
                own_connection = False
            else:
                conn = self._connect()
                own_connection = True

            try:
                cursor = conn.execute(sql)

                if cursor.description is None:
                    columns, rows = [], []
                else:
                    columns = [desc[0] for desc in cursor.description]
                    rows = cursor.fetchmany(self.config.max_rows + 1)
            finally:
                if own_connection:
                    conn.close()

        except (sqlite3.Error, sqlite3.Warning) as e:
            execution_time = (time.time() - start_time) * 1000
            logger.error(f"SQL execution error after {execution_time:.0f}ms: {e}")
            raise QueryExecutionFailure(f"Database query failed: {e}", sql=sql) from e

        truncated = len(rows) > self.config.max_rows
        if truncated:
            rows = rows[:self.config.max_rows]
            logger.warning(f"Result truncated to {self.config.max_rows} rows")

        data = [dict(zip(columns, map(finite_or_none, row))) for row in rows]
        execution_time = (time.time() - start_time) * 1000

        return ExecutionResult(
            data=data,
            columns=columns,
            row_count=len(data),
            execution_time_ms=execution_time,
            truncated=truncated,
            sql_executed=sql
        )

    def get_tables(self) -> List[str]:
        """Get list of available tables."""
        try:
            result = self.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name;"
            )
            return [row['name'] for row in result.data]
        except QueryExecutionFailure as e:
            logger.error(f"Error getting tables: {e}")
            return []

    def validate_connection(self) -> bool:
        """Validate database connection."""
        if self._shared_connection is None and not Path(self.db_path).exists():
            logger.error(f"Database file not found: {self.db_path}")
            return False
        try:
            self.execute("SELECT 1;")
            return True
        except QueryExecutionFailure as e:
            logger.error(f"Database connection failed: {e}")
            return False
