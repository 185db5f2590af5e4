# StrikeZone - SQL Validator
# =========================
"""
SQL Validator
=============
Statement-shape checks applied to the synthesized SQL before execution:

1. Exactly one statement, and it must be a SELECT (or WITH ... SELECT)
2. No data-modifying or schema-changing keywords
3. No SQL comments
4. Only the known tables (people, teams, pitching) and CTE names
5. A LIMIT clause, injected when missing and capped when too large

validate() is pure: it never touches the database and returns an
accept/reject decision together with the normalized statement.

This is STEP 3 of the pipeline.
"""

import re
import logging
from typing import List, Optional, Set
from dataclasses import dataclass, field

from .models import ValidationResult

logger = logging.getLogger(__name__)


KNOWN_TABLES = frozenset({'people', 'teams', 'pitching'})


@dataclass
class ValidatorConfig:
    """Configuration for SQL validator."""
    # Tables the statement may read from (case-insensitive)
    allowed_tables: Set[str] = field(default_factory=lambda: set(KNOWN_TABLES))

    # LIMIT injected when the statement has none
    default_limit: int = 10

    # Any LIMIT above this is lowered to it
    max_limit: int = 100


class SQLValidator:
    """
    Validates synthesized SQL for safety before it reaches the engine.

    Example:
        validator = SQLValidator()
        result = validator.validate(sql)
        if result.is_valid:
            executor.execute(result.validated_sql)
        else:
            print(f"Invalid: {result.errors}")
    """

    # Statements that change data or schema, or reach outside the dataset
    DANGEROUS_PATTERNS = {
        'delete': re.compile(r'\bDELETE\s+FROM\b', re.IGNORECASE),
        'update': re.compile(r'\bUPDATE\s+\w+\s+SET\b', re.IGNORECASE),
        'drop': re.compile(r'\bDROP\s+(?:TABLE|INDEX|VIEW|TRIGGER)\b', re.IGNORECASE),
        'insert': re.compile(r'\bINSERT\s+(?:OR\s+\w+\s+)?INTO\b', re.IGNORECASE),
        'replace': re.compile(r'\bREPLACE\s+INTO\b', re.IGNORECASE),
        'alter': re.compile(r'\bALTER\s+TABLE\b', re.IGNORECASE),
        'create': re.compile(r'\bCREATE\s+(?:TEMP\w*\s+|UNIQUE\s+|VIRTUAL\s+)?(?:TABLE|INDEX|VIEW|TRIGGER)\b', re.IGNORECASE),
        'attach': re.compile(r'\b(?:ATTACH|DETACH)\b', re.IGNORECASE),
        'pragma': re.compile(r'\bPRAGMA\b', re.IGNORECASE),
        'vacuum': re.compile(r'\bVACUUM\b', re.IGNORECASE),
    }

    COMMENT_PATTERN = re.compile(r'--|/\*')
    STRING_LITERAL_PATTERN = re.compile(r"'(?:[^']|'')*'")
    STATEMENT_START_PATTERN = re.compile(r'^\s*(?:SELECT|WITH)\b', re.IGNORECASE)

    # Name with an optional column list: t AS (...) or t(a, b) AS (...)
    CTE_NAME_PATTERN = re.compile(
        r'(?:\bWITH(?:\s+RECURSIVE)?|,)\s*(\w+)\s*(?:\([^)]*\))?\s*\bAS\s*\(',
        re.IGNORECASE
    )
    FROM_KEYWORD_PATTERN = re.compile(r'\bFROM\b', re.IGNORECASE)
    FROM_CLAUSE_PATTERN = re.compile(
        r'FROM\s+(.*?)(?=\bWHERE\b|\bGROUP\b|\bORDER\b|\bLIMIT\b|\bHAVING\b|\bUNION\b'
        r'|\bEXCEPT\b|\bINTERSECT\b|\bJOIN\b|\bLEFT\b|\bINNER\b|\bCROSS\b|\bNATURAL\b|\(|\)|$)',
        re.IGNORECASE | re.DOTALL
    )
    JOIN_TABLE_PATTERN = re.compile(r'\bJOIN\s+["`\[]?(\w+)', re.IGNORECASE)
    IDENTIFIER_PATTERN = re.compile(r'^\s*["`\[]?(\w+)')

    TRAILING_LIMIT_PATTERN = re.compile(
        r'\bLIMIT\s+(?:(\d+)\s*,\s*)?(\d+)(\s+OFFSET\s+\d+)?\s*$',
        re.IGNORECASE
    )

    def __init__(self, config: ValidatorConfig = None):
        """
        Initialize validator.

        Args:
            config: Validator configuration
        """
        self.config = config or ValidatorConfig()
        self.allowed_tables = {t.lower() for t in self.config.allowed_tables}

    def validate(self, sql: str) -> ValidationResult:
        """
        Validate SQL statement.

        Args:
            sql: Statement produced by the SQL generator

        Returns:
            ValidationResult with the decision and the normalized statement
        """
        errors = []
        warnings = []
        dangerous_found = []

        body = (sql or '').strip().rstrip(';').strip()
        if not body:
            return ValidationResult(
                is_valid=False,
                validated_sql="",
                errors=["Empty SQL query"]
            )

        # Analyze with string literals blanked so their contents never match
        skeleton = self.STRING_LITERAL_PATTERN.sub("''", body)

        if ';' in skeleton:
            errors.append("Only a single statement is allowed")

        if not self.STATEMENT_START_PATTERN.match(skeleton):
            errors.append("Only SELECT queries are allowed")

        dangerous = self._check_dangerous_operations(skeleton)
        if dangerous:
            dangerous_found.extend(dangerous)
            errors.append(f"Dangerous operations blocked: {', '.join(dangerous)}")

        if self.COMMENT_PATTERN.search(skeleton):
            dangerous_found.append("COMMENT")
            errors.append("SQL comments are not allowed")

        tables_used = self._extract_tables(skeleton)
        cte_names = {name.lower() for name in self.CTE_NAME_PATTERN.findall(skeleton)}
        tables_verified = []
        for table in tables_used:
            if table.lower() in self.allowed_tables or table.lower() in cte_names:
                tables_verified.append(table)
            else:
                errors.append(f"Table not found: {table}")

        if errors:
            logger.warning(f"SQL rejected: {errors}")
            return ValidationResult(
                is_valid=False,
                validated_sql="",
                errors=errors,
                warnings=warnings,
                tables_verified=tables_verified,
                dangerous_patterns_found=dangerous_found
            )

        validated_sql = self._enforce_limit(body, warnings)

        return ValidationResult(
            is_valid=True,
            validated_sql=f"{validated_sql};",
            errors=[],
            warnings=warnings,
            tables_verified=tables_verified,
            dangerous_patterns_found=[]
        )

    def _check_dangerous_operations(self, sql: str) -> List[str]:
        """Check for dangerous SQL operations."""
        return [
            name.upper()
            for name, pattern in self.DANGEROUS_PATTERNS.items()
            if pattern.search(sql)
        ]

    def _extract_tables(self, sql: str) -> List[str]:
        """Extract table names referenced in FROM and JOIN clauses."""
        tables = []

        # Scan every FROM separately so nested subqueries are not skipped
        for keyword in self.FROM_KEYWORD_PATTERN.finditer(sql):
            clause = self.FROM_CLAUSE_PATTERN.match(sql, keyword.start())
            if not clause:
                continue
            for part in clause.group(1).split(','):
                match = self.IDENTIFIER_PATTERN.match(part)
                if match:
                    tables.append(match.group(1))

        tables.extend(self.JOIN_TABLE_PATTERN.findall(sql))

        seen = set()
        unique = []
        for table in tables:
            if table.lower() not in seen:
                seen.add(table.lower())
                unique.append(table)
        return unique

    def _enforce_limit(self, body: str, warnings: List[str]) -> str:
        """Inject a LIMIT when missing, lower it when above the cap."""
        match = self.TRAILING_LIMIT_PATTERN.search(body)

        if not match:
            warnings.append(f"Added LIMIT {self.config.default_limit}")
            return f"{body} LIMIT {self.config.default_limit}"

        limit = int(match.group(2))
        if limit <= self.config.max_limit:
            return body

        warnings.append(f"LIMIT {limit} lowered to {self.config.max_limit}")
        start, end = match.span(2)
        return f"{body[:start]}{self.config.max_limit}{body[end:]}"


def validate_sql(sql: str, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Validate a statement with a one-off validator."""
    return SQLValidator(config).validate(sql)
