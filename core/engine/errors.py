# StrikeZone - Pipeline Errors
# ===========================
"""
Pipeline Error Taxonomy
=======================
Every failure the request pipeline can signal, grouped by how the API
surfaces it:

- ClientInputError / InvalidInput  -> HTTP 400, raised before any model or DB work
- SynthesisFailure                 -> HTTP 500, model failed while generating SQL
- QueryExecutionFailure            -> HTTP 500, engine rejected or failed the SQL
- SQLValidationFailure             -> HTTP 500, statement refused before execution
- SummarizationDegradation         -> never surfaces; recovered by the fallback formatter
"""

from typing import List, Optional


class PipelineError(Exception):
    """Base exception for pipeline failures."""

    stage: str = "unknown"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if stage:
            self.stage = stage


class ClientInputError(PipelineError):
    """Raised when the inbound request body is malformed."""

    stage = "input"

    def __init__(self, message: str = "Invalid message"):
        super().__init__(message)


class InvalidInput(ClientInputError):
    """Raised when the synthesizer is handed an empty question."""

    def __init__(self, message: str = "Question must be a non-empty string"):
        super().__init__(message)


class SynthesisFailure(PipelineError):
    """Raised when the model call for SQL generation fails."""

    stage = "sql_generation"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class QueryExecutionFailure(PipelineError):
    """Raised when the relational engine fails to run the statement."""

    stage = "execution"

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.sql = sql


class SQLValidationFailure(QueryExecutionFailure):
    """Raised when the synthesized statement is refused before execution."""

    stage = "sql_validation"

    def __init__(self, errors: List[str], sql: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(
            f"Generated SQL was rejected: {'; '.join(self.errors)}",
            sql=sql
        )


class SummarizationDegradation(PipelineError):
    """Raised when the model summary is unusable. Always recovered locally."""

    stage = "summarization"
