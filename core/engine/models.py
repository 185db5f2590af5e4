# StrikeZone - Engine Models
# =========================
"""
Common dataclasses for the query pipeline.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from datetime import datetime


# A single result row: column name -> str | int | float | None
Row = Dict[str, Any]


@dataclass
class GeneratedSQL:
    """Result of SQL synthesis."""
    sql: str                    # Normalized statement, always ends with ';'
    raw_response: str           # Model output before normalization
    model_used: str
    generation_time_ms: float


@dataclass
class ValidationResult:
    """Accept/reject decision for a synthesized statement."""
    is_valid: bool
    validated_sql: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    tables_verified: List[str] = field(default_factory=list)
    dangerous_patterns_found: List[str] = field(default_factory=list)


@dataclass
class ExecutionResult:
    """Rows returned by the query executor."""
    data: List[Row] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    row_count: int = 0
    execution_time_ms: float = 0.0
    truncated: bool = False
    sql_executed: Optional[str] = None


@dataclass
class ComposedAnswer:
    """Natural-language answer and how it was produced."""
    text: str
    branch: str                 # empty_result, model, fallback
    formatter: str              # Name of the formatter that produced the text
    degradation_reason: Optional[str] = None


@dataclass
class PipelineResult:
    """Complete result of one question through the pipeline."""
    question: str
    answer: str
    sql: str
    results: List[Row] = field(default_factory=list)
    row_count: int = 0
    answer_branch: str = ""
    pipeline_stages: Dict[str, Any] = field(default_factory=dict)
    total_time_ms: float = 0.0
    warnings: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_response(self) -> Dict[str, Any]:
        """Payload returned by POST /api/chat."""
        return {
            'success': True,
            'message': self.answer,
            'sql': self.sql,
            'results': self.results
        }
