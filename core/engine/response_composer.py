# StrikeZone - Response Composer
# =============================
"""
Response Composer
=================
Turns the executed query's rows into a natural-language answer.

Three mutually exclusive branches per request:

1. Empty result  - fixed explanatory message, no model call
2. Model summary - rows are sent back to the LLM for a 1-3 sentence answer
3. Fallback      - deterministic rule-based formatting, used when the model
                   call raises or its answer fails the minimum-length gate

Both answer strategies implement BaseAnswerFormatter; the composer tries
the model formatter first and fails over to the rule-based one.

This is STEP 5 of the pipeline.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .errors import SummarizationDegradation
from .llm_providers import BaseLLMProvider, LLMRequest, LLMError
from .models import ComposedAnswer, Row

logger = logging.getLogger(__name__)


# =============================================================================
# MESSAGES & PROMPTS
# =============================================================================

NO_RESULTS_MESSAGE = """I couldn't find any data matching your question. This could be because:
- The player name might be spelled differently
- The year might not be in our dataset (we have data from 2018-2024)
- The team abbreviation might need adjustment (e.g., SEA for Seattle, NYA for Yankees, WAS for Nationals)

Would you like to try rephrasing your question?"""

FALLBACK_NO_RESULTS = "No results found."
FALLBACK_NO_DATA = "No data available."

ANSWER_SYSTEM_PROMPT = (
    "You are a helpful baseball statistics assistant. "
    "Answer questions clearly and concisely based on the data provided."
)

ANSWER_USER_PROMPT = """The user asked: "{question}"

The SQL query executed was: {sql}

The database returned these results:
{results}

Please provide a natural, conversational answer in 1-3 clear sentences. Be specific with numbers, names, and statistics."""


def serialize_rows(rows: List[Row]) -> str:
    """Render rows as indented JSON for the summarization prompt."""
    return json.dumps(rows, indent=2, default=str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _display(value: Any) -> str:
    """Plain rendering of a scalar; whole floats drop their '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _two_decimals(value: Any) -> Optional[str]:
    """Format as a two-decimal number, or None when not numeric."""
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return None


# =============================================================================
# ANSWER FORMATTERS
# =============================================================================

class BaseAnswerFormatter(ABC):
    """Strategy interface for turning rows into an answer."""

    name: str = "base"

    @abstractmethod
    def format(self, question: str, sql: str, rows: List[Row]) -> str:
        """
        Produce an answer for the rows.

        Args:
            question: Original user question
            sql: Statement that produced the rows
            rows: Result rows (column name -> value)

        Returns:
            Answer text
        """
        pass


class LLMAnswerFormatter(BaseAnswerFormatter):
    """Asks the LLM for a short conversational summary of the rows."""

    name = "llm"

    def __init__(self,
                 provider: BaseLLMProvider,
                 temperature: float = 0.3,
                 max_tokens: int = 300,
                 min_length: int = 10):
        """
        Args:
            provider: LLM provider used for the call
            temperature: Sampling temperature (moderate by default)
            max_tokens: Output-token ceiling for the answer
            min_length: Answers shorter than this (after trimming) are degenerate
        """
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.min_length = min_length

    def build_request(self, question: str, sql: str, rows: List[Row]) -> LLMRequest:
        """Build the summarization request."""
        prompt = ANSWER_USER_PROMPT.format(
            question=question,
            sql=sql,
            results=serialize_rows(rows)
        )
        return LLMRequest(
            prompt=prompt,
            system_prompt=ANSWER_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature
        )

    def format(self, question: str, sql: str, rows: List[Row]) -> str:
        """
        Summarize rows with the LLM.

        Raises:
            SummarizationDegradation: If the call fails or the answer is too short
        """
        request = self.build_request(question, sql, rows)

        try:
            response = self.provider.generate(request)
        except LLMError as e:
            raise SummarizationDegradation(f"Summarization call failed: {e}") from e
        except Exception as e:
            raise SummarizationDegradation(f"Unexpected summarization error: {e}") from e

        answer = (response.content or "").strip()
        if len(answer) < self.min_length:
            raise SummarizationDegradation(
                f"Summarization answer too short ({len(answer)} < {self.min_length} chars)"
            )

        return answer


class FallbackAnswerFormatter(BaseAnswerFormatter):
    """
    Deterministic rule-based answers.

    - no rows:                 "No results found."
    - one row, one column:     aggregate-aware sentence ("The total is 94.")
    - one row, many columns:   name / ERA / SO / W / year sentence
    - many rows:               plain-text table
    """

    name = "fallback"

    AGGREGATE_TEMPLATES = (
        ('SUM(', "The total is {value}."),
        ('AVG(', "The average is {value}."),
        ('COUNT(', "The count is {value}."),
    )

    def format(self, question: str, sql: str, rows: List[Row]) -> str:
        if not rows:
            return FALLBACK_NO_RESULTS

        if len(rows) == 1:
            row = rows[0]
            if len(row) == 1:
                return self._format_single_value(row)
            return self._format_single_row(row)

        return self.format_table(rows)

    def _format_single_value(self, row: Row) -> str:
        """Sentence for a single-row, single-column result."""
        column, value = next(iter(row.items()))

        if value is None:
            return FALLBACK_NO_DATA

        key = column.upper()
        for marker, template in self.AGGREGATE_TEMPLATES:
            if marker in key:
                if marker == 'AVG(':
                    average = _two_decimals(value)
                    if average is None:
                        break
                    return template.format(value=average)
                return template.format(value=_display(value))

        return f"Result: {column} = {_display(value)}"

    def _format_single_row(self, row: Row) -> str:
        """Sentence for a single-row, multi-column result."""
        parts = []

        if row.get('nameFirst') and row.get('nameLast'):
            parts.append(f"{row['nameFirst']} {row['nameLast']}")

        era = _two_decimals(row.get('ERA'))
        if era is not None:
            parts.append(f"ERA: {era}")

        if row.get('SO') is not None:
            parts.append(f"{_display(row['SO'])} SO")

        if row.get('W') is not None:
            parts.append(f"{_display(row['W'])} W")

        if row.get('yearID'):
            parts.append(f"({_display(row['yearID'])})")

        if parts:
            return " ".join(parts)
        return json.dumps(row, default=str)

    def format_table(self, rows: List[Row]) -> str:
        """Plain-text table: header, separator, one line per row."""
        if not rows:
            return FALLBACK_NO_RESULTS

        keys = list(rows[0].keys())
        header = " | ".join(keys)
        separator = " | ".join("---" for _ in keys)

        lines = [header, separator]
        for row in rows:
            lines.append(" | ".join(self._format_cell(row.get(key)) for key in keys))

        return "\n".join(lines)

    @staticmethod
    def _format_cell(value: Any) -> str:
        if value is None:
            return ""
        if _is_number(value):
            return f"{value:.2f}"
        return str(value)


# =============================================================================
# RESPONSE COMPOSER
# =============================================================================

class ResponseComposer:
    """
    Chooses the answer branch for a result set.

    Example:
        composer = ResponseComposer(LLMAnswerFormatter(provider))
        answer = composer.compose(question, sql, rows)
        print(answer.text)
    """

    def __init__(self,
                 primary: BaseAnswerFormatter,
                 fallback: Optional[BaseAnswerFormatter] = None):
        """
        Args:
            primary: Formatter tried first (normally the LLM formatter)
            fallback: Formatter used when the primary degrades
        """
        self.primary = primary
        self.fallback = fallback or FallbackAnswerFormatter()

    def compose(self, question: str, sql: str, rows: List[Row]) -> ComposedAnswer:
        """
        Compose the answer for the rows.

        Never raises for summarization problems: those are logged and
        answered by the fallback formatter.
        """
        if not rows:
            return ComposedAnswer(
                text=NO_RESULTS_MESSAGE,
                branch="empty_result",
                formatter="fixed"
            )

        try:
            text = self.primary.format(question, sql, rows)
            return ComposedAnswer(
                text=text,
                branch="model",
                formatter=self.primary.name
            )
        except SummarizationDegradation as e:
            logger.warning(f"Answer summarization degraded, using fallback: {e}")
            reason = str(e)

        return ComposedAnswer(
            text=self.fallback.format(question, sql, rows),
            branch="fallback",
            formatter=self.fallback.name,
            degradation_reason=reason
        )
