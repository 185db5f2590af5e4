# StrikeZone - SQL Generator
# =========================
"""
SQL Generator
=============
Translates a natural-language question into one SQLite statement using the
LLM, then normalizes the raw completion:

1. strip any Markdown code-fence markup the model added
2. trim surrounding whitespace
3. terminate the statement with a semicolon

A failed model call propagates as SynthesisFailure. There is no local retry
and no canned fallback query.

This is STEP 2 of the pipeline.
"""

import re
import time
import logging

from .errors import InvalidInput, SynthesisFailure
from .llm_providers import BaseLLMProvider, LLMRequest, LLMError
from .models import GeneratedSQL

logger = logging.getLogger(__name__)


# =============================================================================
# PROMPT
# =============================================================================

SQL_SYSTEM_PROMPT = """You are a baseball statistics assistant that translates user questions into SQL queries.

DATABASE SCHEMA:
- people: playerID (TEXT PRIMARY KEY), nameFirst (TEXT), nameLast (TEXT)
- teams: yearID (INT), lgID (TEXT), teamID (TEXT), franchID (TEXT), divID (TEXT), name (TEXT), G (INT), W (INT), L (INT)
- pitching: playerID (TEXT), yearID (INT), stint (INT), teamID (TEXT), lgID (TEXT), W (INT), L (INT), G (INT), GS (INT), SV (INT), IPouts (INT), H (INT), ER (INT), HR (INT), BB (INT), SO (INT), ERA (REAL)

RULES:
1. Use SQLite syntax
2. Always include a LIMIT clause to prevent excessive results (default LIMIT 10)
3. Use proper JOINs when querying across tables
4. Match player names with LIKE for flexibility (e.g., nameLast LIKE '%deGrom%')
5. Use aggregate functions (AVG, SUM, MAX, MIN, COUNT) for statistics
6. Always filter by yearID when a year is mentioned
7. teamID uses abbreviations (e.g., 'SEA' for Mariners, 'NYA' for Yankees, 'LAD' for Dodgers, 'HOU' for Astros, 'WAS' for Nationals)
8. ERA is stored as a REAL number, lower is better
9. IPouts represents innings pitched as outs (divide by 3 for innings)

RESPONSE FORMAT:
Return ONLY the SQL query without any explanation or markdown formatting.

EXAMPLES:
Q: Who had the lowest ERA in 2023?
A: SELECT p.playerID, pe.nameFirst, pe.nameLast, p.ERA FROM pitching p JOIN people pe ON p.playerID = pe.playerID WHERE p.yearID = 2023 AND p.GS >= 10 ORDER BY p.ERA ASC LIMIT 1;

Q: Show top 5 strikeout leaders for SEA in 2019
A: SELECT p.playerID, pe.nameFirst, pe.nameLast, p.SO FROM pitching p JOIN people pe ON p.playerID = pe.playerID WHERE p.teamID = 'SEA' AND p.yearID = 2019 ORDER BY p.SO DESC LIMIT 5;

Q: Summarize Jacob deGrom ERA by year
A: SELECT p.yearID, p.teamID, p.ERA, p.W, p.L FROM pitching p JOIN people pe ON p.playerID = pe.playerID WHERE pe.nameLast LIKE '%deGrom%' ORDER BY p.yearID LIMIT 10;"""


CODE_FENCE_PATTERN = re.compile(r'```(?:sql)?[ \t]*\n?', re.IGNORECASE)


def normalize_sql(raw: str) -> str:
    """
    Normalize a raw model completion into a terminated statement.

    Args:
        raw: Model output, possibly wrapped in code fences

    Returns:
        Trimmed statement ending with ';' (empty string if nothing remains)
    """
    sql = CODE_FENCE_PATTERN.sub('', (raw or '').strip())
    sql = sql.strip()

    if sql and not sql.endswith(';'):
        sql += ';'

    return sql


class SQLGenerator:
    """
    Generates SQL from a question with a single LLM call.

    Example:
        generator = SQLGenerator(provider)
        generated = generator.generate("Who had the lowest ERA in 2023?")
        print(generated.sql)
    """

    def __init__(self,
                 provider: BaseLLMProvider,
                 temperature: float = 0.1,
                 max_tokens: int = 500,
                 system_prompt: str = SQL_SYSTEM_PROMPT):
        """
        Initialize generator.

        Args:
            provider: LLM provider used for the call
            temperature: Sampling temperature (near-deterministic by default)
            max_tokens: Output-token ceiling for the SQL completion
            system_prompt: Schema and generation rules sent as the system message
        """
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    def generate(self, question: str) -> GeneratedSQL:
        """
        Generate a SQL statement for the question.

        Args:
            question: Natural-language question, passed to the model verbatim

        Returns:
            GeneratedSQL with the normalized statement

        Raises:
            InvalidInput: If the question is empty
            SynthesisFailure: If the model call fails or yields no statement
        """
        if not isinstance(question, str) or not question.strip():
            raise InvalidInput()

        start_time = time.time()
        request = LLMRequest(
            prompt=question,
            system_prompt=self.system_prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature
        )

        try:
            response = self.provider.generate(request)
        except LLMError as e:
            logger.error(f"SQL generation failed: {e}")
            raise SynthesisFailure(str(e), original_error=e) from e
        except Exception as e:
            logger.exception(f"Unexpected error during SQL generation: {e}")
            raise SynthesisFailure(f"SQL generation failed: {e}", original_error=e) from e

        sql = normalize_sql(response.content)
        if not sql:
            raise SynthesisFailure("SQL generation failed: the model returned no SQL")

        generation_time = (time.time() - start_time) * 1000
        logger.info(f"Generated SQL in {generation_time:.0f}ms: {sql}")

        return GeneratedSQL(
            sql=sql,
            raw_response=response.content,
            model_used=response.model,
            generation_time_ms=generation_time
        )
