# Tests for SQL Generator
"""
Test Suite for SQL Generator
============================
Tests SQL synthesis including:
- Code-fence stripping and semicolon termination
- Request parameters sent to the model
- Failure propagation (no retry, no canned fallback query)
"""

import pytest

from core.engine.errors import InvalidInput, SynthesisFailure
from core.engine.llm_providers import LLMConnectionError, LLMTimeoutError
from core.engine.sql_generator import SQLGenerator, normalize_sql, SQL_SYSTEM_PROMPT


class TestNormalizeSQL:
    """Test completion normalization."""

    def test_sql_fence_stripped(self):
        raw = "```sql\nSELECT COUNT(*) FROM people\n```"
        assert normalize_sql(raw) == "SELECT COUNT(*) FROM people;"

    def test_bare_fence_stripped(self):
        raw = "```\nSELECT COUNT(*) FROM people;\n```"
        assert normalize_sql(raw) == "SELECT COUNT(*) FROM people;"

    def test_uppercase_fence_stripped(self):
        raw = "```SQL\nSELECT 1\n```"
        assert normalize_sql(raw) == "SELECT 1;"

    def test_whitespace_trimmed(self):
        assert normalize_sql("\n\n  SELECT 1  \n") == "SELECT 1;"

    def test_existing_semicolon_kept_single(self):
        assert normalize_sql("SELECT 1;") == "SELECT 1;"

    def test_empty_completion(self):
        assert normalize_sql("") == ""
        assert normalize_sql("```sql\n```") == ""


class TestGenerationRequest:
    """Test what is sent to the model."""

    def test_request_parameters(self, scripted_provider):
        """One call: schema system prompt, verbatim question, temperature 0.1, 500 tokens."""
        provider = scripted_provider("SELECT 1")
        generator = SQLGenerator(provider)

        question = "Who had the lowest ERA in 2023?"
        generator.generate(question)

        assert len(provider.requests) == 1
        request = provider.requests[0]
        assert request.prompt == question
        assert request.system_prompt == SQL_SYSTEM_PROMPT
        assert request.temperature == 0.1
        assert request.max_tokens == 500

    def test_system_prompt_describes_schema(self):
        """The instruction set names every table and the LIMIT rule."""
        for table in ("people", "teams", "pitching"):
            assert f"- {table}:" in SQL_SYSTEM_PROMPT
        assert "LIMIT" in SQL_SYSTEM_PROMPT
        assert "SQLite" in SQL_SYSTEM_PROMPT
        assert "IPouts" in SQL_SYSTEM_PROMPT

    def test_generated_sql_normalized(self, scripted_provider):
        provider = scripted_provider("```sql\nSELECT SUM(W) FROM teams WHERE yearID = 2024\n```")
        generated = SQLGenerator(provider).generate("Total wins in 2024?")

        assert generated.sql == "SELECT SUM(W) FROM teams WHERE yearID = 2024;"
        assert generated.raw_response.startswith("```sql")
        assert generated.model_used == "scripted-model"


class TestGenerationFailures:
    """Test failure propagation."""

    def test_empty_question_rejected(self, scripted_provider):
        provider = scripted_provider("SELECT 1")
        with pytest.raises(InvalidInput):
            SQLGenerator(provider).generate("")
        assert provider.requests == []

    def test_whitespace_question_rejected(self, scripted_provider):
        provider = scripted_provider("SELECT 1")
        with pytest.raises(InvalidInput):
            SQLGenerator(provider).generate("   \n\t")
        assert provider.requests == []

    def test_provider_error_becomes_synthesis_failure(self, scripted_provider):
        error = LLMConnectionError("api.anthropic.com", "connection refused")
        provider = scripted_provider(error)

        with pytest.raises(SynthesisFailure) as exc_info:
            SQLGenerator(provider).generate("Who had the lowest ERA in 2023?")

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.original_error is error
        assert exc_info.value.stage == "sql_generation"

    def test_no_retry(self, scripted_provider):
        """A timeout is not retried: exactly one call is made."""
        provider = scripted_provider(LLMTimeoutError("claude", 60), "SELECT 1")

        with pytest.raises(SynthesisFailure):
            SQLGenerator(provider).generate("Top strikeouts 2019")

        assert len(provider.requests) == 1

    def test_unexpected_error_becomes_synthesis_failure(self, scripted_provider):
        provider = scripted_provider(RuntimeError("boom"))
        with pytest.raises(SynthesisFailure) as exc_info:
            SQLGenerator(provider).generate("Top strikeouts 2019")
        assert "boom" in exc_info.value.message

    def test_empty_completion_is_failure(self, scripted_provider):
        provider = scripted_provider("```sql\n```")
        with pytest.raises(SynthesisFailure):
            SQLGenerator(provider).generate("Top strikeouts 2019")
