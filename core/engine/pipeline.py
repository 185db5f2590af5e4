# StrikeZone - Inference Pipeline
# ==============================
"""
Inference Pipeline
==================
Main orchestrator for one question.

Pipeline Steps:
1. Input Guard       - payload shape (done by the API before process())
2. SQL Generation    - Claude translates the question into one statement
3. SQL Validation    - single SELECT, known tables, LIMIT enforced
4. Execution         - read-only SQLite query
5. Response Composer - model summary, fixed empty message, or rule-based fallback

Data flows strictly forward. Nothing is cached and nothing persists between
calls; there is no retry-with-correction loop.
"""

import os
import time
import logging
from typing import Optional, Dict
from dataclasses import dataclass, field

from .errors import SQLValidationFailure
from .models import PipelineResult
from .llm_providers import BaseLLMProvider, LLMConfig, LLMProvider, create_llm_provider
from .sql_generator import SQLGenerator
from .sql_validator import SQLValidator, ValidatorConfig
from .executor import SQLExecutor, ExecutorConfig
from .response_composer import ResponseComposer, LLMAnswerFormatter, FallbackAnswerFormatter

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class PipelineConfig:
    """Configuration for the inference pipeline."""
    # SQLite dataset built by scripts/seed_database.py
    db_path: str = "data/lahman.db"

    # SQL validation (set False to trust the model's statement as-is)
    validation_enabled: bool = True
    default_limit: int = 10
    max_limit: int = 100

    # Execution
    max_rows: int = 1000

    # SQL generation call
    sql_temperature: float = 0.1
    sql_max_tokens: int = 500

    # Answer summarization call
    answer_temperature: float = 0.3
    answer_max_tokens: int = 300
    answer_min_length: int = 10

    # LLM provider settings
    llm: LLMConfig = field(default_factory=LLMConfig)

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create config from environment variables."""
        return cls(
            db_path=os.getenv("STRIKEZONE_DB_PATH", "data/lahman.db"),
            validation_enabled=_env_bool("SQL_VALIDATION_ENABLED", True),
            default_limit=int(os.getenv("SQL_DEFAULT_LIMIT", "10")),
            max_limit=int(os.getenv("SQL_MAX_LIMIT", "100")),
            max_rows=int(os.getenv("QUERY_MAX_ROWS", "1000")),
            sql_temperature=float(os.getenv("SQL_TEMPERATURE", "0.1")),
            sql_max_tokens=int(os.getenv("SQL_MAX_TOKENS", "500")),
            answer_temperature=float(os.getenv("ANSWER_TEMPERATURE", "0.3")),
            answer_max_tokens=int(os.getenv("ANSWER_MAX_TOKENS", "300")),
            answer_min_length=int(os.getenv("ANSWER_MIN_LENGTH", "10")),
            llm=LLMConfig.from_env(),
        )


class InferencePipeline:
    """
    Complete inference pipeline for baseball statistics questions.

    Example:
        pipeline = InferencePipeline(PipelineConfig.from_env())
        result = pipeline.process("Who had the lowest ERA in 2023?")
        print(result.answer)
    """

    def __init__(self,
                 config: PipelineConfig = None,
                 provider: Optional[BaseLLMProvider] = None,
                 executor: Optional[SQLExecutor] = None):
        """
        Initialize inference pipeline.

        Args:
            config: Pipeline configuration
            provider: LLM provider shared by generation and summarization
                (built from config.llm when omitted)
            executor: Query executor (built from config.db_path when omitted)
        """
        self.config = config or PipelineConfig()
        self.provider = provider or create_llm_provider(self.config.llm)
        self._init_components(executor)

    def _init_components(self, executor: Optional[SQLExecutor]):
        """Initialize all pipeline components."""
        self.sql_generator = SQLGenerator(
            self.provider,
            temperature=self.config.sql_temperature,
            max_tokens=self.config.sql_max_tokens
        )

        self.sql_validator = SQLValidator(ValidatorConfig(
            default_limit=self.config.default_limit,
            max_limit=self.config.max_limit
        ))

        self.executor = executor or SQLExecutor(
            self.config.db_path,
            ExecutorConfig(max_rows=self.config.max_rows)
        )

        self.composer = ResponseComposer(
            LLMAnswerFormatter(
                self.provider,
                temperature=self.config.answer_temperature,
                max_tokens=self.config.answer_max_tokens,
                min_length=self.config.answer_min_length
            ),
            FallbackAnswerFormatter()
        )

    def process(self, question: str) -> PipelineResult:
        """
        Process a natural language question.

        Args:
            question: User's question, already accepted by the InputGuard

        Returns:
            PipelineResult with answer, SQL and rows

        Raises:
            InvalidInput: If the question is empty or whitespace
            SynthesisFailure: If SQL generation fails
            SQLValidationFailure: If the statement is refused
            QueryExecutionFailure: If the database rejects the statement
        """
        start_time = time.time()
        pipeline_stages = {}
        warnings = []

        logger.info(f"Processing question: {question!r}")

        # STEP 2: SQL Generation
        generated = self.sql_generator.generate(question)
        pipeline_stages['sql_generation'] = {
            'model': generated.model_used,
            'time_ms': generated.generation_time_ms
        }
        sql = generated.sql

        # STEP 3: SQL Validation
        if self.config.validation_enabled:
            validation = self.sql_validator.validate(sql)
            pipeline_stages['sql_validation'] = {
                'is_valid': validation.is_valid,
                'errors': validation.errors,
                'warnings': validation.warnings,
                'tables': validation.tables_verified
            }
            if not validation.is_valid:
                logger.error(f"SQL validation failed: {validation.errors}")
                raise SQLValidationFailure(validation.errors, sql=sql)
            warnings.extend(validation.warnings)
            sql = validation.validated_sql

        # STEP 4: Execution
        execution = self.executor.execute(sql)
        pipeline_stages['execution'] = {
            'row_count': execution.row_count,
            'truncated': execution.truncated,
            'time_ms': execution.execution_time_ms
        }
        if execution.truncated:
            warnings.append(f"Results truncated to {execution.row_count} rows")
        logger.info(f"Query returned {execution.row_count} rows")

        # STEP 5: Response Composition
        compose_start = time.time()
        answer = self.composer.compose(question, sql, execution.data)
        pipeline_stages['response'] = {
            'branch': answer.branch,
            'formatter': answer.formatter,
            'degradation_reason': answer.degradation_reason,
            'time_ms': (time.time() - compose_start) * 1000
        }

        total_time = (time.time() - start_time) * 1000
        logger.info(
            f"Pipeline complete in {total_time:.0f}ms "
            f"(generation={generated.generation_time_ms:.0f}ms, "
            f"execution={execution.execution_time_ms:.0f}ms, answer={answer.branch})"
        )

        return PipelineResult(
            question=question,
            answer=answer.text,
            sql=sql,
            results=execution.data,
            row_count=execution.row_count,
            answer_branch=answer.branch,
            pipeline_stages=pipeline_stages,
            total_time_ms=total_time,
            warnings=warnings
        )

    def is_ready(self) -> Dict[str, bool]:
        """Check if all components are ready."""
        return {
            'database': self.executor.validate_connection(),
            'llm': self.provider.is_available()
        }


def create_pipeline(db_path: str = None,
                    provider: Optional[BaseLLMProvider] = None,
                    use_mock: bool = False) -> InferencePipeline:
    """
    Factory function to create a configured pipeline.

    Args:
        db_path: Path to the SQLite dataset (overrides STRIKEZONE_DB_PATH)
        provider: Pre-built LLM provider
        use_mock: Use the mock LLM provider

    Returns:
        Configured InferencePipeline
    """
    config = PipelineConfig.from_env()
    if db_path:
        config.db_path = db_path
    if use_mock:
        config.llm = LLMConfig(provider=LLMProvider.MOCK)

    return InferencePipeline(config=config, provider=provider)
