# StrikeZone Engine Package
"""
Inference Engine
================
Question-to-answer engine for StrikeZone.

Pipeline:
1. Input Guard - Payload shape checks
2. SQL Generation - LLM-powered SQL generation
3. SQL Validation - Safety checks and LIMIT enforcement
4. Execution - Read-only SQLite query execution
5. Response Composer - Model summary or deterministic fallback
"""

# Errors
from .errors import (
    PipelineError,
    ClientInputError,
    InvalidInput,
    SynthesisFailure,
    QueryExecutionFailure,
    SQLValidationFailure,
    SummarizationDegradation
)

# Models
from .models import (
    Row,
    GeneratedSQL,
    ValidationResult,
    ExecutionResult,
    ComposedAnswer,
    PipelineResult
)

# LLM Providers
from .llm_providers import (
    LLMError,
    LLMConnectionError,
    LLMTimeoutError,
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMProvider,
    LLMConfig,
    LLMRequest,
    LLMResponse,
    BaseLLMProvider,
    ClaudeProvider,
    MockProvider,
    create_llm_provider,
    get_available_providers
)

# Pipeline Components
from .input_guard import InputGuard
from .sql_generator import SQLGenerator, normalize_sql, SQL_SYSTEM_PROMPT
from .sql_validator import SQLValidator, ValidatorConfig, KNOWN_TABLES, validate_sql
from .executor import SQLExecutor, ExecutorConfig
from .response_composer import (
    ResponseComposer,
    BaseAnswerFormatter,
    LLMAnswerFormatter,
    FallbackAnswerFormatter,
    NO_RESULTS_MESSAGE
)

# Main Pipeline
from .pipeline import (
    InferencePipeline,
    PipelineConfig,
    create_pipeline
)

__all__ = [
    # Errors
    'PipelineError',
    'ClientInputError',
    'InvalidInput',
    'SynthesisFailure',
    'QueryExecutionFailure',
    'SQLValidationFailure',
    'SummarizationDegradation',

    # Models
    'Row',
    'GeneratedSQL',
    'ValidationResult',
    'ExecutionResult',
    'ComposedAnswer',
    'PipelineResult',

    # LLM Providers
    'LLMError',
    'LLMConnectionError',
    'LLMTimeoutError',
    'LLMAuthenticationError',
    'LLMRateLimitError',
    'LLMProvider',
    'LLMConfig',
    'LLMRequest',
    'LLMResponse',
    'BaseLLMProvider',
    'ClaudeProvider',
    'MockProvider',
    'create_llm_provider',
    'get_available_providers',

    # Components
    'InputGuard',
    'SQLGenerator',
    'normalize_sql',
    'SQL_SYSTEM_PROMPT',
    'SQLValidator',
    'ValidatorConfig',
    'KNOWN_TABLES',
    'validate_sql',
    'SQLExecutor',
    'ExecutorConfig',
    'ResponseComposer',
    'BaseAnswerFormatter',
    'LLMAnswerFormatter',
    'FallbackAnswerFormatter',
    'NO_RESULTS_MESSAGE',

    # Pipeline
    'InferencePipeline',
    'PipelineConfig',
    'create_pipeline',
]
