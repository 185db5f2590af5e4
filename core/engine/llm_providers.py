# StrikeZone - LLM Provider Abstraction
# =====================================
"""
LLM Provider System
===================
Unified interface over the hosted language model:
- Claude (Anthropic API) - Primary
- Mock (local development and tests)

Every call is a single system + user exchange with an explicit temperature
and output-token ceiling. Providers make exactly one attempt per call; the
SDK's built-in retries are disabled so failures surface immediately.
"""

import os
import re
import time
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR CLASSES
# =============================================================================

class LLMError(Exception):
    """Base exception for LLM-related errors."""
    pass


class LLMConnectionError(LLMError):
    """Raised when the LLM service cannot be reached."""

    def __init__(self, host: str, original_error: str = None):
        self.host = host
        self.original_error = original_error
        super().__init__(
            f"Cannot connect to the AI service at {host}. "
            f"{original_error or 'The service may be unavailable.'}"
        )


class LLMTimeoutError(LLMError):
    """Raised when the LLM request times out."""

    def __init__(self, model: str, timeout: int):
        self.model = model
        self.timeout = timeout
        super().__init__(
            f"The AI model ({model}) did not respond within {timeout} seconds."
        )


class LLMAuthenticationError(LLMError):
    """Raised when the API key is missing or rejected."""
    pass


class LLMRateLimitError(LLMError):
    """Raised when the provider rate-limits the request."""
    pass


# =============================================================================
# CONFIGURATION
# =============================================================================

class LLMProvider(str, Enum):
    """Supported LLM providers."""
    CLAUDE = "claude"  # Primary - Cloud LLM via Anthropic API
    MOCK = "mock"      # For local runs and testing


@dataclass
class LLMConfig:
    """Configuration for the LLM provider."""
    provider: LLMProvider = LLMProvider.CLAUDE
    timeout: int = 60

    # Claude/Anthropic settings
    anthropic_api_key: Optional[str] = None
    claude_model: str = "claude-sonnet-4-20250514"

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """Create config from environment variables."""
        provider_str = os.getenv("LLM_PROVIDER", "claude").lower()
        try:
            provider = LLMProvider(provider_str)
        except ValueError:
            logger.warning(f"Unknown LLM_PROVIDER '{provider_str}', defaulting to claude")
            provider = LLMProvider.CLAUDE

        return cls(
            provider=provider,
            timeout=int(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            claude_model=os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514"),
        )


@dataclass
class LLMRequest:
    """Request to send to LLM: one system message plus one user message."""
    prompt: str
    system_prompt: Optional[str] = None
    max_tokens: int = 500
    temperature: float = 0.1


@dataclass
class LLMResponse:
    """Response from LLM."""
    content: str
    model: str
    provider: str
    generation_time_ms: float
    tokens_used: Optional[int] = None


# =============================================================================
# BASE LLM PROVIDER
# =============================================================================

class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            request: LLM request

        Returns:
            LLM response

        Raises:
            LLMError: If the call fails
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the provider name."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model name."""
        pass

    def _log_request(self, request: LLMRequest):
        """Log what is about to be sent (hash and size only)."""
        full_prompt = f"{request.system_prompt or ''}\n{request.prompt}"
        logger.info(
            f"LLM call: provider={self.get_provider_name()}, model={self.get_model_name()}, "
            f"prompt_len={len(full_prompt)}, "
            f"prompt_hash={hashlib.sha256(full_prompt.encode()).hexdigest()[:16]}, "
            f"temperature={request.temperature}, max_tokens={request.max_tokens}"
        )


# =============================================================================
# CLAUDE PROVIDER
# =============================================================================

class ClaudeProvider(BaseLLMProvider):
    """Claude LLM provider using Anthropic API."""

    API_HOST = "api.anthropic.com"

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self.api_key = config.anthropic_api_key
        self.model = config.claude_model
        self._client = None

    def get_provider_name(self) -> str:
        return "claude"

    def get_model_name(self) -> str:
        return self.model

    def _get_client(self):
        """Get or create Anthropic client."""
        if self._client is None:
            if not self.api_key:
                raise LLMAuthenticationError(
                    "ANTHROPIC_API_KEY not set. "
                    "Please set the environment variable."
                )
            import anthropic
            self._client = anthropic.Anthropic(
                api_key=self.api_key,
                timeout=self.config.timeout,
                max_retries=0
            )
        return self._client

    def is_available(self) -> bool:
        """Check if Claude API is configured."""
        return bool(self.api_key)

    def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate response using Claude API."""
        import anthropic

        self._log_request(request)
        start_time = time.time()
        client = self._get_client()

        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=request.max_tokens,
                system=request.system_prompt or "",
                messages=[{"role": "user", "content": request.prompt}],
                temperature=request.temperature
            )
        except anthropic.APITimeoutError:
            raise LLMTimeoutError(self.model, self.config.timeout)
        except anthropic.APIConnectionError as e:
            raise LLMConnectionError(self.API_HOST, str(e))
        except anthropic.AuthenticationError as e:
            raise LLMAuthenticationError(f"Claude API authentication failed: {e}")
        except anthropic.RateLimitError as e:
            raise LLMRateLimitError(f"Claude API rate limited: {e}")
        except anthropic.APIError as e:
            raise LLMError(f"Claude API error: {e}")

        content = ""
        if response.content:
            for block in response.content:
                if hasattr(block, 'text'):
                    content += block.text

        generation_time = (time.time() - start_time) * 1000

        return LLMResponse(
            content=content,
            model=self.model,
            provider="claude",
            generation_time_ms=generation_time,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens if response.usage else None
        )


# =============================================================================
# MOCK PROVIDER (for local runs and testing)
# =============================================================================

class MockProvider(BaseLLMProvider):
    """
    Mock LLM provider.

    Answers SQL-generation requests with canned statements keyed on the
    question's wording. Any other request gets an empty completion, which
    exercises the deterministic answer formatter.
    """

    YEAR_PATTERN = re.compile(r'\b(18|19|20)\d{2}\b')

    TEAM_IDS = {
        'mariners': 'SEA',
        'yankees': 'NYA',
        'dodgers': 'LAD',
        'astros': 'HOU',
        'nationals': 'WAS',
    }

    def get_provider_name(self) -> str:
        return "mock"

    def get_model_name(self) -> str:
        return "mock-model"

    def is_available(self) -> bool:
        return True

    def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate mock response."""
        start_time = time.time()

        if request.system_prompt and "DATABASE SCHEMA" in request.system_prompt:
            content = f"```sql\n{self._mock_sql(request.prompt)}\n```"
        else:
            content = ""

        return LLMResponse(
            content=content,
            model="mock-model",
            provider="mock",
            generation_time_ms=(time.time() - start_time) * 1000
        )

    def _mock_sql(self, question: str) -> str:
        """Pick a canned statement for the question."""
        question_lower = question.lower()
        year_match = self.YEAR_PATTERN.search(question)
        year_filter = f" AND p.yearID = {year_match.group(0)}" if year_match else ""

        if 'lowest era' in question_lower or 'best era' in question_lower:
            return (
                "SELECT p.playerID, pe.nameFirst, pe.nameLast, p.ERA "
                "FROM pitching p JOIN people pe ON p.playerID = pe.playerID "
                f"WHERE p.GS >= 10{year_filter} ORDER BY p.ERA ASC LIMIT 1"
            )
        if 'strikeout' in question_lower:
            return (
                "SELECT p.playerID, pe.nameFirst, pe.nameLast, p.SO "
                "FROM pitching p JOIN people pe ON p.playerID = pe.playerID "
                f"WHERE 1 = 1{year_filter} ORDER BY p.SO DESC LIMIT 5"
            )
        if 'how many wins' in question_lower:
            team_filter = ""
            for nickname, team_id in self.TEAM_IDS.items():
                if nickname in question_lower:
                    team_filter = f" AND p.teamID = '{team_id}'"
                    break
            return f"SELECT SUM(W) FROM teams p WHERE 1 = 1{team_filter}{year_filter}"
        return "SELECT COUNT(*) FROM pitching"


# =============================================================================
# PROVIDER FACTORY
# =============================================================================

def create_llm_provider(config: Optional[LLMConfig] = None) -> BaseLLMProvider:
    """
    Create an LLM provider based on configuration.

    Args:
        config: LLM configuration (uses env vars if not provided)

    Returns:
        Configured LLM provider (Claude or Mock)
    """
    if config is None:
        config = LLMConfig.from_env()

    logger.info(f"Creating LLM provider: {config.provider.value}")

    if config.provider == LLMProvider.MOCK:
        return MockProvider(config)

    provider = ClaudeProvider(config)
    if not provider.is_available():
        logger.error("Claude API not available - check ANTHROPIC_API_KEY")
    return provider


def get_available_providers() -> Dict[str, Any]:
    """
    Check which providers are available.

    Returns:
        Dict mapping provider name to availability
    """
    config = LLMConfig.from_env()

    return {
        "claude": ClaudeProvider(config).is_available(),
        "mock": True
    }
