"""Abstract base class for code generation backends.

Defines the interface that every LLM provider implementation follows.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class GenerationConfig:
    """Configuration for LLM text generation.

    Attributes:
        temperature: Sampling temperature (0.0-2.0). Lower = more deterministic.
        max_tokens: Maximum tokens to generate in response.
        json_mode: Whether to enforce JSON output format.
        stop_sequences: Optional sequences that stop generation.
        top_p: Nucleus sampling parameter (0.0-1.0).
    """

    temperature: float = 0.2
    max_tokens: int = 8192
    json_mode: bool = False
    stop_sequences: list[str] = field(default_factory=list)
    top_p: float = 1.0


@dataclass
class GenerationResult:
    """Result from LLM text generation.

    Attributes:
        content: Generated text content.
        finish_reason: Why generation stopped ('stop', 'length', ...).
        usage: Token usage dict (prompt_tokens, completion_tokens, total_tokens).
        model: Model identifier that was used.
        raw_response: Provider-specific raw response for debugging.
    """

    content: str
    finish_reason: str
    usage: dict[str, int]
    model: str
    raw_response: Any = None


class LLMBackend(ABC):
    """Abstract interface for LLM text generation backends.

    Implementations wrap a remote API (OpenAI, Gemini, Anthropic, any
    OpenAI-compatible endpoint) or a local Ollama server.

    Example:
        >>> backend = OpenAIBackend(model="gpt-4.1-mini")
        >>> result = backend.generate("Generate a create_ui() for this screen")
        >>> print(result.content)
    """

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text from a prompt.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction for context.
            config: Generation configuration options.

        Returns:
            GenerationResult with generated content and metadata.

        Raises:
            LLMError: If generation fails.
            RateLimitError: If API rate limit is exceeded.
            ContextLengthError: If prompt exceeds context window.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier (e.g., 'openai', 'gemini')."""

    @property
    def name(self) -> str:
        """Get backend identifier for logging.

        Returns:
            String in format 'provider:model'.
        """
        return f"{self.provider}:{self.model_name}"


class LLMError(Exception):
    """Base exception for LLM backend errors."""


class RateLimitError(LLMError):
    """Raised when API rate limit is exceeded.

    Attributes:
        retry_after: Suggested wait time in seconds before retry.
    """

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class ContextLengthError(LLMError):
    """Raised when prompt exceeds the model's context window."""


class InvalidResponseError(LLMError):
    """Raised when response cannot be parsed as expected format."""


class AuthenticationError(LLMError):
    """Raised when API authentication fails (invalid or missing key)."""


def raise_for_provider_error(error: Exception) -> None:
    """Convert a provider SDK exception to the matching LLMError.

    Raises:
        RateLimitError: For rate limit errors.
        ContextLengthError: For context length errors.
        AuthenticationError: For auth errors.
        LLMError: For other errors.
    """
    error_str = str(error).lower()

    if "rate limit" in error_str or "rate_limit" in error_str:
        raise RateLimitError(str(error)) from error
    elif "context length" in error_str or "maximum context" in error_str:
        raise ContextLengthError(str(error)) from error
    elif "authentication" in error_str or "api key" in error_str or "401" in error_str:
        raise AuthenticationError(str(error)) from error
    else:
        raise LLMError(str(error)) from error


__all__ = [
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "LLMError",
    "RateLimitError",
    "ContextLengthError",
    "InvalidResponseError",
    "AuthenticationError",
    "raise_for_provider_error",
]
