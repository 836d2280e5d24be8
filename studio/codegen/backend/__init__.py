"""Code generation backends.

Example:
    >>> from studio.codegen.backend import AISettings, create_llm_backend
    >>> backend = create_llm_backend(AISettings(provider="ollama", model="qwen3"))
"""

from .base import (
    AuthenticationError,
    ContextLengthError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    RateLimitError,
    raise_for_provider_error,
)
from .factory import AISettings, create_llm_backend
from .provider_spec import (
    DEFAULT_PROVIDER,
    PROVIDER_SPECS,
    LLMProviderType,
    ProviderSpec,
    get_provider_spec,
)

__all__ = [
    # Base
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    # Errors
    "LLMError",
    "RateLimitError",
    "ContextLengthError",
    "InvalidResponseError",
    "AuthenticationError",
    "raise_for_provider_error",
    # Providers
    "LLMProviderType",
    "ProviderSpec",
    "PROVIDER_SPECS",
    "DEFAULT_PROVIDER",
    "get_provider_spec",
    # Factory
    "AISettings",
    "create_llm_backend",
]
