"""Backend factory for creating code generation backends from AI settings."""

from pydantic import BaseModel, ConfigDict

from studio.config import EnvVar, get_environment

from .base import LLMBackend
from .provider_spec import DEFAULT_PROVIDER, LLMProviderType, get_provider_spec


class AISettings(BaseModel):
    """User-selected code generation provider.

    Attributes:
        provider: Provider type.
        model: Free-form model name; the provider default when None.
        api_key: API key; the provider's environment variable when None.
        base_url: Custom endpoint; required in practice for ``custom``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: LLMProviderType = DEFAULT_PROVIDER
    model: str | None = None
    api_key: str | None = None
    base_url: str | None = None

    @classmethod
    def from_environment(cls, **overrides) -> "AISettings":
        """Settings from LLM_PROVIDER / LLM_MODEL / LLM_BASE_URL.

        Keyword overrides that are None fall back to the environment.
        """
        values = {
            "provider": get_environment(EnvVar.LLM_PROVIDER),
            "model": get_environment(EnvVar.LLM_MODEL),
            "base_url": get_environment(EnvVar.LLM_BASE_URL),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)

    @property
    def resolved_model(self) -> str:
        return self.model or get_provider_spec(self.provider).default_model


def create_llm_backend(settings: AISettings | None = None, **kwargs) -> LLMBackend:
    """Create the backend selected by ``settings``.

    Args:
        settings: Provider selection. Defaults to the environment.
        **kwargs: Additional arguments passed to the backend constructor
            (e.g., timeout).

    Returns:
        Configured LLMBackend instance.

    Raises:
        ValueError: If the provider is unsupported.
        AuthenticationError: If an API key is required but not available.

    Example:
        >>> backend = create_llm_backend(AISettings(provider="gemini", api_key="..."))
        >>> backend.name
        'gemini:gemini-2.5-flash'
    """
    settings = settings or AISettings.from_environment()
    spec = get_provider_spec(settings.provider)

    if spec.openai_compatible:
        from .openai import OpenAIBackend

        return OpenAIBackend(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            provider=spec.provider,
            **kwargs,
        )

    if spec.provider == LLMProviderType.ANTHROPIC:
        from .anthropic import AnthropicBackend

        return AnthropicBackend(
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            **kwargs,
        )

    if spec.provider == LLMProviderType.OLLAMA:
        from .ollama import OllamaBackend

        return OllamaBackend(
            model=settings.model,
            base_url=settings.base_url,
            **kwargs,
        )

    raise ValueError(f"Unsupported provider type: {spec.provider}")


__all__ = ["AISettings", "create_llm_backend"]
