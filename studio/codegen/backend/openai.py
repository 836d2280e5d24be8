"""OpenAI chat completions backend.

Serves OpenAI itself, Gemini through its OpenAI-compatible endpoint and any
custom OpenAI-compatible server.
"""

import logging
from typing import Any

from studio.config import get_environment

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    raise_for_provider_error,
)
from .provider_spec import LLMProviderType, get_provider_spec

logger = logging.getLogger(__name__)


class OpenAIBackend(LLMBackend):
    """OpenAI-compatible chat completions backend.

    Environment:
        OPENAI_API_KEY / GEMINI_API_KEY: API key for the matching provider.

    Example:
        >>> backend = OpenAIBackend(provider="gemini")
        >>> result = backend.generate("Generate LVGL code for a login screen")

        >>> backend = OpenAIBackend(
        ...     provider="custom", model="llama3", base_url="http://localhost:1234/v1"
        ... )
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        provider: str | LLMProviderType = LLMProviderType.OPENAI,
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        """Initialize backend.

        Args:
            api_key: API key. Falls back to the provider's env var.
            model: Model name. Defaults to the provider default.
            base_url: Optional custom API endpoint.
            provider: openai, gemini or custom.
            timeout: Request timeout in seconds.
            max_retries: Number of retry attempts for transient errors.

        Raises:
            AuthenticationError: If the provider needs a key and none is set.
        """
        self._spec = get_provider_spec(provider)
        if not self._spec.openai_compatible:
            raise ValueError(f"Provider {self._spec.provider.value} is not OpenAI-compatible")

        env_key = get_environment(self._spec.api_key_env_var) if self._spec.api_key_env_var else None
        self._api_key = api_key or env_key
        if not self._api_key and self._spec.requires_api_key:
            env_name = self._spec.api_key_env_var.value.name if self._spec.api_key_env_var else "API key"
            raise AuthenticationError(
                f"{self._spec.provider.value} API key required. Set {env_name} "
                "environment variable or pass api_key parameter."
            )

        self._model = model or self._spec.default_model
        self._base_url = base_url or self._spec.base_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize OpenAI client.

        Raises:
            ImportError: If openai package not installed.
        """
        if self._client is None:
            try:
                from openai import OpenAI

                self._client = OpenAI(
                    # Local servers accept any token but the SDK insists on one
                    api_key=self._api_key or "not-needed",
                    base_url=self._base_url,
                    timeout=self._timeout,
                    max_retries=self._max_retries,
                )
            except ImportError as e:
                raise ImportError(
                    "openai package required. Install with: pip install openai"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return self._spec.provider.value

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using the chat completions API."""
        config = config or GenerationConfig()
        client = self._get_client()

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "top_p": config.top_p,
        }

        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        if config.stop_sequences:
            kwargs["stop"] = config.stop_sequences

        logger.debug(f"Requesting completion from {self.name}")
        try:
            response = client.chat.completions.create(**kwargs)
        except Exception as e:
            raise_for_provider_error(e)
            raise

        if not response.choices:
            raise InvalidResponseError("Invalid response format from AI provider.")

        choice = response.choices[0]
        usage = response.usage
        return GenerationResult(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "unknown",
            usage={
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
            model=response.model or self._model,
            raw_response=response,
        )


__all__ = ["OpenAIBackend"]
