"""Anthropic Claude backend implementation."""

import logging
from typing import Any

from studio.config import EnvVar, get_environment

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    LLMBackend,
    raise_for_provider_error,
)
from .provider_spec import LLMProviderType, get_provider_spec

logger = logging.getLogger(__name__)


class AnthropicBackend(LLMBackend):
    """Anthropic Claude backend.

    Environment:
        ANTHROPIC_API_KEY: API key (required if not passed to constructor).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        self._api_key = api_key or get_environment(EnvVar.ANTHROPIC_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._spec = get_provider_spec(LLMProviderType.ANTHROPIC)
        self._model = model or self._spec.default_model
        self._base_url = base_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize Anthropic client.

        Raises:
            ImportError: If anthropic package not installed.
        """
        if self._client is None:
            try:
                from anthropic import Anthropic

                self._client = Anthropic(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                    max_retries=self._max_retries,
                )
            except ImportError as e:
                raise ImportError(
                    "anthropic package required. Install with: pip install anthropic"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return "anthropic"

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using the Messages API.

        Anthropic has no native JSON mode, so it is requested in the prompt.
        """
        config = config or GenerationConfig()
        client = self._get_client()

        effective_prompt = prompt
        if config.json_mode:
            effective_prompt = (
                f"{prompt}\n\n"
                "IMPORTANT: Respond with valid JSON only. "
                "Do not include any text, explanation, or markdown formatting "
                "before or after the JSON object."
            )

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": effective_prompt}],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        if config.stop_sequences:
            kwargs["stop_sequences"] = config.stop_sequences

        logger.debug(f"Requesting message from {self.name}")
        try:
            response = client.messages.create(**kwargs)
        except Exception as e:
            raise_for_provider_error(e)
            raise

        content = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )

        return GenerationResult(
            content=content,
            finish_reason=response.stop_reason or "unknown",
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
            },
            model=response.model,
            raw_response=response,
        )


__all__ = ["AnthropicBackend"]
