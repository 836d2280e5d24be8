"""Ollama local model backend."""

import logging
from typing import Any

from studio.config import EnvVar, get_environment

from .base import GenerationConfig, GenerationResult, LLMBackend, LLMError
from .provider_spec import LLMProviderType, get_provider_spec

logger = logging.getLogger(__name__)


class OllamaBackend(LLMBackend):
    """Backend for models served by a local Ollama instance.

    Environment:
        OLLAMA_HOST: Server URL (default http://localhost:11434).
    """

    def __init__(
        self,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        self._spec = get_provider_spec(LLMProviderType.OLLAMA)
        self._model = model or self._spec.default_model
        self._base_url = base_url or get_environment(EnvVar.OLLAMA_HOST)
        self._timeout = timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize Ollama client.

        Raises:
            ImportError: If ollama package not installed.
        """
        if self._client is None:
            try:
                import ollama

                self._client = ollama.Client(host=self._base_url, timeout=self._timeout)
            except ImportError as e:
                raise ImportError(
                    "ollama package required. Install with: pip install ollama"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return "ollama"

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text using Ollama.

        Raises:
            LLMError: If generation fails (e.g., model not found, server down).
        """
        config = config or GenerationConfig()
        client = self._get_client()

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "options": {
                "temperature": config.temperature,
                "num_predict": config.max_tokens,
                "top_p": config.top_p,
            },
        }

        if config.json_mode:
            kwargs["format"] = "json"

        logger.debug(f"Requesting chat from {self.name} at {self._base_url}")
        try:
            response = client.chat(**kwargs)
        except Exception as e:
            error_msg = str(e).lower()
            if "not found" in error_msg or "pull" in error_msg:
                raise LLMError(
                    f"Model '{self._model}' not found. "
                    f"Pull it first with: ollama pull {self._model}"
                ) from e
            elif "connection" in error_msg or "refused" in error_msg:
                raise LLMError(
                    "Cannot connect to Ollama server. "
                    "Ensure Ollama is running: https://ollama.com"
                ) from e
            else:
                raise LLMError(str(e)) from e

        content = response.get("message", {}).get("content", "")
        prompt_tokens = response.get("prompt_eval_count") or 0
        completion_tokens = response.get("eval_count") or 0

        return GenerationResult(
            content=content,
            finish_reason=response.get("done_reason") or "stop",
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            model=self._model,
            raw_response=response,
        )


__all__ = ["OllamaBackend"]
