"""Provider registry for code generation backends.

Model names are free-form; each provider only carries connection defaults.
"""

from dataclasses import dataclass
from enum import Enum

from studio.config import EnvVar


class LLMProviderType(Enum):
    """Available code generation providers."""

    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    CUSTOM = "custom"  # Any OpenAI-compatible endpoint


@dataclass(frozen=True)
class ProviderSpec:
    """Connection defaults for a provider.

    Attributes:
        provider: Provider type.
        default_model: Model used when none is configured.
        base_url: Default API endpoint, None for the SDK default.
        api_key_env_var: Environment variable holding the API key.
        requires_api_key: Whether requests fail without a key.
        openai_compatible: Whether the OpenAI chat completions API is used.
    """

    provider: LLMProviderType
    default_model: str
    base_url: str | None = None
    api_key_env_var: EnvVar | None = None
    requires_api_key: bool = True
    openai_compatible: bool = False

    @property
    def is_local(self) -> bool:
        return self.provider == LLMProviderType.OLLAMA


GEMINI_OPENAI_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
OPENAI_URL = "https://api.openai.com/v1"

PROVIDER_SPECS: dict[LLMProviderType, ProviderSpec] = {
    LLMProviderType.GEMINI: ProviderSpec(
        provider=LLMProviderType.GEMINI,
        default_model="gemini-2.5-flash",
        base_url=GEMINI_OPENAI_URL,
        api_key_env_var=EnvVar.GEMINI_API_KEY,
        openai_compatible=True,
    ),
    LLMProviderType.OPENAI: ProviderSpec(
        provider=LLMProviderType.OPENAI,
        default_model="gpt-4.1-mini",
        api_key_env_var=EnvVar.OPENAI_API_KEY,
        openai_compatible=True,
    ),
    LLMProviderType.ANTHROPIC: ProviderSpec(
        provider=LLMProviderType.ANTHROPIC,
        default_model="claude-sonnet-4-5",
        api_key_env_var=EnvVar.ANTHROPIC_API_KEY,
    ),
    LLMProviderType.OLLAMA: ProviderSpec(
        provider=LLMProviderType.OLLAMA,
        default_model="qwen3",
        requires_api_key=False,
    ),
    LLMProviderType.CUSTOM: ProviderSpec(
        provider=LLMProviderType.CUSTOM,
        default_model="gpt-4.1-mini",
        base_url=OPENAI_URL,
        requires_api_key=False,
        openai_compatible=True,
    ),
}

DEFAULT_PROVIDER = LLMProviderType.GEMINI


def get_provider_spec(provider: str | LLMProviderType) -> ProviderSpec:
    """Resolve a provider reference to its ProviderSpec.

    Raises:
        ValueError: If the provider is unknown.
    """
    try:
        return PROVIDER_SPECS[LLMProviderType(provider)]
    except ValueError as e:
        valid = ", ".join(p.value for p in LLMProviderType)
        raise ValueError(f"Unknown provider: {provider} (expected one of {valid})") from e


__all__ = [
    "LLMProviderType",
    "ProviderSpec",
    "PROVIDER_SPECS",
    "DEFAULT_PROVIDER",
    "GEMINI_OPENAI_URL",
    "OPENAI_URL",
    "get_provider_spec",
]
