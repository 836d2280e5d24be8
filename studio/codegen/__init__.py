"""Code generation service.

Example:
    >>> from studio.codegen import AISettings, CodeGenerator
    >>> generator = CodeGenerator(AISettings.from_environment())
    >>> print(generator.generate(project, "micropython"))
"""

from .backend import (
    AISettings,
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    LLMBackend,
    LLMError,
    LLMProviderType,
    create_llm_backend,
)
from .lib import (
    SETTINGS_HINT,
    SYSTEM_PROMPT,
    CodeGenerator,
    CodeOutput,
    GenerationOutcome,
    build_prompt,
    error_comment,
)

__all__ = [
    "AISettings",
    "AuthenticationError",
    "GenerationConfig",
    "GenerationResult",
    "LLMBackend",
    "LLMError",
    "LLMProviderType",
    "create_llm_backend",
    "SETTINGS_HINT",
    "SYSTEM_PROMPT",
    "CodeGenerator",
    "CodeOutput",
    "GenerationOutcome",
    "build_prompt",
    "error_comment",
]
