"""Centralized environment configuration management for lvgl-studio.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from studio.config import EnvVar, get_environment
    >>>
    >>> grid = get_environment(EnvVar.STUDIO_GRID_SIZE)  # Returns int
    >>> api_key = get_environment(EnvVar.OPENAI_API_KEY)  # Returns str | None
    >>>
    >>> # Override at runtime
    >>> grid = get_environment(EnvVar.STUDIO_GRID_SIZE, override=5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "STUDIO_GRID_SIZE").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by lvgl-studio.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - llm: Code generation provider selection and API keys
        - service: Local service URLs
        - editor: Canvas and history behaviour
        - logging: Log output
    """

    # -------------------------------------------------------------------------
    # LLM Provider Selection
    # -------------------------------------------------------------------------
    OPENAI_API_KEY = EnvConfig(
        name="OPENAI_API_KEY",
        default=None,
        var_type=str,
        description="OpenAI API key for GPT models",
        category="llm",
    )
    ANTHROPIC_API_KEY = EnvConfig(
        name="ANTHROPIC_API_KEY",
        default=None,
        var_type=str,
        description="Anthropic API key for Claude models",
        category="llm",
    )
    GEMINI_API_KEY = EnvConfig(
        name="GEMINI_API_KEY",
        default=None,
        var_type=str,
        description="Google Gemini API key (OpenAI-compatible endpoint)",
        category="llm",
    )
    LLM_PROVIDER = EnvConfig(
        name="LLM_PROVIDER",
        default="gemini",
        var_type=str,
        description="Code generation provider (gemini, openai, anthropic, ollama, custom)",
        category="llm",
    )
    LLM_MODEL = EnvConfig(
        name="LLM_MODEL",
        default=None,
        var_type=str,
        description="Free-form model identifier; provider default when unset",
        category="llm",
    )
    LLM_BASE_URL = EnvConfig(
        name="LLM_BASE_URL",
        default=None,
        var_type=str,
        description="Custom API endpoint for OpenAI-compatible providers",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    OLLAMA_HOST = EnvConfig(
        name="OLLAMA_HOST",
        default="http://localhost:11434",
        var_type=str,
        description="Ollama server URL for local LLM",
        category="service",
    )

    # -------------------------------------------------------------------------
    # Editor Behaviour
    # -------------------------------------------------------------------------
    STUDIO_GRID_SIZE = EnvConfig(
        name="STUDIO_GRID_SIZE",
        default=10,
        var_type=int,
        description="Snap grid unit in canvas pixels",
        category="editor",
    )
    STUDIO_MAX_LAYERS = EnvConfig(
        name="STUDIO_MAX_LAYERS",
        default=5,
        var_type=int,
        description="Maximum number of layers per screen",
        category="editor",
    )
    STUDIO_HISTORY_LIMIT = EnvConfig(
        name="STUDIO_HISTORY_LIMIT",
        default=0,
        var_type=int,
        description="Maximum undo steps kept (0 = unlimited)",
        category="editor",
    )
    STUDIO_PROJECT_DIR = EnvConfig(
        name="STUDIO_PROJECT_DIR",
        default=None,
        var_type=Path,
        description="Default directory for saved project files",
        category="editor",
    )

    # -------------------------------------------------------------------------
    # Packaging
    # -------------------------------------------------------------------------
    STUDIO_LIVE_MANIFEST = EnvConfig(
        name="STUDIO_LIVE_MANIFEST",
        default=False,
        var_type=bool,
        description="Fetch the board manifest from the LVGL project creator",
        category="packaging",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    STUDIO_LOG_LEVEL = EnvConfig(
        name="STUDIO_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the command line tools",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.STUDIO_GRID_SIZE)
        10
        >>> get_environment(EnvVar.STUDIO_GRID_SIZE, override=5)
        5
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_grid_size(override: int | None = None) -> int:
    """Get the snap grid unit. Non-positive values fall back to the default."""
    size = get_environment(EnvVar.STUDIO_GRID_SIZE, override=override)
    return size if size > 0 else EnvVar.STUDIO_GRID_SIZE.value.default


def get_max_layers(override: int | None = None) -> int:
    """Get the per-screen layer limit."""
    limit = get_environment(EnvVar.STUDIO_MAX_LAYERS, override=override)
    return max(1, limit)


def get_history_limit(override: int | None = None) -> int | None:
    """Get the undo depth limit, or None for unlimited."""
    limit = get_environment(EnvVar.STUDIO_HISTORY_LIMIT, override=override)
    return limit if limit > 0 else None


def get_available_llm_providers() -> list[str]:
    """Get list of available LLM providers.

    Checks both cloud providers (by API key) and local providers (by availability).

    Returns:
        List of provider names (e.g., ["gemini", "ollama"]).
    """
    providers = []

    if get_environment(EnvVar.GEMINI_API_KEY):
        providers.append("gemini")
    if get_environment(EnvVar.OPENAI_API_KEY):
        providers.append("openai")
    if get_environment(EnvVar.ANTHROPIC_API_KEY):
        providers.append("anthropic")
    if get_environment(EnvVar.LLM_BASE_URL):
        providers.append("custom")

    ollama_url = get_environment(EnvVar.OLLAMA_HOST)
    if ollama_url:
        try:
            import httpx

            response = httpx.get(f"{ollama_url}/api/tags", timeout=2.0)
            if response.status_code == 200:
                providers.append("ollama")
        except httpx.HTTPError:
            pass  # Ollama not running

    return providers


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, service, editor, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_grid_size",
    "get_max_layers",
    "get_history_limit",
    "get_available_llm_providers",
    # Introspection
    "list_environment_variables",
]
