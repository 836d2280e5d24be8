"""Centralized configuration management for lvgl-studio.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from studio.config import EnvVar, get_environment
    >>>
    >>> grid = get_environment(EnvVar.STUDIO_GRID_SIZE)  # Returns int: 10
    >>> provider = get_environment(EnvVar.LLM_PROVIDER)  # Returns str: "gemini"
    >>>
    >>> for var in list_environment_variables("llm"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    llm: Code generation provider, model, endpoint and API keys
    service: Local service URLs (Ollama)
    editor: Grid size, layer limit, history depth
    logging: Log level for the command line tools
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_available_llm_providers,
    get_environment,
    get_environment_info,
    get_grid_size,
    get_history_limit,
    get_max_layers,
    list_environment_variables,
)

__all__ = [
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "get_grid_size",
    "get_max_layers",
    "get_history_limit",
    "get_available_llm_providers",
    "list_environment_variables",
]
