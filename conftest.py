"""Root pytest configuration.

This module provides:
- Environment setup (loads .env)
- Auto-skipping of tests that need a live code generation provider
"""

from __future__ import annotations

import pytest
from dotenv import load_dotenv

from studio.config import get_available_llm_providers

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Auto-skip tests marked ``llm`` when no provider is configured."""
    if not any("llm" in item.keywords for item in items):
        return

    if get_available_llm_providers():
        return

    skip_llm = pytest.mark.skip(reason="No code generation provider configured")
    for item in items:
        if "llm" in item.keywords:
            item.add_marker(skip_llm)


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def llm_provider() -> str:
    """First available provider, preferring the configured one."""
    from studio.config import EnvVar, get_environment

    available = get_available_llm_providers()
    selected = get_environment(EnvVar.LLM_PROVIDER)
    return selected if selected in available else available[0]
