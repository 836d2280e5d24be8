"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    _parse_bool,
    get_environment,
    get_environment_info,
    get_grid_size,
    get_history_limit,
    get_max_layers,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("STUDIO_GRID_SIZE", raising=False)
        assert get_environment(EnvVar.STUDIO_GRID_SIZE) == 10

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("STUDIO_GRID_SIZE", "25")
        assert get_environment(EnvVar.STUDIO_GRID_SIZE, override=5) == 5

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("STUDIO_MAX_LAYERS", "8")
        result = get_environment(EnvVar.STUDIO_MAX_LAYERS)
        assert result == 8
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers resolve to the default."""
        monkeypatch.setenv("STUDIO_GRID_SIZE", "ten")
        assert get_environment(EnvVar.STUDIO_GRID_SIZE) == 10

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
        result = get_environment(EnvVar.OPENAI_API_KEY)
        assert result == "sk-test-key"
        assert isinstance(result, str)

    @pytest.mark.unit
    def test_path_type(self, monkeypatch, tmp_path):
        """Path variables are converted to Path objects."""
        monkeypatch.setenv("STUDIO_PROJECT_DIR", str(tmp_path))
        assert get_environment(EnvVar.STUDIO_PROJECT_DIR) == Path(tmp_path)

    @pytest.mark.unit
    def test_bool_type(self, monkeypatch):
        """Boolean variables accept yes/no spellings."""
        monkeypatch.setenv("STUDIO_LIVE_MANIFEST", "yes")
        assert get_environment(EnvVar.STUDIO_LIVE_MANIFEST) is True
        monkeypatch.setenv("STUDIO_LIVE_MANIFEST", "later")
        assert get_environment(EnvVar.STUDIO_LIVE_MANIFEST) is False

    @pytest.mark.unit
    def test_provider_default(self, monkeypatch):
        """Gemini is the default code generation provider."""
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        assert get_environment(EnvVar.LLM_PROVIDER) == "gemini"


class TestConversionHelpers:
    """Tests for the private conversion helpers."""

    @pytest.mark.unit
    def test_parse_bool(self):
        """Recognized spellings map to booleans, others to None."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            assert _parse_bool(value) is True
        for value in ("false", "0", "no", "FALSE", "No"):
            assert _parse_bool(value) is False
        assert _parse_bool("maybe") is None

    @pytest.mark.unit
    def test_convert_bool_with_default(self):
        """Unrecognized booleans use the default."""
        assert _convert_value("maybe", bool, False) is False
        assert _convert_value("yes", bool, False) is True

    @pytest.mark.unit
    def test_convert_none_returns_default(self):
        """Missing values return the default untouched."""
        assert _convert_value(None, int, 7) == 7


class TestConvenienceFunctions:
    """Tests for editor configuration helpers."""

    @pytest.mark.unit
    def test_grid_size_rejects_non_positive(self, monkeypatch):
        """A zero grid falls back to the default unit."""
        monkeypatch.setenv("STUDIO_GRID_SIZE", "0")
        assert get_grid_size() == 10
        assert get_grid_size(override=20) == 20

    @pytest.mark.unit
    def test_max_layers_at_least_one(self, monkeypatch):
        """The layer limit never drops below one."""
        monkeypatch.setenv("STUDIO_MAX_LAYERS", "0")
        assert get_max_layers() == 1

    @pytest.mark.unit
    def test_history_limit_zero_is_unlimited(self, monkeypatch):
        """A zero limit means no trimming."""
        monkeypatch.delenv("STUDIO_HISTORY_LIMIT", raising=False)
        assert get_history_limit() is None
        assert get_history_limit(override=50) == 50


class TestIntrospection:
    """Tests for variable metadata and listing."""

    @pytest.mark.unit
    def test_environment_info(self):
        """Metadata is exposed as EnvConfig."""
        info = get_environment_info(EnvVar.STUDIO_MAX_LAYERS)
        assert isinstance(info, EnvConfig)
        assert info.name == "STUDIO_MAX_LAYERS"
        assert info.default == 5
        assert info.category == "editor"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Category filter only returns matching variables."""
        llm_vars = list_environment_variables("llm")
        assert EnvVar.OPENAI_API_KEY in llm_vars
        assert EnvVar.STUDIO_GRID_SIZE not in llm_vars
        assert all(v.value.category == "llm" for v in llm_vars)

    @pytest.mark.unit
    def test_list_all(self):
        """No filter returns every variable."""
        assert len(list_environment_variables()) == len(list(EnvVar))

    @pytest.mark.unit
    def test_names_match_members(self):
        """Each member's config name matches the member name."""
        for var in EnvVar:
            assert var.value.name == var.name
