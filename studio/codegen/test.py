"""Unit tests for the code generation service and its backends."""

import threading
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from studio.model import Project, WidgetEvent
from studio.serialize import CodeLanguage

from .backend import (
    AISettings,
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    LLMProviderType,
    RateLimitError,
    create_llm_backend,
    get_provider_spec,
    raise_for_provider_error,
)
from .backend.anthropic import AnthropicBackend
from .backend.ollama import OllamaBackend
from .backend.openai import OpenAIBackend
from .lib import (
    SYSTEM_PROMPT,
    CodeGenerator,
    CodeOutput,
    build_prompt,
    error_comment,
)


class StubBackend(LLMBackend):
    """Backend returning canned content, or raising a given error."""

    def __init__(self, content: str = "void create_ui(void) {}", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    def generate(self, prompt, *, system_prompt=None, config=None):
        self.calls.append((prompt, system_prompt))
        if self.error is not None:
            raise self.error
        return GenerationResult(content=self.content, finish_reason="stop", usage={}, model="stub")

    @property
    def model_name(self) -> str:
        return "stub"

    @property
    def provider(self) -> str:
        return "test"


@pytest.fixture
def no_llm_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "GEMINI_API_KEY",
        "LLM_PROVIDER",
        "LLM_MODEL",
        "LLM_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(button, screen_with, project_with) -> Project:
    nav = WidgetEvent(id="e1", target_screen_id="screen_1")
    return project_with(screen_with(button("ok", events=(nav,)), button("cancel", x=140)))


def _openai_response(content: str) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        model="gpt-4.1-mini",
    )


# =============================================================================
# Providers and Factory
# =============================================================================


class TestProviders:
    """Tests for provider specs, settings and the backend factory."""

    @pytest.mark.unit
    def test_gemini_uses_openai_compatible_endpoint(self):
        spec = get_provider_spec("gemini")
        assert spec.openai_compatible
        assert "generativelanguage.googleapis.com" in spec.base_url
        assert spec.default_model == "gemini-2.5-flash"

    @pytest.mark.unit
    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider_spec("mystery")

    @pytest.mark.unit
    def test_settings_from_environment(self, monkeypatch, no_llm_env):
        monkeypatch.setenv("LLM_PROVIDER", "custom")
        monkeypatch.setenv("LLM_BASE_URL", "http://localhost:1234/v1")
        settings = AISettings.from_environment(model="llama3")
        assert settings.provider == LLMProviderType.CUSTOM
        assert settings.base_url == "http://localhost:1234/v1"
        assert settings.model == "llama3"

    @pytest.mark.unit
    def test_settings_default_to_gemini(self, no_llm_env):
        settings = AISettings.from_environment()
        assert settings.provider == LLMProviderType.GEMINI
        assert settings.resolved_model == "gemini-2.5-flash"

    @pytest.mark.unit
    def test_factory_routes_by_provider(self, no_llm_env):
        gemini = create_llm_backend(AISettings(provider="gemini", api_key="k"))
        assert isinstance(gemini, OpenAIBackend)
        assert gemini.name == "gemini:gemini-2.5-flash"

        claude = create_llm_backend(AISettings(provider="anthropic", api_key="k"))
        assert isinstance(claude, AnthropicBackend)

        local = create_llm_backend(AISettings(provider="ollama", model="qwen3"))
        assert isinstance(local, OllamaBackend)

    @pytest.mark.unit
    def test_custom_provider_needs_no_key(self, no_llm_env):
        backend = create_llm_backend(
            AISettings(provider="custom", model="llama3", base_url="http://localhost:1234/v1")
        )
        assert backend.name == "custom:llama3"

    @pytest.mark.unit
    def test_missing_key_raises(self, no_llm_env):
        with pytest.raises(AuthenticationError, match="GEMINI_API_KEY"):
            create_llm_backend(AISettings(provider="gemini"))
        with pytest.raises(AuthenticationError):
            AnthropicBackend()


# =============================================================================
# Backends
# =============================================================================


class TestBackends:
    """Tests for backend request shapes with mocked SDK clients."""

    @pytest.mark.unit
    def test_openai_request(self, no_llm_env):
        backend = OpenAIBackend(api_key="k")
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response("int x;")
        backend._client = client

        result = backend.generate("prompt", system_prompt="sys", config=GenerationConfig(stop_sequences=["END"]))

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert kwargs["stop"] == ["END"]
        assert "response_format" not in kwargs
        assert result.content == "int x;"
        assert result.usage["total_tokens"] == 15

    @pytest.mark.unit
    def test_openai_error_mapping(self, no_llm_env):
        backend = OpenAIBackend(api_key="k")
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("Rate limit reached")
        backend._client = client

        with pytest.raises(RateLimitError):
            backend.generate("prompt")

    @pytest.mark.unit
    def test_openai_empty_choices(self):
        backend = OpenAIBackend(api_key="k")
        client = MagicMock()
        client.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)
        backend._client = client

        with pytest.raises(InvalidResponseError):
            backend.generate("prompt")

    @pytest.mark.unit
    def test_error_mapping_defaults_to_llm_error(self):
        with pytest.raises(LLMError) as info:
            raise_for_provider_error(RuntimeError("500 internal"))
        assert type(info.value) is LLMError

    @pytest.mark.unit
    def test_anthropic_passes_system_separately(self, no_llm_env):
        backend = AnthropicBackend(api_key="k")
        client = MagicMock()
        client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="lv_obj_t *scr;")],
            stop_reason="end_turn",
            usage=SimpleNamespace(input_tokens=3, output_tokens=4),
            model="claude-sonnet-4-5",
        )
        backend._client = client

        result = backend.generate("prompt", system_prompt="sys")

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
        assert result.content == "lv_obj_t *scr;"
        assert result.usage["total_tokens"] == 7

    @pytest.mark.unit
    def test_ollama_connection_error(self):
        backend = OllamaBackend(base_url="http://localhost:11434")
        client = MagicMock()
        client.chat.side_effect = ConnectionError("Connection refused")
        backend._client = client

        with pytest.raises(LLMError, match="Cannot connect to Ollama"):
            backend.generate("prompt")


# =============================================================================
# Code Generator
# =============================================================================


class TestCodeGenerator:
    """Tests for prompt building and failure handling."""

    @pytest.mark.unit
    def test_prompt_carries_export(self, project):
        prompt = build_prompt(project, CodeLanguage.MICROPYTHON)
        assert "MicroPython" in prompt
        assert '"cancel"' in prompt
        assert "LV_SYMBOL_HOME" in prompt

    @pytest.mark.unit
    def test_generate_strips_fences(self, project):
        backend = StubBackend("```c\nvoid create_ui(void) {}\n```")
        code = CodeGenerator(backend=backend).generate(project, "c")
        assert code == "void create_ui(void) {}"
        assert backend.calls[0][1] == SYSTEM_PROMPT

    @pytest.mark.unit
    def test_failure_becomes_comment(self, project):
        generator = CodeGenerator(backend=StubBackend(error=LLMError("AI Request Failed: 401")))
        code = generator.generate(project, CodeLanguage.C)
        assert code == (
            "// Error generating code: AI Request Failed: 401\n"
            "// Please check your Settings (API Key/Provider)."
        )

    @pytest.mark.unit
    def test_micropython_error_uses_hash(self, project):
        outcome = CodeGenerator(backend=StubBackend(error=LLMError("boom"))).run(project, "micropython")
        assert not outcome.ok
        assert outcome.text.startswith("# Error generating code: boom")

    @pytest.mark.unit
    def test_missing_key_does_not_raise(self, project, no_llm_env):
        code = CodeGenerator(AISettings(provider="openai")).generate(project)
        assert code.startswith("// Error generating code: openai API key required")

    @pytest.mark.unit
    def test_empty_response(self, project):
        outcome = CodeGenerator(backend=StubBackend("  ")).run(project)
        assert outcome.error == "No response generated."

    @pytest.mark.unit
    def test_error_comment_is_single_line(self):
        assert error_comment("line one\nline two", "c").splitlines()[0] == (
            "// Error generating code: line one line two"
        )


# =============================================================================
# Code Output
# =============================================================================


class TestCodeOutput:
    """Tests for background requests where the last response to resolve wins."""

    @pytest.mark.unit
    def test_request_writes_text(self, project):
        updates = []
        with CodeOutput(CodeGenerator(backend=StubBackend("int ui;")), on_update=updates.append) as output:
            output.request(project).result(timeout=5)
        assert output.text == "int ui;"
        assert updates[0].ok
        assert not output.is_generating

    @pytest.mark.unit
    def test_last_to_resolve_wins(self, project):
        release_first = threading.Event()
        resolved = {"slow": threading.Event(), "fast": threading.Event()}

        def run(proj, language):
            if language == CodeLanguage.C:
                release_first.wait(timeout=5)
                return SimpleNamespace(text="slow", ok=True)
            return SimpleNamespace(text="fast", ok=True)

        generator = MagicMock()
        generator.run.side_effect = run

        with CodeOutput(generator, on_update=lambda o: resolved[o.text].set()) as output:
            output.request(project, CodeLanguage.C)
            output.request(project, CodeLanguage.MICROPYTHON)
            assert resolved["fast"].wait(timeout=5)
            assert output.text == "fast"
            assert not output.is_generating

            release_first.set()
            assert resolved["slow"].wait(timeout=5)

        assert output.text == "slow"

    @pytest.mark.unit
    def test_unexpected_exception_is_shown(self, project):
        generator = MagicMock()
        generator.run.side_effect = RuntimeError("worker died")
        with CodeOutput(generator) as output:
            future = output.request(project, "micropython")
            with pytest.raises(RuntimeError):
                future.result(timeout=5)
        assert output.text.startswith("# Error generating code: worker died")
        assert output.outcome.error == "worker died"

    @pytest.mark.unit
    def test_generator_built_lazily(self, project):
        with patch("studio.codegen.lib.create_llm_backend", return_value=StubBackend("x")) as factory:
            generator = CodeGenerator(AISettings(provider="ollama"))
            factory.assert_not_called()
            assert generator.generate(project) == "x"
            factory.assert_called_once()


# =============================================================================
# Live Provider
# =============================================================================


class TestLiveGeneration:
    """Generation against a configured provider; skipped when none is set up."""

    @pytest.mark.integration
    @pytest.mark.llm
    def test_generates_c_code(self, project, llm_provider):
        outcome = CodeGenerator(AISettings.from_environment(provider=llm_provider)).run(project, "c")
        assert outcome.ok, outcome.error
        assert "create_ui" in outcome.text
        assert not outcome.text.startswith("```")
