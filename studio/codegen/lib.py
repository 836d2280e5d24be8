"""LVGL code generation service.

Turns a project snapshot into target-language source through an LLM
backend. Service failures never propagate: they come back as a commented
error in place of code, so the user can fix their settings and retry.
"""

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from studio.model import Project
from studio.serialize import CodeLanguage, export_payload, strip_fences

from .backend import AISettings, GenerationConfig, LLMBackend, LLMError, create_llm_backend

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert LVGL code generator. Output only code."

SETTINGS_HINT = "Please check your Settings (API Key/Provider)."


def build_prompt(project: Project, language: CodeLanguage | str) -> str:
    """User prompt describing the project export and the output contract."""
    language = CodeLanguage(language)
    payload = export_payload(project, language)
    device = payload.get("device")
    device_line = (
        f"Target device: {device['manufacturer']} {device['name']} "
        f"({device['width']}x{device['height']}, rotation {device['rotation']})\n"
        if device
        else ""
    )

    return (
        "You are an embedded GUI expert specializing in LVGL "
        "(Light and Versatile Graphics Library).\n\n"
        f"Task: Generate production-ready {language.display_name} code "
        "for the following UI design.\n\n"
        f"{device_line}"
        f"Canvas Settings:\n{json.dumps(payload['settings'], indent=2)}\n\n"
        f"Screens with widgets in paint order (JSON format):\n"
        f"{json.dumps(payload['screens'], indent=2)}\n\n"
        "Requirements:\n"
        "1. If C: Include 'lvgl/lvgl.h', create a function 'void create_ui(void)', "
        "and declare global styles where needed so it is easy to integrate.\n"
        "2. If MicroPython: Import 'lvgl as lv', assume 'lv.init()' was called, "
        "and create a class or setup function.\n"
        "3. Style: Reflect the positions (x, y), sizes (width, height) and styles "
        "(colors, radius, borders, opacity, font size) in the JSON.\n"
        "4. Events: Add event handler skeletons for every listed event; "
        "navigate actions load the target screen.\n"
        "5. Widget type 'lv_icon' is an LVGL label showing a symbol. "
        "Set its text to the 'symbol' property (e.g., LV_SYMBOL_HOME). "
        "A button with a 'symbol' property shows that symbol instead of its text.\n"
        "6. Output ONLY the code, no markdown backticks, "
        "no explanatory text outside comments."
    )


def error_comment(message: str, language: CodeLanguage | str) -> str:
    """Commented error text that stands in for generated code."""
    prefix = CodeLanguage(language).comment_prefix
    first_line = " ".join(str(message).split())
    return f"{prefix} Error generating code: {first_line}\n{prefix} {SETTINGS_HINT}"


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation request.

    Attributes:
        text: Generated code, or the commented error on failure.
        error: Failure message, None on success.
        language: Target language of the request.
    """

    text: str
    language: CodeLanguage
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CodeGenerator:
    """Generates LVGL code for a project.

    Example:
        >>> generator = CodeGenerator(AISettings(provider="gemini", api_key="..."))
        >>> code = generator.generate(project, CodeLanguage.C)

    Args:
        settings: Provider selection. Defaults to the environment.
        backend: Pre-built backend, mainly for tests. Overrides ``settings``.
        config: Generation parameters.
    """

    def __init__(
        self,
        settings: AISettings | None = None,
        *,
        backend: LLMBackend | None = None,
        config: GenerationConfig | None = None,
    ):
        self.settings = settings
        self.config = config or GenerationConfig(temperature=0.2, json_mode=False)
        self._backend = backend

    def _get_backend(self) -> LLMBackend:
        if self._backend is None:
            self._backend = create_llm_backend(self.settings)
        return self._backend

    def run(self, project: Project, language: CodeLanguage | str = CodeLanguage.C) -> GenerationOutcome:
        """Generate code, reporting failures in the outcome instead of raising."""
        language = CodeLanguage(language)
        try:
            prompt = build_prompt(project, language)
            backend = self._get_backend()
            logger.info(f"Generating {language.display_name} code with {backend.name}")
            result = backend.generate(prompt, system_prompt=SYSTEM_PROMPT, config=self.config)
        except (LLMError, ImportError, ValueError) as e:
            logger.error(f"Error generating code: {e}")
            return GenerationOutcome(text=error_comment(str(e), language), language=language, error=str(e))

        code = strip_fences(result.content)
        if not code:
            message = "No response generated."
            logger.warning(f"Empty response from {result.model}")
            return GenerationOutcome(text=error_comment(message, language), language=language, error=message)

        logger.debug(f"Generated {len(code)} characters, usage={result.usage}")
        return GenerationOutcome(text=code, language=language)

    def generate(self, project: Project, language: CodeLanguage | str = CodeLanguage.C) -> str:
        """Generated source text, or a commented error message."""
        return self.run(project, language).text


class CodeOutput:
    """Display buffer fed by background generation requests.

    Each ``request`` starts a new job without cancelling earlier ones. The
    ``is_generating`` flag follows the most recent request only, while
    whichever response resolves last writes ``text``.

    Args:
        generator: Service used for every request.
        on_update: Called with each outcome after it is written.
        max_workers: Thread pool size.
    """

    def __init__(
        self,
        generator: CodeGenerator,
        *,
        on_update: Callable[[GenerationOutcome], None] | None = None,
        max_workers: int = 2,
    ):
        self.generator = generator
        self.on_update = on_update
        self.text = ""
        self.language = CodeLanguage.C
        self.outcome: GenerationOutcome | None = None
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="codegen")
        self._lock = threading.Lock()
        self._latest = 0
        self._pending: set[int] = set()

    @property
    def is_generating(self) -> bool:
        with self._lock:
            return self._latest in self._pending

    def request(self, project: Project, language: CodeLanguage | str = CodeLanguage.C) -> Future:
        """Start generation for a snapshot of ``project``.

        Returns:
            Future resolving to the GenerationOutcome.
        """
        language = CodeLanguage(language)
        with self._lock:
            self._latest += 1
            request_id = self._latest
            self._pending.add(request_id)
            self.language = language

        future = self._executor.submit(self.generator.run, project, language)
        future.add_done_callback(lambda f: self._resolve(request_id, language, f))
        return future

    def _resolve(self, request_id: int, language: CodeLanguage, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            outcome = GenerationOutcome(
                text=error_comment(str(exc), language), language=language, error=str(exc)
            )
            logger.error(f"Generation request {request_id} failed: {exc}")
        else:
            outcome = future.result()

        with self._lock:
            self._pending.discard(request_id)
            self.text = outcome.text
            self.outcome = outcome
            if request_id != self._latest:
                logger.debug(f"Superseded request {request_id} resolved after {self._latest}")

        if self.on_update is not None:
            self.on_update(outcome)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "CodeOutput":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


__all__ = [
    "SYSTEM_PROMPT",
    "SETTINGS_HINT",
    "build_prompt",
    "error_comment",
    "GenerationOutcome",
    "CodeGenerator",
    "CodeOutput",
]
