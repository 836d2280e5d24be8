"""End-to-end workflow: edit, save, reload, generate and package."""

import io
import json
import zipfile

import pytest

from studio.codegen import CodeGenerator, GenerationResult, LLMBackend, LLMError
from studio.editor import Editor
from studio.packaging import build_project_archive, fallback_manifest, find_board
from studio.serialize import CodeLanguage, export_payload, load_project, save_project


class EchoBackend(LLMBackend):
    """Returns a fenced stub function, or raises ``error`` when given."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt, *, system_prompt=None, config=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return GenerationResult(
            content="```c\nvoid create_ui(void) {}\n```",
            finish_reason="stop",
            usage={},
            model="echo",
        )

    @property
    def model_name(self) -> str:
        return "echo"

    @property
    def provider(self) -> str:
        return "test"


@pytest.fixture
def designed_project():
    """Two screens, a hidden overlay layer and a navigation button."""
    editor = Editor(history_limit=0, max_layers=5, grid=10)
    home = editor.current_screen_id
    start = editor.add_widget("lv_btn", 20, 20)
    settings_screen = editor.add_screen("Settings")
    editor.add_widget("lv_label", 40, 40)
    editor.switch_screen(home)
    overlay = editor.add_layer("Overlay")
    editor.add_widget("lv_switch", 100, 100)
    editor.toggle_layer_visible(overlay)
    editor.add_event(start, target_screen_id=settings_screen)
    editor.set_target_device("esp32_s3_box")
    return editor.project, start, settings_screen


@pytest.mark.integration
def test_design_to_archive(tmp_path, designed_project):
    project, start, settings_screen = designed_project

    path = save_project(project, tmp_path / "design.json")
    loaded = load_project(path)
    assert loaded == project

    payload = export_payload(loaded, CodeLanguage.C)
    home = payload["screens"][0]
    assert [w["type"] for w in home["widgets"]] == ["lv_btn"]
    assert home["widgets"][0]["events"][0]["target_screen_id"] == settings_screen

    backend = EchoBackend()
    code = CodeGenerator(backend=backend).generate(loaded, CodeLanguage.C)
    assert code == "void create_ui(void) {}"
    assert "lv_switch" not in backend.prompts[0]

    board = find_board(fallback_manifest(), "ESP32-S3-BOX")
    archive = zipfile.ZipFile(io.BytesIO(build_project_archive(board, {"ui.c": code})))
    assert archive.read("ui/ui.c").decode() == code
    assert json.loads(archive.read("project.json"))["files"] == ["ui/ui.c"]


@pytest.mark.integration
def test_failed_generation_leaves_document_alone(designed_project):
    project, _, _ = designed_project
    editor = Editor(project, history_limit=0)
    editor.add_widget("lv_slider")
    before, labels = editor.project, editor.history.labels()

    generator = CodeGenerator(backend=EchoBackend(error=LLMError("offline")))
    code = generator.generate(editor.project, CodeLanguage.MICROPYTHON)

    assert code.startswith("# Error generating code: offline")
    assert editor.project is before
    assert editor.history.labels() == labels
    assert editor.undo()
