"""Unit tests for project files, export payloads and widget parsing."""

import json
from datetime import UTC, datetime

import pytest

from studio.layers import toggle_layer_visible
from studio.model import (
    DEFAULT_STYLE_PRESETS,
    SAMPLE_PROJECTS,
    ImageProps,
    Project,
    Widget,
    WidgetEvent,
    WidgetType,
)

from .lib import (
    FORMAT_VERSION,
    CodeLanguage,
    ProjectFormatError,
    WidgetParseError,
    default_filename,
    dumps_project,
    export_payload,
    load_project,
    loads_project,
    parse_widget_description,
    save_project,
    strip_fences,
)


@pytest.fixture
def sample_project(button, screen_with, project_with):
    """Two screens; the first has a hidden layer and a navigation event."""
    nav = WidgetEvent(id="e1", target_screen_id="screen_2")
    lost = WidgetEvent(id="e2", target_screen_id="gone")
    image = Widget(
        id="img",
        layer_id="bottom",
        props=ImageProps(image_data="data:image/png;base64,AAAA"),
    )
    first = screen_with(
        button("top_btn", layer_id="top"),
        image,
        button("nav", layer_id="bottom", events=(nav, lost)),
        button("hidden_btn", layer_id="hidden"),
        layers=("bottom", "top", "hidden"),
    )
    first = toggle_layer_visible(first, "hidden")
    second = screen_with(screen_id="screen_2", name="Settings")
    return project_with(first, second)


class TestProjectFiles:
    """Tests for saving and loading project files."""

    @pytest.mark.unit
    def test_round_trip(self, sample_project):
        assert loads_project(dumps_project(sample_project)) == sample_project

    @pytest.mark.unit
    @pytest.mark.parametrize("sample_id", sorted(SAMPLE_PROJECTS))
    def test_builtin_samples_round_trip(self, sample_id):
        project = SAMPLE_PROJECTS[sample_id].project
        assert loads_project(dumps_project(project)) == project

    @pytest.mark.unit
    def test_file_keys(self, sample_project):
        data = json.loads(dumps_project(sample_project))
        assert set(data) == {"version", "timestamp", "settings", "screens", "style_presets"}
        assert data["version"] == FORMAT_VERSION

    @pytest.mark.unit
    def test_save_and_load(self, sample_project, tmp_path):
        path = save_project(sample_project, tmp_path / "nested" / "demo.json")
        assert path.exists()
        assert load_project(path) == sample_project

    @pytest.mark.unit
    def test_missing_presets_use_defaults(self):
        data = json.loads(dumps_project(Project.create()))
        del data["style_presets"]
        project = loads_project(json.dumps(data))
        assert project.style_presets == DEFAULT_STYLE_PRESETS

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '{"settings": {}}',
            '{"version": "2.0.0", "settings": {}, "screens": []}',
            '{"settings": {}, "screens": []}',
        ],
    )
    def test_malformed_files_raise(self, text):
        with pytest.raises(ProjectFormatError):
            loads_project(text)

    @pytest.mark.unit
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ProjectFormatError):
            load_project(tmp_path / "nope.json")

    @pytest.mark.unit
    def test_default_filename(self):
        when = datetime(2024, 5, 1, tzinfo=UTC)
        assert default_filename(Project.create(), when) == "My_Project_2024-05-01.json"


class TestExportPayload:
    """Tests for the code-generation payload."""

    @pytest.mark.unit
    def test_hidden_layers_excluded(self, sample_project):
        screen = export_payload(sample_project)["screens"][0]
        ids = [w["id"] for w in screen["widgets"]]
        assert "hidden_btn" not in ids
        assert screen["layers"] == ["bottom", "top"]

    @pytest.mark.unit
    def test_widgets_in_paint_order(self, sample_project):
        screen = export_payload(sample_project)["screens"][0]
        assert [w["id"] for w in screen["widgets"]] == ["img", "nav", "top_btn"]

    @pytest.mark.unit
    def test_image_data_stripped(self, sample_project):
        image = export_payload(sample_project)["screens"][0]["widgets"][0]
        assert image["type"] == "lv_img"
        assert "image_data" not in image["props"]

    @pytest.mark.unit
    def test_dangling_navigation_dropped(self, sample_project):
        nav = export_payload(sample_project)["screens"][0]["widgets"][1]
        assert [e["id"] for e in nav["events"]] == ["e1"]

    @pytest.mark.unit
    def test_document_untouched(self, sample_project):
        export_payload(sample_project)
        assert sample_project.screens[0].widget("img").props.image_data

    @pytest.mark.unit
    def test_device_metadata(self, sample_project):
        assert "device" not in export_payload(sample_project)
        project = sample_project.model_copy(
            update={"settings": sample_project.settings.model_copy(update={"target_device": "pc_sim"})}
        )
        payload = export_payload(project, CodeLanguage.MICROPYTHON)
        assert payload["language"] == "micropython"
        assert payload["device"]["name"] == "PC Simulator (SDL)"


class TestWidgetParsing:
    """Tests for AI-produced widget descriptions."""

    @pytest.mark.unit
    def test_fenced_json(self):
        text = '```json\n{"type": "lv_btn", "x": 10, "y": 20, "text": "OK"}\n```'
        widget = parse_widget_description(text, layer_id="layer_1", widget_id="w1")
        assert widget.type == WidgetType.BUTTON
        assert (widget.x, widget.y) == (10, 20)
        assert widget.props.text == "OK"
        assert widget.layer_id == "layer_1"

    @pytest.mark.unit
    def test_dict_with_props(self):
        widget = parse_widget_description(
            {"type": "lv_slider", "props": {"value": 70}, "style": {"background_color": "#000"}},
            layer_id="layer_1",
        )
        assert widget.props.value == 70
        assert widget.style.background_color == "#000"
        assert widget.id.startswith("widget_")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "description",
        [
            "{broken",
            "[1, 2]",
            '{"type": "lv_spaceship"}',
            '{"type": "lv_btn", "width": -4}',
            '{"props": "lv_btn"}',
            '{"type": "lv_btn", "props": ["x"]}',
        ],
    )
    def test_malformed_descriptions_raise(self, description):
        with pytest.raises(WidgetParseError):
            parse_widget_description(description, layer_id="layer_1")

    @pytest.mark.unit
    def test_strip_fences(self):
        assert strip_fences("```c\nint x;\n```") == "int x;"
        assert strip_fences("plain") == "plain"
