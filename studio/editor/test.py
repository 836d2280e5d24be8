"""Unit tests for the mutation façade and the Editor state container."""

import pytest

from studio.model import (
    DEFAULT_STYLE_PRESETS,
    PROJECT_THEMES,
    SAMPLE_PROJECTS,
    EventAction,
    Project,
    StylePreset,
    WidgetEvent,
    WidgetStyle,
    WidgetType,
    validate_project,
)
from studio.layers import render_order
from studio.serialize import dumps_project, loads_project

from . import lib
from .state import Editor


@pytest.fixture
def editor() -> Editor:
    """Editor on an empty project with explicit limits."""
    return Editor(history_limit=0, max_layers=5, grid=10)


@pytest.fixture
def grouped_project(button, screen_with, project_with):
    """Screen with A and B grouped as g1 and an ungrouped C."""
    return project_with(
        screen_with(
            button("A", group_id="g1"),
            button("B", group_id="g1"),
            button("C"),
        )
    )


# =============================================================================
# Façade: widgets
# =============================================================================


class TestWidgetMutations:
    """Tests for pure widget edits."""

    @pytest.mark.unit
    def test_add_widget_uses_type_defaults(self):
        project = lib.add_widget(Project.create(), "screen_1", "layer_1", WidgetType.SLIDER, "w1")
        widget = project.screens[0].widget("w1")
        assert (widget.x, widget.y) == (20, 20)
        assert (widget.width, widget.height) == (200, 20)
        assert widget.props.value == 30
        assert widget.name == "lv_slider_1"

    @pytest.mark.unit
    def test_add_widget_offsets_when_not_empty(self):
        project = lib.add_widget(Project.create(), "screen_1", "layer_1", "lv_btn", "w1")
        project = lib.add_widget(project, "screen_1", "layer_1", "lv_btn", "w2")
        widget = project.screens[0].widget("w2")
        assert (widget.x, widget.y) == (30, 30)
        assert widget.name == "lv_btn_2"

    @pytest.mark.unit
    def test_add_widget_explicit_position(self):
        project = lib.add_widget(Project.create(), "screen_1", "layer_1", "lv_btn", "w1", 70, 5)
        assert (project.screens[0].widgets[0].x, project.screens[0].widgets[0].y) == (70, 5)

    @pytest.mark.unit
    def test_add_widget_unknown_layer_rejected(self):
        project = Project.create()
        assert lib.add_widget(project, "screen_1", "nope", "lv_btn", "w1") is project

    @pytest.mark.unit
    def test_update_merges_style(self, grouped_project):
        """Editing one style field keeps the others."""
        project = lib.update_widgets(
            grouped_project, "screen_1", [("A", {"style": {"background_color": "#111111"}})]
        )
        project = lib.update_widgets(
            project, "screen_1", [("A", {"style": {"text_color": "#222222"}})]
        )
        style = project.screens[0].widget("A").style
        assert style.background_color == "#111111"
        assert style.text_color == "#222222"

    @pytest.mark.unit
    def test_update_props_field(self, grouped_project):
        project = lib.update_widgets(grouped_project, "screen_1", [("C", {"text": "OK"})])
        assert project.screens[0].widget("C").props.text == "OK"

    @pytest.mark.unit
    def test_update_without_change_is_identity(self, grouped_project):
        assert lib.update_widgets(grouped_project, "screen_1", [("C", {"x": 0})]) is grouped_project
        assert lib.update_widgets(grouped_project, "screen_1", [("ghost", {"x": 5})]) is grouped_project

    @pytest.mark.unit
    def test_update_rejects_invalid_values(self, grouped_project):
        """Out-of-range values leave the project untouched."""
        for changes in (
            {"width": -5, "style": {"opacity": 7}},
            {"props": "lv_btn"},
            {"events": [{"trigger": "CLICKED"}]},
        ):
            project = lib.update_widgets(grouped_project, "screen_1", [("C", changes)])
            assert project is grouped_project

    @pytest.mark.unit
    def test_update_rejected_as_a_whole(self, grouped_project):
        """One invalid widget rejects the edit for every widget in it."""
        updates = [("A", {"x": 50}), ("B", {"height": 0})]
        assert lib.update_widgets(grouped_project, "screen_1", updates) is grouped_project

    @pytest.mark.unit
    def test_update_rejects_unknown_layer(self, grouped_project):
        """A widget cannot be moved onto a layer its screen does not have."""
        updates = [("A", {"x": 50}), ("C", {"layer_id": "nope"})]
        assert lib.update_widgets(grouped_project, "screen_1", updates) is grouped_project

    @pytest.mark.unit
    def test_update_props_mapping_keeps_type(self, grouped_project):
        updates = [("C", {"props": {"text": "Hi"}})]
        project = lib.update_widgets(grouped_project, "screen_1", updates)
        widget = project.screens[0].widget("C")
        assert widget.type == WidgetType.BUTTON
        assert widget.props.text == "Hi"

    @pytest.mark.unit
    def test_delete_dissolves_group(self, grouped_project):
        """Deleting one member of a pair clears the survivor's group."""
        project = lib.delete_widgets(grouped_project, "screen_1", ["A"])
        screen = project.screens[0]
        assert screen.widget("A") is None
        assert screen.widget("B").group_id is None

    @pytest.mark.unit
    def test_group_needs_two(self, grouped_project):
        assert lib.group_widgets(grouped_project, "screen_1", ["C"], "g2") is grouped_project

    @pytest.mark.unit
    def test_unknown_screen_is_identity(self, grouped_project):
        assert lib.delete_widgets(grouped_project, "nope", ["A"]) is grouped_project


# =============================================================================
# Façade: screens, events, styles, settings
# =============================================================================


class TestScreenMutations:
    """Tests for screen edits."""

    @pytest.mark.unit
    def test_add_screen(self):
        project = lib.add_screen(Project.create(), "s2", "l2")
        screen = project.screen("s2")
        assert screen.name == "Screen 2"
        assert screen.layers[0].name == "Base Layer"
        assert screen.background_color == project.settings.default_background_color

    @pytest.mark.unit
    def test_update_screen_rejects_invalid_value(self):
        project = Project.create()
        assert lib.update_screen(project, "screen_1", name=None) is project

    @pytest.mark.unit
    def test_only_screen_cannot_be_deleted(self):
        project = Project.create()
        assert lib.delete_screen(project, "screen_1") is project

    @pytest.mark.unit
    def test_update_screen(self):
        project = lib.update_screen(Project.create(), "screen_1", name="Home", bogus=1)
        assert project.screens[0].name == "Home"


class TestEventMutations:
    """Tests for event bindings."""

    @pytest.mark.unit
    def test_add_and_remove_event(self, grouped_project):
        event = WidgetEvent(id="e1", action=EventAction.NAVIGATE, target_screen_id="screen_1")
        project = lib.add_event(grouped_project, "screen_1", "C", event)
        assert project.screens[0].widget("C").events == (event,)

        project = lib.remove_event(project, "screen_1", "C", "e1")
        assert project.screens[0].widget("C").events == ()

    @pytest.mark.unit
    def test_remove_unknown_event_is_identity(self, grouped_project):
        assert lib.remove_event(grouped_project, "screen_1", "C", "e9") is grouped_project


class TestStyleMutations:
    """Tests for presets, themes and settings."""

    @pytest.mark.unit
    def test_apply_preset_keeps_unset_fields(self, grouped_project):
        project = lib.update_widgets(grouped_project, "screen_1", [("C", {"style": {"font_size": 20}})])
        project = lib.apply_style_preset(project, "screen_1", ["C"], "p4")
        style = project.screens[0].widget("C").style
        assert style.background_color == "#ef4444"
        assert style.font_size == 20

    @pytest.mark.unit
    def test_unknown_preset_rejected(self, grouped_project):
        assert lib.apply_style_preset(grouped_project, "screen_1", ["C"], "nope") is grouped_project

    @pytest.mark.unit
    def test_save_and_delete_preset(self):
        preset = StylePreset(id="mine", name="Mine", style=WidgetStyle(font_size=30))
        project = lib.save_style_preset(Project.create(), preset)
        assert project.preset("mine") == preset
        assert len(project.style_presets) == len(DEFAULT_STYLE_PRESETS) + 1

        project = lib.delete_style_preset(project, "mine")
        assert project.preset("mine") is None

    @pytest.mark.unit
    def test_apply_theme(self, grouped_project):
        project = lib.apply_theme(grouped_project, "dark")
        dark = PROJECT_THEMES["dark"]
        assert project.settings.theme == "dark"
        assert project.settings.default_background_color == dark.colors.background
        assert project.screens[0].background_color == dark.colors.background
        button_style = project.screens[0].widget("A").style
        assert button_style.background_color == dark.colors.primary
        assert button_style.text_color == dark.colors.text_invert

    @pytest.mark.unit
    def test_reapplying_theme_is_identity(self, grouped_project):
        """A theme already in place changes nothing."""
        project = lib.apply_theme(grouped_project, "dark")
        assert lib.apply_theme(project, "dark") is project

    @pytest.mark.unit
    def test_unknown_theme_rejected(self, grouped_project):
        assert lib.apply_theme(grouped_project, "neon") is grouped_project

    @pytest.mark.unit
    def test_invalid_settings_rejected(self):
        project = Project.create()
        assert lib.update_settings(project, width=-5) is project
        assert lib.update_settings(project, width=800).settings.width == 800

    @pytest.mark.unit
    def test_target_device_rotation_swaps_axes(self):
        project = lib.set_target_device(Project.create(), "rpi_7inch", rotation=90)
        settings = project.settings
        assert settings.target_device == "rpi_7inch"
        assert (settings.width, settings.height) == (480, 800)

    @pytest.mark.unit
    def test_unknown_device_rejected(self):
        project = Project.create()
        assert lib.set_target_device(project, "toaster") is project


# =============================================================================
# Editor
# =============================================================================


class TestEditorWidgets:
    """Tests for labeled widget edits through the Editor."""

    @pytest.mark.unit
    def test_add_selects_and_labels(self, editor):
        widget_id = editor.add_widget(WidgetType.TEXT_AREA)
        assert editor.selection == (widget_id,)
        assert editor.history.labels() == ["Add Text Area"]

    @pytest.mark.unit
    def test_rejected_edit_records_nothing(self, editor):
        editor.add_widget("lv_btn")
        assert editor.group_selected() is False
        assert editor.history.labels() == ["Add Button"]

    @pytest.mark.unit
    def test_invalid_update_records_nothing(self, editor):
        """A rejected update keeps the project savable and out of history."""
        widget_id = editor.add_widget("lv_btn")
        before = editor.project
        assert editor.update_widget(widget_id, {"width": -5, "style": {"opacity": 7}}) is False
        assert editor.project is before
        assert editor.history.labels() == ["Add Button"]
        assert loads_project(dumps_project(editor.project)) == editor.project

    @pytest.mark.unit
    def test_move_to_unknown_layer_records_nothing(self, editor):
        """The widget stays painted and the project stays valid."""
        widget_id = editor.add_widget("lv_btn")
        before = editor.project
        assert editor.update_widget(widget_id, {"layer_id": "nope"}) is False
        assert editor.project is before
        assert editor.history.labels() == ["Add Button"]
        assert [w.id for w in render_order(editor.screen)] == [widget_id]
        assert validate_project(editor.project) == []

    @pytest.mark.unit
    def test_move_to_other_layer(self, editor):
        widget_id = editor.add_widget("lv_btn")
        layer_id = editor.add_layer()
        assert editor.update_widget(widget_id, {"layer_id": layer_id})
        assert editor.screen.widget(widget_id).layer_id == layer_id

    @pytest.mark.unit
    def test_reapplying_theme_records_nothing(self, editor):
        editor.add_widget("lv_btn")
        assert editor.apply_theme("dark")
        assert editor.apply_theme("dark") is False
        assert editor.history.labels() == ["Add Button", "Apply Theme"]

    @pytest.mark.unit
    def test_delete_clears_selection(self, editor):
        first = editor.add_widget("lv_btn")
        second = editor.add_widget("lv_btn")
        editor.select([first, second])
        assert editor.delete_selected()
        assert editor.selection == ()
        assert editor.history.labels()[-1] == "Delete Widgets"

    @pytest.mark.unit
    def test_update_labels(self, editor):
        first = editor.add_widget("lv_btn")
        second = editor.add_widget("lv_btn")
        editor.update_widget(first, {"text": "Go"})
        editor.update_widgets([(first, {"x": 0}), (second, {"x": 0})])
        assert editor.history.labels()[-2:] == ["Update Widget", "Update Widgets"]

    @pytest.mark.unit
    def test_arrange_label(self, editor):
        first = editor.add_widget("lv_btn")
        editor.add_widget("lv_btn")
        editor.select([first])
        assert editor.arrange("front")
        assert editor.history.labels()[-1] == "Bring to Front"
        assert editor.screen.widgets[-1].id == first

    @pytest.mark.unit
    def test_nudge(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.nudge(1, 0)
        editor.nudge(0, 1, large=True)
        widget = editor.screen.widget(widget_id)
        assert (widget.x, widget.y) == (21, 30)
        assert editor.history.labels()[-2:] == ["Nudge", "Nudge"]


class TestEditorLayers:
    """Tests for layer handling in the Editor."""

    @pytest.mark.unit
    def test_add_layer_becomes_active(self, editor):
        layer_id = editor.add_layer()
        assert editor.active_layer_id == layer_id
        widget_id = editor.add_widget("lv_label")
        assert editor.screen.widget(widget_id).layer_id == layer_id

    @pytest.mark.unit
    def test_layer_limit(self, editor):
        for _ in range(4):
            assert editor.add_layer() is not None
        assert editor.add_layer() is None
        assert len(editor.screen.layers) == 5

    @pytest.mark.unit
    def test_delete_active_layer(self, editor):
        layer_id = editor.add_layer()
        widget_id = editor.add_widget("lv_btn")
        assert editor.delete_layer(layer_id)
        assert editor.active_layer_id == "layer_1"
        assert editor.screen.widget(widget_id) is None
        assert editor.selection == ()

    @pytest.mark.unit
    def test_delete_layer_dissolves_split_group(self, editor):
        """A group spanning two layers is dissolved when one layer goes."""
        first = editor.add_widget("lv_btn")
        layer_id = editor.add_layer()
        second = editor.add_widget("lv_btn")
        editor.select([first, second])
        assert editor.group_selected()
        assert editor.delete_layer(layer_id)
        assert editor.screen.widget(second) is None
        assert editor.screen.widget(first).group_id is None
        assert validate_project(editor.project) == []

    @pytest.mark.unit
    def test_last_layer_cannot_be_deleted(self, editor):
        assert editor.delete_layer("layer_1") is False

    @pytest.mark.unit
    def test_hiding_and_locking_deselect(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.toggle_layer_visible("layer_1")
        assert editor.selection == ()

        editor.toggle_layer_visible("layer_1")
        editor.select([widget_id])
        editor.toggle_layer_lock("layer_1")
        assert editor.selection == ()
        assert editor.history.labels()[-1] == "Toggle Layer Lock"

    @pytest.mark.unit
    def test_locked_widgets_not_nudged(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.toggle_layer_lock("layer_1")
        editor.selection = (widget_id,)
        assert editor.nudge(1, 1) is False


class TestEditorScreens:
    """Tests for screen handling in the Editor."""

    @pytest.mark.unit
    def test_load_sample(self, editor):
        """A sample replaces the project and starts a fresh history."""
        editor.add_widget("lv_btn")
        assert editor.load_sample("wifi_settings")
        assert editor.project is SAMPLE_PROJECTS["wifi_settings"].project
        assert editor.current_screen_id == "scr_set_1"
        assert editor.active_layer_id == "l_set_1"
        assert editor.history.labels() == []
        assert editor.selection == ()

    @pytest.mark.unit
    def test_unknown_sample_keeps_project(self, editor):
        before = editor.project
        assert editor.load_sample("toaster") is False
        assert editor.project is before

    @pytest.mark.unit
    def test_add_screen_switches(self, editor):
        editor.add_widget("lv_btn")
        screen_id = editor.add_screen()
        assert editor.current_screen_id == screen_id
        assert editor.selection == ()
        assert editor.active_layer_id == editor.screen.layers[0].id

    @pytest.mark.unit
    def test_delete_current_screen_switches_to_first(self, editor):
        screen_id = editor.add_screen()
        assert editor.delete_screen(screen_id)
        assert editor.current_screen_id == "screen_1"

    @pytest.mark.unit
    def test_undo_repairs_current_screen(self, editor):
        editor.add_screen()
        editor.undo()
        assert editor.current_screen_id == "screen_1"
        assert editor.screen.layer(editor.active_layer_id) is not None


class TestEditorGestures:
    """Tests for drags, resizes and drops through the Editor."""

    @pytest.mark.unit
    def test_drag_is_one_history_step(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.pointer_down(widget_id, 0, 0)
        editor.pointer_move(12, 0)
        editor.pointer_move(25, 33)
        assert editor.history.labels() == ["Add Button"]
        assert editor.pointer_up()
        assert editor.history.labels() == ["Add Button", "Move Widget"]
        widget = editor.screen.widget(widget_id)
        assert (widget.x, widget.y) == (50, 50)

    @pytest.mark.unit
    def test_group_drags_together(self, editor):
        first = editor.add_widget("lv_btn")
        second = editor.add_widget("lv_btn")
        editor.select([first, second])
        editor.group_selected()
        editor.click(None)

        editor.pointer_down(first, 0, 0)
        assert set(editor.selection) == {first, second}
        editor.pointer_move(40, 0)
        editor.pointer_up()
        assert editor.screen.widget(first).x == 60
        assert editor.screen.widget(second).x == 70

    @pytest.mark.unit
    def test_click_without_move_records_nothing(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.pointer_down(widget_id, 0, 0)
        assert editor.pointer_up() is False
        assert editor.history.labels() == ["Add Button"]

    @pytest.mark.unit
    def test_drag_back_to_start_records_nothing(self, editor):
        widget_id = editor.add_widget("lv_btn")
        before = editor.project
        editor.pointer_down(widget_id, 0, 0)
        assert editor.pointer_move(40, 30)
        assert editor.pointer_move(0, 0)
        assert editor.pointer_up() is False
        assert editor.history.labels() == ["Add Button"]
        assert editor.project is before
        assert not editor.drag.is_active

    @pytest.mark.unit
    def test_resize_label(self, editor):
        widget_id = editor.add_widget("lv_btn")
        assert editor.resize_down(widget_id, "se", 0, 0)
        editor.pointer_move(30, 10)
        editor.pointer_up()
        widget = editor.screen.widget(widget_id)
        assert (widget.width, widget.height) == (150, 50)
        assert editor.history.labels()[-1] == "Resize Widget"

    @pytest.mark.unit
    def test_drop_snaps(self, editor):
        editor.zoom = 2.0
        widget_id = editor.drop("lv_switch", (146, 88), (100, 50))
        widget = editor.screen.widget(widget_id)
        assert (widget.x, widget.y) == (20, 20)
        assert editor.history.labels() == ["Add Switch"]

    @pytest.mark.unit
    def test_undo_during_drag_discards_live_moves(self, editor):
        widget_id = editor.add_widget("lv_btn")
        editor.pointer_down(widget_id, 0, 0)
        editor.pointer_move(100, 100)
        editor.undo()
        assert editor.screen.widgets == ()
        assert not editor.drag.is_active


class TestEndToEnd:
    """The full add, move, add, group, undo, undo scenario."""

    @pytest.mark.unit
    def test_scenario(self, editor):
        w1 = editor.add_widget("lv_btn")
        editor.pointer_down(w1, 0, 0)
        editor.pointer_move(25, 33)
        editor.pointer_up()
        w2 = editor.add_widget("lv_btn")
        editor.select([w1, w2])
        assert editor.group_selected()
        assert editor.history.labels() == ["Add Button", "Move Widget", "Add Button", "Group"]

        editor.undo()
        editor.undo()

        screen = editor.screen
        assert [w.id for w in screen.widgets] == [w1]
        assert screen.widget(w1).group_id is None
        assert (screen.widget(w1).x, screen.widget(w1).y) == (50, 50)
        assert editor.selection == (w1,)
        # Soonest redo first: re-adding W2, then grouping
        assert [item.label for item in editor.history.future] == ["Add Button", "Group"]

        editor.redo()
        editor.redo()
        assert editor.screen.widget(w2).group_id == editor.screen.widget(w1).group_id
