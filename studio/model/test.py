"""Unit tests for the document model."""

import pytest
from pydantic import ValidationError

from studio.model import (
    DEFAULT_STYLE_PRESETS,
    DEFAULT_WIDGET_PROPS,
    DEVICE_PRESETS,
    PROJECT_THEMES,
    SAMPLE_PROJECTS,
    ButtonProps,
    CanvasSettings,
    EventAction,
    Layer,
    Project,
    Screen,
    SliderProps,
    Widget,
    WidgetEvent,
    WidgetStyle,
    WidgetType,
    device_resolution,
    is_valid,
    make_widget,
    new_id,
    theme_style,
    validate_project,
)


def _button(widget_id: str, layer_id: str = "layer_1", **kwargs) -> Widget:
    return Widget(id=widget_id, layer_id=layer_id, props=ButtonProps(), **kwargs)


class TestEnums:
    """Tests for model enumerations."""

    @pytest.mark.unit
    def test_widget_type_values(self):
        """Core widget types map to toolkit constructor names."""
        assert WidgetType.BUTTON.value == "lv_btn"
        assert WidgetType.CONTAINER.value == "lv_obj"
        assert WidgetType.TEXT_AREA.value == "lv_textarea"
        assert WidgetType.ICON.value == "lv_icon"

    @pytest.mark.unit
    def test_display_name(self):
        """Display names are title-cased member names."""
        assert WidgetType.BUTTON.display_name == "Button"
        assert WidgetType.TEXT_AREA.display_name == "Text Area"

    @pytest.mark.unit
    def test_every_type_has_defaults(self):
        """Each widget type has a creation template."""
        assert set(DEFAULT_WIDGET_PROPS) == set(WidgetType)


class TestWidget:
    """Tests for the Widget model."""

    @pytest.mark.unit
    def test_type_derived_from_props(self):
        """The type tag comes from the props variant."""
        widget = Widget(id="w", layer_id="l", props=SliderProps())
        assert widget.type == WidgetType.SLIDER
        assert widget.props.value == 30

    @pytest.mark.unit
    def test_props_discriminated_from_dict(self):
        """Raw dicts validate into the right props variant."""
        widget = Widget.model_validate(
            {"id": "w", "layer_id": "l", "props": {"type": "lv_checkbox", "checked": True}}
        )
        assert widget.type == WidgetType.CHECKBOX
        assert widget.props.checked is True
        assert widget.props.text == "Checkbox"

    @pytest.mark.unit
    def test_frozen(self):
        """Widgets cannot be mutated in place."""
        widget = _button("w")
        with pytest.raises(ValidationError):
            widget.x = 5

    @pytest.mark.unit
    def test_with_changes_merges_style(self):
        """Style edits keep sibling style properties."""
        widget = _button("w", style=WidgetStyle(background_color="#000000", font_size=12))
        updated = widget.with_changes({"style": {"font_size": 20}})
        assert updated.style.font_size == 20
        assert updated.style.background_color == "#000000"

    @pytest.mark.unit
    def test_with_changes_routes_prop_fields(self):
        """Type-specific keys land in props."""
        widget = _button("w")
        updated = widget.with_changes({"text": "OK", "x": 40})
        assert updated.props.text == "OK"
        assert updated.x == 40
        assert widget.props.text == "Button"

    @pytest.mark.unit
    def test_with_changes_identity_when_unchanged(self):
        """No-op updates return the same instance."""
        widget = _button("w", x=10)
        assert widget.with_changes({"x": 10}) is widget
        assert widget.with_changes({"bogus": 1}) is widget

    @pytest.mark.unit
    def test_with_changes_clears_group(self):
        """Setting group_id to None ungroups."""
        widget = _button("w", group_id="g1")
        assert widget.with_changes({"group_id": None}).group_id is None

    @pytest.mark.unit
    def test_with_changes_replaces_props(self):
        """A props mapping is validated into its variant."""
        widget = _button("w")
        updated = widget.with_changes({"props": {"type": "lv_label", "text": "Hi"}})
        assert updated.type == WidgetType.LABEL
        assert updated.props.text == "Hi"

    @pytest.mark.unit
    def test_with_changes_props_without_type_keeps_type(self):
        widget = _button("w")
        updated = widget.with_changes({"props": {"text": "Hi"}})
        assert updated.type == WidgetType.BUTTON
        assert updated.props.text == "Hi"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "changes",
        [
            {"width": -5},
            {"height": 0},
            {"style": {"opacity": 7}},
            {"style": "red"},
            {"props": "lv_btn"},
            {"props": {"type": "lv_nope"}},
            {"events": [{"bogus": 1}]},
        ],
    )
    def test_with_changes_validates(self, changes):
        """Values breaking a field constraint raise instead of being stored."""
        with pytest.raises(ValidationError):
            _button("w").with_changes(changes)

    @pytest.mark.unit
    def test_with_changes_validates_events(self):
        """Raw event mappings become WidgetEvent records."""
        updated = _button("w").with_changes({"events": [{"id": "e1", "target_screen_id": "s2"}]})
        assert isinstance(updated.events[0], WidgetEvent)
        assert updated.events[0].action == EventAction.NAVIGATE

    @pytest.mark.unit
    def test_style_merge_validates(self):
        style = WidgetStyle(opacity=0.5)
        assert style.merged({"opacity": 1}).opacity == 1
        with pytest.raises(ValidationError):
            style.merged({"border_width": -1})


class TestScreenAndProject:
    """Tests for Screen and Project helpers."""

    @pytest.mark.unit
    def test_create_empty_project(self):
        """A new project has one screen with one layer and default presets."""
        project = Project.create()
        assert len(project.screens) == 1
        assert len(project.screens[0].layers) == 1
        assert project.screens[0].widgets == ()
        assert project.style_presets == DEFAULT_STYLE_PRESETS

    @pytest.mark.unit
    def test_screen_requires_a_layer(self):
        """Screens cannot be built without layers."""
        with pytest.raises(ValidationError):
            Screen(id="s", name="S", layers=())

    @pytest.mark.unit
    def test_lookups_tolerate_missing(self):
        """Missing ids resolve to None."""
        project = Project.create()
        screen = project.screens[0]
        assert project.screen("nope") is None
        assert screen.layer("nope") is None
        assert screen.widget("nope") is None

    @pytest.mark.unit
    def test_is_locked_with_dangling_layer(self):
        """Widgets on a missing layer count as unlocked."""
        screen = Project.create().screens[0]
        assert screen.is_locked(_button("w", layer_id="gone")) is False

    @pytest.mark.unit
    def test_widgets_on_layer_keeps_order(self):
        """Per-layer widget order follows the screen's widget order."""
        screen = Screen(
            id="s",
            name="S",
            layers=(Layer(id="a", name="A"), Layer(id="b", name="B")),
            widgets=(_button("1", "a"), _button("2", "b"), _button("3", "a")),
        )
        assert [w.id for w in screen.widgets_on("a")] == ["1", "3"]

    @pytest.mark.unit
    def test_with_screen_shares_other_screens(self):
        """Replacing one screen keeps the others by reference."""
        project = Project.create()
        other = Screen(id="screen_2", name="Two", layers=(Layer(id="l2", name="L"),))
        project = project.model_copy(update={"screens": project.screens + (other,)})
        renamed = project.screens[0].model_copy(update={"name": "Home"})
        updated = project.with_screen(renamed)
        assert updated.screens[0].name == "Home"
        assert updated.screens[1] is project.screens[1]
        assert project.with_screen(project.screens[0]) is project


class TestValidation:
    """Tests for validate_project."""

    @pytest.mark.unit
    def test_empty_project_is_valid(self):
        """The default project has no issues."""
        assert is_valid(Project.create())

    @pytest.mark.unit
    def test_reports_dangling_layer_and_singleton_group(self):
        """Broken references and lone groups are reported."""
        screen = Screen(
            id="s",
            name="S",
            layers=(Layer(id="l", name="L"),),
            widgets=(_button("a", layer_id="missing", group_id="g"),),
        )
        issues = validate_project(Project(screens=(screen,)))
        kinds = {i.issue_type for i in issues}
        assert kinds == {"dangling_layer", "singleton_group"}

    @pytest.mark.unit
    def test_reports_dangling_navigation(self):
        """NAVIGATE events to deleted screens are reported, not raised."""
        event = WidgetEvent(id="e", action=EventAction.NAVIGATE, target_screen_id="gone")
        screen = Screen(
            id="s",
            name="S",
            layers=(Layer(id="l", name="L"),),
            widgets=(_button("a", layer_id="l", events=(event,)),),
        )
        issues = validate_project(Project(screens=(screen,)))
        assert [i.issue_type for i in issues] == ["dangling_screen"]

    @pytest.mark.unit
    def test_reports_duplicates_and_layer_limit(self):
        """Duplicate ids and too many layers are flagged."""
        layers = tuple(Layer(id=f"l{i}", name=str(i)) for i in range(6))
        screen = Screen(
            id="s",
            name="S",
            layers=layers,
            widgets=(_button("a", layer_id="l0"), _button("a", layer_id="l0")),
        )
        kinds = [i.issue_type for i in validate_project(Project(screens=(screen,)))]
        assert "too_many_layers" in kinds
        assert "duplicate_id" in kinds


class TestPresets:
    """Tests for built-in defaults."""

    @pytest.mark.unit
    def test_make_widget_uses_defaults(self):
        """New widgets take their type's size, style and props."""
        widget = make_widget(WidgetType.BUTTON, widget_id="w", layer_id="l", x=20, y=30)
        assert (widget.width, widget.height) == (120, 40)
        assert widget.style.background_color == "#2196F3"
        assert widget.props.text == "Button"
        assert widget.name == "lv_btn"

    @pytest.mark.unit
    def test_theme_style_for_button(self):
        """Buttons take the primary colour and theme radius."""
        theme = PROJECT_THEMES["dark"]
        style = theme_style(WidgetType.BUTTON, theme)
        assert style["background_color"] == theme.colors.primary
        assert style["border_radius"] == theme.border_radius

    @pytest.mark.unit
    def test_theme_style_image_untouched(self):
        """Images are not themed."""
        assert theme_style(WidgetType.IMAGE, PROJECT_THEMES["dark"]) == {}

    @pytest.mark.unit
    def test_device_rotation_swaps_axes(self):
        """Portrait rotations swap width and height."""
        device = DEVICE_PRESETS["esp32_s3_box"]
        assert device_resolution(device, 0) == (320, 240)
        assert device_resolution(device, 90) == (240, 320)

    @pytest.mark.unit
    def test_new_id_prefix_and_uniqueness(self):
        """Generated ids carry the prefix and do not repeat."""
        ids = {new_id("widget") for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("widget_") for i in ids)

    @pytest.mark.unit
    def test_canvas_settings_rotation_restricted(self):
        """Only right-angle rotations are accepted."""
        with pytest.raises(ValidationError):
            CanvasSettings(rotation=45)


# =============================================================================
# Sample projects
# =============================================================================


class TestSamples:
    """Tests for the built-in sample projects."""

    @pytest.mark.unit
    @pytest.mark.parametrize("sample_id", sorted(SAMPLE_PROJECTS))
    def test_sample_is_valid(self, sample_id):
        sample = SAMPLE_PROJECTS[sample_id]
        assert sample.id == sample_id
        assert validate_project(sample.project) == []

    @pytest.mark.unit
    @pytest.mark.parametrize("sample_id", sorted(SAMPLE_PROJECTS))
    def test_sample_uses_known_presets(self, sample_id):
        settings = SAMPLE_PROJECTS[sample_id].project.settings
        assert settings.theme in PROJECT_THEMES
        assert settings.target_device is None or settings.target_device in DEVICE_PRESETS

    @pytest.mark.unit
    def test_settings_menu_navigates_between_screens(self):
        first, second = SAMPLE_PROJECTS["wifi_settings"].project.screens
        wifi = first.widget("w_cont_wifi")
        assert wifi.events[0].action == EventAction.NAVIGATE
        assert wifi.events[0].target_screen_id == second.id
        assert second.widget("w_btn_back").props.symbol == "LV_SYMBOL_PREV"
