"""Document model for lvgl-studio.

The document model is the **Source of Truth** for a design: a Project owns
Screens, each Screen owns an ordered tuple of Layers and the Widgets drawn on
it, and Style Presets live beside the screens.

Every model is an immutable pydantic model. Edits produce new versions with
``model_copy(update=...)``, or ``revised`` when new field values need
validating, so untouched sub-trees are shared between versions and reference
identity means "unchanged". Widgets point at their layer by id,
never by ownership, so layer reordering never rewrites widget records.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Mapping, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

# Maximum number of layers a screen may hold
MAX_LAYERS = 5


def new_id(prefix: str) -> str:
    """Create a fresh identifier such as ``widget_3f9a1c2e``."""
    return f"{prefix}_{uuid4().hex[:8]}"


# =============================================================================
# Enumerations
# =============================================================================


class WidgetType(str, Enum):
    """Closed set of widget types, named after the toolkit constructors."""

    BUTTON = "lv_btn"
    LABEL = "lv_label"
    SLIDER = "lv_slider"
    SWITCH = "lv_switch"
    CHECKBOX = "lv_checkbox"
    ARC = "lv_arc"
    CONTAINER = "lv_obj"
    TEXT_AREA = "lv_textarea"
    CHART = "lv_chart"
    IMAGE = "lv_img"
    ICON = "lv_icon"  # Rendered as a label showing a symbol
    # Secondary types
    BAR = "lv_bar"
    ROLLER = "lv_roller"
    DROPDOWN = "lv_dropdown"
    LED = "lv_led"

    @property
    def display_name(self) -> str:
        """Human-readable name used in history labels ("Add Text Area")."""
        return self.name.replace("_", " ").title()


class EventTrigger(str, Enum):
    """Input events a widget can react to."""

    CLICKED = "CLICKED"
    PRESSED = "PRESSED"
    RELEASED = "RELEASED"
    VALUE_CHANGED = "VALUE_CHANGED"
    FOCUSED = "FOCUSED"
    DEFOCUSED = "DEFOCUSED"


class EventAction(str, Enum):
    """What happens when an event fires."""

    NAVIGATE = "NAVIGATE"
    CUSTOM_CODE = "CUSTOM_CODE"


class ChartType(str, Enum):
    """Chart rendering modes."""

    LINE = "line"
    BAR = "bar"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def revised(self, update: Mapping[str, Any]):
        """Return a validated copy with the fields in ``update`` replaced.

        Unchanged nested models are reused as they are.

        Raises:
            ValidationError: If a new value breaks a field constraint.
        """
        return self.model_validate({**dict(self), **update})


# =============================================================================
# Style
# =============================================================================


class WidgetStyle(_Frozen):
    """Visual attributes of a widget. Unset fields use toolkit defaults.

    Colors are CSS-style hex strings (``#RRGGBB`` or ``#RRGGBBAA``) or
    ``transparent``.
    """

    background_color: str | None = None
    text_color: str | None = None
    border_color: str | None = None
    border_width: Annotated[int, Field(ge=0)] | None = None
    border_radius: Annotated[int, Field(ge=0)] | None = None
    font_size: Annotated[int, Field(gt=0)] | None = None
    opacity: Annotated[float, Field(ge=0.0, le=1.0)] | None = None

    def merged(self, changes: "WidgetStyle | Mapping[str, Any]") -> "WidgetStyle":
        """Return a copy with the given fields overwritten.

        Only fields present in ``changes`` are applied, so editing one property
        never erases its siblings. A WidgetStyle contributes its non-None
        fields; a mapping may map a field to None to clear it.

        Raises:
            ValidationError: If a value is out of range.
        """
        if isinstance(changes, WidgetStyle):
            changes = changes.model_dump(exclude_none=True)
        known = {k: v for k, v in changes.items() if k in WidgetStyle.model_fields}
        if not known:
            return self
        return self.revised(known)


class StylePreset(_Frozen):
    """A named style that can be copied onto a widget."""

    id: str
    name: str
    style: WidgetStyle = Field(default_factory=WidgetStyle)


# =============================================================================
# Type-specific widget fields
# =============================================================================


class _TextFields(_Frozen):
    text: str = ""


class _RangeFields(_Frozen):
    value: int = 0
    min: int = 0
    max: int = 100


class _OptionFields(_Frozen):
    options: tuple[str, ...] = ("Option 1", "Option 2", "Option 3")
    selected: Annotated[int, Field(ge=0)] = 0


class ButtonProps(_TextFields):
    type: Literal["lv_btn"] = "lv_btn"
    text: str = "Button"
    # LVGL symbol shown instead of the text (icon button)
    symbol: str | None = None


class LabelProps(_TextFields):
    type: Literal["lv_label"] = "lv_label"
    text: str = "Label Text"


class SliderProps(_RangeFields):
    type: Literal["lv_slider"] = "lv_slider"
    value: int = 30


class ArcProps(_RangeFields):
    type: Literal["lv_arc"] = "lv_arc"
    value: int = 40


class BarProps(_RangeFields):
    type: Literal["lv_bar"] = "lv_bar"
    value: int = 50


class SwitchProps(_Frozen):
    type: Literal["lv_switch"] = "lv_switch"
    checked: bool = False


class CheckboxProps(_TextFields):
    type: Literal["lv_checkbox"] = "lv_checkbox"
    text: str = "Checkbox"
    checked: bool = False


class ContainerProps(_Frozen):
    type: Literal["lv_obj"] = "lv_obj"


class TextAreaProps(_TextFields):
    type: Literal["lv_textarea"] = "lv_textarea"
    placeholder: str = "Enter text..."


class ChartProps(_Frozen):
    type: Literal["lv_chart"] = "lv_chart"
    chart_type: ChartType = ChartType.LINE


class ImageProps(_Frozen):
    """Image source plus an optional base64 preview (never exported)."""

    type: Literal["lv_img"] = "lv_img"
    src: str = "lv_symbol_image"
    image_data: str | None = None


class IconProps(_Frozen):
    type: Literal["lv_icon"] = "lv_icon"
    symbol: str = "LV_SYMBOL_HOME"


class RollerProps(_OptionFields):
    type: Literal["lv_roller"] = "lv_roller"


class DropdownProps(_OptionFields):
    type: Literal["lv_dropdown"] = "lv_dropdown"


class LedProps(_Frozen):
    type: Literal["lv_led"] = "lv_led"
    on: bool = True
    brightness: Annotated[int, Field(ge=0, le=255)] = 255


WidgetProps = Annotated[
    Union[
        ButtonProps,
        LabelProps,
        SliderProps,
        ArcProps,
        BarProps,
        SwitchProps,
        CheckboxProps,
        ContainerProps,
        TextAreaProps,
        ChartProps,
        ImageProps,
        IconProps,
        RollerProps,
        DropdownProps,
        LedProps,
    ],
    Field(discriminator="type"),
]

PROPS_BY_TYPE: dict[WidgetType, type[_Frozen]] = {
    WidgetType.BUTTON: ButtonProps,
    WidgetType.LABEL: LabelProps,
    WidgetType.SLIDER: SliderProps,
    WidgetType.ARC: ArcProps,
    WidgetType.BAR: BarProps,
    WidgetType.SWITCH: SwitchProps,
    WidgetType.CHECKBOX: CheckboxProps,
    WidgetType.CONTAINER: ContainerProps,
    WidgetType.TEXT_AREA: TextAreaProps,
    WidgetType.CHART: ChartProps,
    WidgetType.IMAGE: ImageProps,
    WidgetType.ICON: IconProps,
    WidgetType.ROLLER: RollerProps,
    WidgetType.DROPDOWN: DropdownProps,
    WidgetType.LED: LedProps,
}


# =============================================================================
# Events, Widgets, Layers, Screens
# =============================================================================


class WidgetEvent(_Frozen):
    """An event binding on a widget.

    ``target_screen_id`` is only meaningful for NAVIGATE and may dangle if the
    screen was deleted; consumers treat a missing screen as "no target".
    """

    id: str
    trigger: EventTrigger = EventTrigger.CLICKED
    action: EventAction = EventAction.NAVIGATE
    target_screen_id: str | None = None
    custom_code: str | None = None


def _coerce_props(value: Any, current: WidgetType) -> Any:
    """Fill in the type tag of a props mapping; variants pass through.

    A mapping without ``type`` keeps the widget's current type. Validation
    into the variant happens when the widget is rebuilt.
    """
    if isinstance(value, Mapping) and "type" not in value:
        return {**value, "type": current.value}
    return value


_WIDGET_KEYS = frozenset({"name", "layer_id", "group_id", "x", "y", "width", "height"})


class Widget(_Frozen):
    """A positioned, typed UI element.

    Attributes:
        id: Unique identifier within the project.
        name: Display name (``lv_btn_1``), used for generated variable names.
        layer_id: Layer the widget is drawn on (lookup, not ownership).
        group_id: Shared by co-grouped widgets; None when ungrouped.
        x, y: Top-left position in canvas pixels. May lie off-canvas.
        width, height: Size in canvas pixels.
        style: Visual attributes.
        props: Type-specific fields; ``props.type`` is the widget type.
        events: Event bindings.
    """

    id: str
    name: str = ""
    layer_id: str
    group_id: str | None = None
    x: int = 0
    y: int = 0
    width: Annotated[int, Field(ge=1)] = 100
    height: Annotated[int, Field(ge=1)] = 40
    style: WidgetStyle = Field(default_factory=WidgetStyle)
    props: WidgetProps
    events: tuple[WidgetEvent, ...] = ()

    @property
    def type(self) -> WidgetType:
        """The widget type tag, derived from its props variant."""
        return WidgetType(self.props.type)

    def with_changes(self, changes: Mapping[str, Any]) -> "Widget":
        """Apply a partial update and return the new widget.

        Top-level fields are replaced, ``style`` is merged one level deeper,
        and keys naming a type-specific field (``text``, ``value``...) are
        merged into ``props``. Unknown keys are ignored. Returns ``self`` when
        nothing changes.

        Raises:
            ValidationError: If the result breaks a field constraint, such as
                a non-positive size or an out-of-range opacity.
        """
        update: dict[str, Any] = {}
        prop_changes: dict[str, Any] = {}
        props_fields = type(self.props).model_fields

        for key, value in changes.items():
            if key in _WIDGET_KEYS:
                if getattr(self, key) != value:
                    update[key] = value
            elif key == "style":
                if value is None or isinstance(value, (WidgetStyle, Mapping)):
                    value = self.style.merged(value or {})
                if value != self.style:
                    update["style"] = value
            elif key == "props":
                update["props"] = _coerce_props(value, self.type)
            elif key == "events":
                update["events"] = tuple(value) if isinstance(value, (list, tuple)) else value
            elif key in props_fields and key != "type":
                if getattr(self.props, key) != value:
                    prop_changes[key] = value

        if prop_changes:
            base = update.get("props", self.props)
            if isinstance(base, (Mapping, BaseModel)):
                update["props"] = {**dict(base), **prop_changes}

        if not update:
            return self
        widget = self.revised(update)
        return self if widget == self else widget


class Layer(_Frozen):
    """A named partition of a screen's widgets with shared visibility and lock."""

    id: str
    name: str
    visible: bool = True
    locked: bool = False


class Screen(_Frozen):
    """One navigable UI page.

    ``layers`` is ordered bottom to top. ``widgets`` holds every widget of the
    screen; the relative order of the widgets sharing a layer is their
    stacking order within that layer (later is higher).
    """

    id: str
    name: str
    background_color: str = "#ffffff"
    layers: tuple[Layer, ...] = Field(..., min_length=1)
    widgets: tuple[Widget, ...] = ()

    def layer(self, layer_id: str) -> Layer | None:
        """Look up a layer by id; None when missing."""
        return next((l for l in self.layers if l.id == layer_id), None)

    def widget(self, widget_id: str) -> Widget | None:
        """Look up a widget by id; None when missing."""
        return next((w for w in self.widgets if w.id == widget_id), None)

    def widgets_on(self, layer_id: str) -> tuple[Widget, ...]:
        """Widgets of one layer, bottom to top."""
        return tuple(w for w in self.widgets if w.layer_id == layer_id)

    def is_locked(self, widget: Widget) -> bool:
        """Whether the widget's layer is locked. Missing layers count as unlocked."""
        layer = self.layer(widget.layer_id)
        return layer.locked if layer else False


# =============================================================================
# Project
# =============================================================================


class CanvasSettings(_Frozen):
    """Global canvas and target-device settings."""

    width: Annotated[int, Field(gt=0)] = 480
    height: Annotated[int, Field(gt=0)] = 320
    default_background_color: str = "#f0f2f5"
    project_name: str = "My Project"
    theme: str = "default"
    target_device: str | None = None
    rotation: Literal[0, 90, 180, 270] = 0


class Project(_Frozen):
    """Root aggregate: canvas settings, screens and style presets.

    Which screen is current is tracked by the editor, not the document.
    """

    settings: CanvasSettings = Field(default_factory=CanvasSettings)
    screens: tuple[Screen, ...] = Field(..., min_length=1)
    style_presets: tuple[StylePreset, ...] = ()

    @classmethod
    def create(cls, settings: CanvasSettings | None = None) -> "Project":
        """Create the empty project: one screen with one base layer."""
        from .presets import DEFAULT_STYLE_PRESETS

        settings = settings or CanvasSettings()
        screen = Screen(
            id="screen_1",
            name="Main Screen",
            background_color=settings.default_background_color,
            layers=(Layer(id="layer_1", name="Base Layer"),),
        )
        return cls(
            settings=settings,
            screens=(screen,),
            style_presets=DEFAULT_STYLE_PRESETS,
        )

    def screen(self, screen_id: str) -> Screen | None:
        """Look up a screen by id; None when missing."""
        return next((s for s in self.screens if s.id == screen_id), None)

    def preset(self, preset_id: str) -> StylePreset | None:
        """Look up a style preset by id; None when missing."""
        return next((p for p in self.style_presets if p.id == preset_id), None)

    def with_screen(self, screen: Screen) -> "Project":
        """Replace the screen with the same id. Unknown ids leave the project as is."""
        current = self.screen(screen.id)
        if current is None or current is screen:
            return self
        screens = tuple(screen if s.id == screen.id else s for s in self.screens)
        return self.model_copy(update={"screens": screens})


# =============================================================================
# Validation
# =============================================================================


@dataclass
class ValidationIssue:
    """A structural problem found in a project.

    Attributes:
        ref_id: ID of the entity the issue concerns.
        message: Human-readable description.
        issue_type: Machine-readable classification.
    """

    ref_id: str
    message: str
    issue_type: str


def validate_project(project: Project, max_layers: int = MAX_LAYERS) -> list[ValidationIssue]:
    """Check a project for broken invariants and dangling references.

    Checks for:
    - Duplicate screen, layer or widget IDs
    - Widgets referencing a layer missing from their screen
    - Groups with a single member
    - Screens above the layer limit
    - NAVIGATE events targeting a missing screen

    Args:
        project: Project to inspect.
        max_layers: Per-screen layer limit.

    Returns:
        List of ValidationIssue objects. Empty list if valid.
    """
    issues: list[ValidationIssue] = []
    seen: dict[str, int] = {}
    screen_ids = {s.id for s in project.screens}

    for screen in project.screens:
        seen[screen.id] = seen.get(screen.id, 0) + 1

        if len(screen.layers) > max_layers:
            issues.append(
                ValidationIssue(
                    ref_id=screen.id,
                    message=(
                        f"Screen '{screen.name}' has {len(screen.layers)} layers "
                        f"(limit {max_layers})"
                    ),
                    issue_type="too_many_layers",
                )
            )

        layer_ids = {layer.id for layer in screen.layers}
        for layer in screen.layers:
            seen[layer.id] = seen.get(layer.id, 0) + 1

        group_sizes: dict[str, int] = {}
        for widget in screen.widgets:
            seen[widget.id] = seen.get(widget.id, 0) + 1

            if widget.layer_id not in layer_ids:
                issues.append(
                    ValidationIssue(
                        ref_id=widget.id,
                        message=f"Widget '{widget.name}' references missing layer '{widget.layer_id}'",
                        issue_type="dangling_layer",
                    )
                )

            if widget.group_id:
                group_sizes[widget.group_id] = group_sizes.get(widget.group_id, 0) + 1

            for event in widget.events:
                if (
                    event.action == EventAction.NAVIGATE
                    and event.target_screen_id
                    and event.target_screen_id not in screen_ids
                ):
                    issues.append(
                        ValidationIssue(
                            ref_id=event.id,
                            message=(
                                f"Event on '{widget.name}' navigates to missing "
                                f"screen '{event.target_screen_id}'"
                            ),
                            issue_type="dangling_screen",
                        )
                    )

        for group_id, size in group_sizes.items():
            if size < 2:
                issues.append(
                    ValidationIssue(
                        ref_id=group_id,
                        message=f"Group '{group_id}' has a single member",
                        issue_type="singleton_group",
                    )
                )

    for ref_id, count in seen.items():
        if count > 1:
            issues.append(
                ValidationIssue(
                    ref_id=ref_id,
                    message=f"Duplicate ID '{ref_id}' appears {count} times",
                    issue_type="duplicate_id",
                )
            )

    return issues


def is_valid(project: Project) -> bool:
    """Check whether a project has no validation issues."""
    return not validate_project(project)


__all__ = [
    "MAX_LAYERS",
    "new_id",
    # Enums
    "WidgetType",
    "EventTrigger",
    "EventAction",
    "ChartType",
    # Style
    "WidgetStyle",
    "StylePreset",
    # Props
    "ButtonProps",
    "LabelProps",
    "SliderProps",
    "ArcProps",
    "BarProps",
    "SwitchProps",
    "CheckboxProps",
    "ContainerProps",
    "TextAreaProps",
    "ChartProps",
    "ImageProps",
    "IconProps",
    "RollerProps",
    "DropdownProps",
    "LedProps",
    "WidgetProps",
    "PROPS_BY_TYPE",
    # Entities
    "WidgetEvent",
    "Widget",
    "Layer",
    "Screen",
    "CanvasSettings",
    "Project",
    # Validation
    "ValidationIssue",
    "validate_project",
    "is_valid",
]
