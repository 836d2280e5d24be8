"""Document model for embedded GUI designs.

Project -> Screens -> Layers / Widgets, plus Style Presets. All models are
immutable pydantic models; edits produce new versions.

Example usage:
    >>> from studio.model import Project, validate_project
    >>> project = Project.create()
    >>> project.screens[0].layers[0].name
    'Base Layer'
    >>> validate_project(project)
    []
"""

from .lib import (
    MAX_LAYERS,
    PROPS_BY_TYPE,
    ArcProps,
    BarProps,
    ButtonProps,
    CanvasSettings,
    ChartProps,
    ChartType,
    CheckboxProps,
    ContainerProps,
    DropdownProps,
    EventAction,
    EventTrigger,
    IconProps,
    ImageProps,
    LabelProps,
    Layer,
    LedProps,
    Project,
    RollerProps,
    Screen,
    SliderProps,
    StylePreset,
    SwitchProps,
    TextAreaProps,
    ValidationIssue,
    Widget,
    WidgetEvent,
    WidgetProps,
    WidgetStyle,
    WidgetType,
    is_valid,
    new_id,
    validate_project,
)
from .presets import (
    DEFAULT_STYLE_PRESETS,
    DEFAULT_WIDGET_PROPS,
    DEVICE_PRESETS,
    PROJECT_THEMES,
    DevicePreset,
    Theme,
    ThemeColors,
    WidgetDefaults,
    device_resolution,
    make_widget,
    theme_style,
)
from .samples import SAMPLE_PROJECTS, SampleProject

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
    # Defaults
    "WidgetDefaults",
    "DEFAULT_WIDGET_PROPS",
    "make_widget",
    "DEFAULT_STYLE_PRESETS",
    "ThemeColors",
    "Theme",
    "PROJECT_THEMES",
    "theme_style",
    "DevicePreset",
    "DEVICE_PRESETS",
    "device_resolution",
    # Samples
    "SampleProject",
    "SAMPLE_PROJECTS",
]
