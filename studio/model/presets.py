"""Built-in defaults: widget templates, style presets, themes and devices."""

from dataclasses import dataclass, field
from typing import Any

from .lib import (
    PROPS_BY_TYPE,
    StylePreset,
    Widget,
    WidgetStyle,
    WidgetType,
)


@dataclass(frozen=True)
class WidgetDefaults:
    """Template used when a widget of a given type is added.

    Attributes:
        width: Default width in canvas pixels.
        height: Default height in canvas pixels.
        style: Default style fields.
        props: Overrides for the type-specific fields.
    """

    width: int
    height: int
    style: dict[str, Any] = field(default_factory=dict)
    props: dict[str, Any] = field(default_factory=dict)


DEFAULT_WIDGET_PROPS: dict[WidgetType, WidgetDefaults] = {
    WidgetType.BUTTON: WidgetDefaults(
        120,
        40,
        style={
            "background_color": "#2196F3",
            "text_color": "#FFFFFF",
            "border_radius": 8,
            "border_width": 0,
            "font_size": 14,
        },
    ),
    WidgetType.LABEL: WidgetDefaults(
        120,
        30,
        style={"text_color": "#1f2937", "font_size": 16, "background_color": "transparent"},
    ),
    WidgetType.SLIDER: WidgetDefaults(
        200,
        20,
        style={"background_color": "#e5e7eb", "border_color": "#2196F3", "border_radius": 10},
    ),
    WidgetType.SWITCH: WidgetDefaults(
        60,
        32,
        style={"background_color": "#e5e7eb", "border_color": "#2196F3", "border_radius": 999},
    ),
    WidgetType.CHECKBOX: WidgetDefaults(
        150,
        24,
        style={"text_color": "#1f2937", "font_size": 16, "border_color": "#2196F3"},
    ),
    WidgetType.ARC: WidgetDefaults(
        120,
        120,
        style={
            "border_color": "#3b82f6",
            "background_color": "#e2e8f0",
            "border_width": 10,
            "border_radius": 0,
        },
    ),
    WidgetType.CONTAINER: WidgetDefaults(
        200,
        150,
        style={
            "background_color": "#ffffff",
            "border_radius": 12,
            "border_width": 1,
            "border_color": "#e2e8f0",
        },
    ),
    WidgetType.TEXT_AREA: WidgetDefaults(
        200,
        80,
        style={
            "background_color": "#ffffff",
            "text_color": "#1f2937",
            "border_radius": 8,
            "border_width": 1,
            "border_color": "#cbd5e1",
            "font_size": 14,
        },
    ),
    WidgetType.CHART: WidgetDefaults(
        240,
        160,
        style={
            "background_color": "#ffffff",
            "border_color": "#e2e8f0",
            "border_width": 1,
            "border_radius": 8,
        },
    ),
    WidgetType.IMAGE: WidgetDefaults(64, 64, style={"background_color": "transparent"}),
    WidgetType.ICON: WidgetDefaults(
        32,
        32,
        style={"text_color": "#1f2937", "font_size": 24, "background_color": "transparent"},
    ),
    WidgetType.BAR: WidgetDefaults(
        200,
        20,
        style={"background_color": "#e5e7eb", "border_color": "#2196F3", "border_radius": 4},
    ),
    WidgetType.ROLLER: WidgetDefaults(
        120,
        100,
        style={
            "background_color": "#ffffff",
            "text_color": "#1f2937",
            "border_color": "#cbd5e1",
            "border_width": 1,
            "border_radius": 8,
        },
    ),
    WidgetType.DROPDOWN: WidgetDefaults(
        150,
        40,
        style={
            "background_color": "#ffffff",
            "text_color": "#1f2937",
            "border_color": "#cbd5e1",
            "border_width": 1,
            "border_radius": 8,
        },
    ),
    WidgetType.LED: WidgetDefaults(24, 24, style={"background_color": "#ef4444", "border_radius": 999}),
}


def make_widget(
    widget_type: WidgetType,
    *,
    widget_id: str,
    layer_id: str,
    x: int,
    y: int,
    name: str = "",
) -> Widget:
    """Build a widget of the given type from its defaults."""
    defaults = DEFAULT_WIDGET_PROPS[widget_type]
    props = PROPS_BY_TYPE[widget_type](**defaults.props)
    return Widget(
        id=widget_id,
        name=name or widget_type.value,
        layer_id=layer_id,
        x=x,
        y=y,
        width=defaults.width,
        height=defaults.height,
        style=WidgetStyle(**defaults.style),
        props=props,
    )


# =============================================================================
# Style presets
# =============================================================================

DEFAULT_STYLE_PRESETS: tuple[StylePreset, ...] = (
    StylePreset(
        id="p1",
        name="Primary",
        style=WidgetStyle(
            background_color="#3b82f6", text_color="#ffffff", border_radius=8, border_width=0
        ),
    ),
    StylePreset(
        id="p2",
        name="Outline",
        style=WidgetStyle(
            background_color="transparent",
            text_color="#3b82f6",
            border_color="#3b82f6",
            border_width=2,
            border_radius=8,
        ),
    ),
    StylePreset(
        id="p3",
        name="Dark Card",
        style=WidgetStyle(
            background_color="#1e293b",
            text_color="#e2e8f0",
            border_color="#334155",
            border_width=1,
            border_radius=12,
        ),
    ),
    StylePreset(
        id="p4",
        name="Alert",
        style=WidgetStyle(
            background_color="#ef4444", text_color="#ffffff", border_radius=4, border_width=0
        ),
    ),
    StylePreset(
        id="p5",
        name="Success",
        style=WidgetStyle(
            background_color="#22c55e", text_color="#ffffff", border_radius=6, border_width=0
        ),
    ),
    StylePreset(
        id="p6",
        name="Warning",
        style=WidgetStyle(
            background_color="#f59e0b", text_color="#ffffff", border_radius=6, border_width=0
        ),
    ),
    StylePreset(
        id="p7",
        name="Glass",
        style=WidgetStyle(
            background_color="#ffffff20",
            text_color="#ffffff",
            border_color="#ffffff40",
            border_width=1,
            border_radius=16,
        ),
    ),
    StylePreset(
        id="p8",
        name="Pill",
        style=WidgetStyle(
            border_radius=999, background_color="#6366f1", text_color="#ffffff", border_width=0
        ),
    ),
    StylePreset(
        id="p9",
        name="Minimal",
        style=WidgetStyle(background_color="transparent", border_width=0, text_color="#94a3b8"),
    ),
)


# =============================================================================
# Themes
# =============================================================================


@dataclass(frozen=True)
class ThemeColors:
    """Palette of a project theme."""

    background: str  # Screen background
    surface: str  # Container/card background
    primary: str  # Buttons, active states
    secondary: str  # Tracks, inactive parts
    text: str
    text_invert: str  # Text on top of primary
    border: str


@dataclass(frozen=True)
class Theme:
    """A named palette plus corner radius applied across a whole project."""

    id: str
    name: str
    colors: ThemeColors
    border_radius: int


PROJECT_THEMES: dict[str, Theme] = {
    "default": Theme(
        id="default",
        name="Light",
        colors=ThemeColors(
            background="#f0f2f5",
            surface="#ffffff",
            primary="#2196F3",
            secondary="#e5e7eb",
            text="#1f2937",
            text_invert="#ffffff",
            border="#e2e8f0",
        ),
        border_radius=8,
    ),
    "dark": Theme(
        id="dark",
        name="Dark",
        colors=ThemeColors(
            background="#0f172a",
            surface="#1e293b",
            primary="#3b82f6",
            secondary="#334155",
            text="#e2e8f0",
            text_invert="#ffffff",
            border="#475569",
        ),
        border_radius=8,
    ),
    "midnight": Theme(
        id="midnight",
        name="Midnight Neon",
        colors=ThemeColors(
            background="#020617",
            surface="#111827",
            primary="#a855f7",
            secondary="#1f2937",
            text="#f5f3ff",
            text_invert="#ffffff",
            border="#6d28d9",
        ),
        border_radius=12,
    ),
    "forest": Theme(
        id="forest",
        name="Forest",
        colors=ThemeColors(
            background="#f0fdf4",
            surface="#ffffff",
            primary="#16a34a",
            secondary="#bbf7d0",
            text="#14532d",
            text_invert="#ffffff",
            border="#86efac",
        ),
        border_radius=6,
    ),
    "industrial": Theme(
        id="industrial",
        name="Industrial",
        colors=ThemeColors(
            background="#27272a",
            surface="#3f3f46",
            primary="#f59e0b",
            secondary="#52525b",
            text="#fafafa",
            text_invert="#18181b",
            border="#71717a",
        ),
        border_radius=2,
    ),
}


def theme_style(widget_type: WidgetType, theme: Theme) -> dict[str, Any]:
    """Style fields a theme sets on a widget of the given type."""
    c = theme.colors
    r = theme.border_radius
    if widget_type == WidgetType.BUTTON:
        return {"background_color": c.primary, "text_color": c.text_invert, "border_radius": r}
    if widget_type in (WidgetType.LABEL, WidgetType.ICON):
        return {"text_color": c.text}
    if widget_type in (WidgetType.SLIDER, WidgetType.BAR):
        return {"background_color": c.secondary, "border_color": c.primary, "border_radius": r}
    if widget_type == WidgetType.SWITCH:
        # border_color stores the "on" colour
        return {"background_color": c.secondary, "border_color": c.primary}
    if widget_type == WidgetType.CHECKBOX:
        return {"text_color": c.text, "border_color": c.primary}
    if widget_type == WidgetType.ARC:
        return {"border_color": c.primary, "background_color": c.secondary}
    if widget_type in (WidgetType.CONTAINER, WidgetType.CHART):
        return {"background_color": c.surface, "border_color": c.border, "border_radius": r}
    if widget_type in (WidgetType.TEXT_AREA, WidgetType.ROLLER, WidgetType.DROPDOWN):
        return {
            "background_color": c.surface,
            "text_color": c.text,
            "border_color": c.border,
            "border_radius": r,
        }
    if widget_type == WidgetType.LED:
        return {"background_color": c.primary}
    return {}


# =============================================================================
# Target devices
# =============================================================================


@dataclass(frozen=True)
class DevicePreset:
    """A display board with its native resolution (landscape)."""

    id: str
    name: str
    manufacturer: str
    width: int
    height: int


DEVICE_PRESETS: dict[str, DevicePreset] = {
    d.id: d
    for d in (
        DevicePreset("pc_sim", "PC Simulator (SDL)", "LVGL", 480, 320),
        DevicePreset("esp32_s3_box", "ESP32-S3-BOX", "Espressif", 320, 240),
        DevicePreset("m5stack_core2", "M5Stack Core2", "M5Stack", 320, 240),
        DevicePreset("ttgo_t_display", "T-Display", "LilyGO", 240, 135),
        DevicePreset("wt32_sc01", "WT32-SC01", "Wireless-Tag", 480, 320),
        DevicePreset("stm32f429_disco", "STM32F429I-DISC1", "STMicroelectronics", 320, 240),
        DevicePreset("rpi_7inch", "Raspberry Pi 7\" Touch", "Raspberry Pi", 800, 480),
        DevicePreset("sunton_8048s070", "ESP32-8048S070", "Sunton", 800, 480),
    )
}


def device_resolution(device: DevicePreset, rotation: int) -> tuple[int, int]:
    """Canvas size for a device at a rotation; 90 and 270 swap the axes."""
    if rotation in (90, 270):
        return device.height, device.width
    return device.width, device.height


__all__ = [
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
]
