"""Built-in sample projects.

Ready-made designs a user can open instead of starting from the empty
project: a round thermostat, an e-bike dashboard, an audio player and a
two-screen settings menu with navigation between its screens.
"""

from dataclasses import dataclass

from .lib import (
    ArcProps,
    ButtonProps,
    CanvasSettings,
    ContainerProps,
    IconProps,
    LabelProps,
    Layer,
    Project,
    Screen,
    SliderProps,
    SwitchProps,
    Widget,
    WidgetEvent,
    WidgetStyle,
)
from .presets import DEFAULT_STYLE_PRESETS


@dataclass(frozen=True)
class SampleProject:
    """A named, described sample design."""

    id: str
    name: str
    description: str
    project: Project


def _layer(layer_id: str) -> Layer:
    return Layer(id=layer_id, name="Main Layer")


def _widget(
    widget_id: str,
    name: str,
    layer_id: str,
    props,
    box: tuple[int, int, int, int],
    events: tuple[WidgetEvent, ...] = (),
    **style,
) -> Widget:
    x, y, width, height = box
    return Widget(
        id=widget_id,
        name=name,
        layer_id=layer_id,
        x=x,
        y=y,
        width=width,
        height=height,
        style=WidgetStyle(**style),
        props=props,
        events=events,
    )


def _project(settings: CanvasSettings, *screens: Screen) -> Project:
    return Project(settings=settings, screens=screens, style_presets=DEFAULT_STYLE_PRESETS)


# =============================================================================
# Samples
# =============================================================================


def _thermostat() -> Project:
    layer = "l_therm_1"
    return _project(
        CanvasSettings(
            width=240,
            height=240,
            default_background_color="#1a1a1a",
            project_name="Thermostat_V1",
            theme="dark",
        ),
        Screen(
            id="scr_therm_1",
            name="Main Control",
            background_color="#1a1a1a",
            layers=(_layer(layer),),
            widgets=(
                _widget(
                    "w_arc_temp", "TempArc", layer,
                    ArcProps(value=75, min=50, max=90), (20, 20, 200, 200),
                    border_color="#f97316", background_color="#262626",
                    border_width=20, border_radius=0,
                ),
                _widget(
                    "w_lbl_val", "TempLabel", layer,
                    LabelProps(text="72°"), (75, 75, 90, 50),
                    text_color="#ffffff", font_size=52, background_color="transparent",
                ),
                _widget(
                    "w_lbl_status", "Status", layer,
                    LabelProps(text="HEATING"), (92, 130, 60, 20),
                    text_color="#f97316", font_size=12, background_color="transparent",
                ),
                _widget(
                    "w_btn_cool", "BtnHome", layer,
                    ButtonProps(text="", symbol="LV_SYMBOL_HOME"), (55, 155, 44, 44),
                    background_color="#3b82f6", border_radius=22,
                    text_color="#ffffff", border_width=0,
                ),
                _widget(
                    "w_btn_heat", "BtnPower", layer,
                    ButtonProps(text="", symbol="LV_SYMBOL_CHARGE"), (141, 155, 44, 44),
                    background_color="#ef4444", border_radius=22,
                    text_color="#ffffff", border_width=0,
                ),
            ),
        ),
    )


def _ebike_dashboard() -> Project:
    layer = "l_dash_1"
    return _project(
        CanvasSettings(
            width=480,
            height=320,
            default_background_color="#000000",
            project_name="EBike_Cluster",
            theme="dark",
            target_device="wt32_sc01",
        ),
        Screen(
            id="scr_dash_1",
            name="Dashboard",
            background_color="#000000",
            layers=(_layer(layer),),
            widgets=(
                _widget(
                    "w_arc_speed", "SpeedArc", layer,
                    ArcProps(value=65), (140, 40, 240, 240),
                    border_color="#06b6d4", background_color="#111111",
                    border_width=16, border_radius=0,
                ),
                _widget(
                    "w_lbl_speed", "SpeedVal", layer,
                    LabelProps(text="42"), (215, 110, 100, 60),
                    text_color="#ffffff", font_size=64, background_color="transparent",
                ),
                _widget(
                    "w_lbl_unit", "Unit", layer,
                    LabelProps(text="KM/H"), (235, 175, 50, 20),
                    text_color="#06b6d4", font_size=16, background_color="transparent",
                ),
                _widget(
                    "w_bar_batt", "Battery", layer,
                    SliderProps(value=60), (50, 80, 24, 160),
                    background_color="#1f2937", border_color="#ffffff", border_radius=12,
                ),
                _widget(
                    "w_icon_batt", "IconBatt", layer,
                    IconProps(symbol="LV_SYMBOL_BATTERY_3"), (47, 250, 30, 30),
                    text_color="#22c55e", font_size=24, background_color="transparent",
                ),
                _widget(
                    "w_btn_mode", "ModeEco", layer,
                    ButtonProps(text="ECO"), (390, 100, 70, 45),
                    background_color="#22c55e", text_color="#000000",
                    border_radius=6, border_width=0,
                ),
                _widget(
                    "w_btn_sport", "ModeSport", layer,
                    ButtonProps(text="SPORT"), (390, 160, 70, 45),
                    background_color="#333333", text_color="#6b7280",
                    border_radius=6, border_width=0,
                ),
            ),
        ),
    )


def _audio_player() -> Project:
    layer = "l_audio_1"
    return _project(
        CanvasSettings(
            width=320,
            height=240,
            default_background_color="#0f172a",
            project_name="AudioPlayer",
            theme="midnight",
            target_device="m5stack_core2",
        ),
        Screen(
            id="scr_audio_1",
            name="Now Playing",
            background_color="#0f172a",
            layers=(_layer(layer),),
            widgets=(
                _widget(
                    "w_cover_bg", "CoverArt", layer,
                    ContainerProps(), (110, 15, 100, 100),
                    background_color="#1e293b", border_radius=8,
                    border_color="#334155", border_width=1,
                ),
                _widget(
                    "w_icon_note", "NoteIcon", layer,
                    IconProps(symbol="LV_SYMBOL_SHUFFLE"), (148, 50, 24, 24),
                    text_color="#475569", font_size=24, background_color="transparent",
                ),
                _widget(
                    "w_lbl_song", "SongTitle", layer,
                    LabelProps(text="Midnight Synthwave"), (60, 125, 200, 24),
                    text_color="#f8fafc", font_size=16, background_color="transparent",
                ),
                _widget(
                    "w_lbl_artist", "Artist", layer,
                    LabelProps(text="Neon Dreams"), (60, 148, 200, 20),
                    text_color="#94a3b8", font_size=12, background_color="transparent",
                ),
                _widget(
                    "w_slider_prog", "Progress", layer,
                    SliderProps(value=45), (30, 175, 260, 6),
                    background_color="#334155", border_color="#6366f1", border_radius=3,
                ),
                _widget(
                    "w_btn_prev", "Prev", layer,
                    ButtonProps(text="", symbol="LV_SYMBOL_PREV"), (90, 195, 32, 32),
                    background_color="transparent", text_color="#cbd5e1",
                    border_radius=16, border_width=0,
                ),
                _widget(
                    "w_btn_play", "Play", layer,
                    ButtonProps(text="", symbol="LV_SYMBOL_PLAY"), (140, 190, 42, 42),
                    background_color="#6366f1", text_color="#ffffff",
                    border_radius=21, border_width=0,
                ),
                _widget(
                    "w_btn_next", "Next", layer,
                    ButtonProps(text="", symbol="LV_SYMBOL_NEXT"), (200, 195, 32, 32),
                    background_color="transparent", text_color="#cbd5e1",
                    border_radius=16, border_width=0,
                ),
            ),
        ),
    )


def _settings_menu() -> Project:
    menu, wifi = "l_set_1", "l_set_2"
    row = {
        "background_color": "#ffffff",
        "border_radius": 8,
        "text_color": "#1f2937",
        "border_width": 1,
        "border_color": "#e5e7eb",
    }
    caption = {"text_color": "#1f2937", "font_size": 16, "background_color": "transparent"}
    row_icon = {"text_color": "#2196F3", "font_size": 18, "background_color": "transparent"}
    header = {"background_color": "#ffffff", "border_radius": 0, "border_width": 0}

    return _project(
        CanvasSettings(
            width=320,
            height=240,
            default_background_color="#f0f2f5",
            project_name="Settings_Menu",
            theme="default",
            target_device="m5stack_core2",
        ),
        Screen(
            id="scr_set_1",
            name="Main Menu",
            background_color="#f0f2f5",
            layers=(_layer(menu),),
            widgets=(
                _widget("w_hdr_1", "Header", menu, ContainerProps(), (0, 0, 320, 40), **header),
                _widget(
                    "w_lbl_title", "Title", menu,
                    LabelProps(text="Settings"), (10, 10, 100, 20), **caption,
                ),
                _widget(
                    "w_cont_wifi", "BtnWifi", menu,
                    ButtonProps(text="       Wi-Fi Networks"), (10, 50, 300, 50),
                    events=(WidgetEvent(id="evt_nav_wifi", target_screen_id="scr_set_2"),),
                    **row,
                ),
                _widget(
                    "w_icon_wifi", "IconWifi", menu,
                    IconProps(symbol="LV_SYMBOL_WIFI"), (25, 65, 20, 20), **row_icon,
                ),
                _widget(
                    "w_cont_bt", "BtnBT", menu,
                    ButtonProps(text="       Bluetooth"), (10, 110, 300, 50), **row,
                ),
                _widget(
                    "w_icon_bt", "IconBT", menu,
                    IconProps(symbol="LV_SYMBOL_BLUETOOTH"), (25, 125, 20, 20), **row_icon,
                ),
            ),
        ),
        Screen(
            id="scr_set_2",
            name="Wi-Fi Networks",
            background_color="#f0f2f5",
            layers=(_layer(wifi),),
            widgets=(
                _widget("w_hdr_2", "Header2", wifi, ContainerProps(), (0, 0, 320, 40), **header),
                _widget(
                    "w_btn_back", "Back", wifi,
                    ButtonProps(text="", symbol="LV_SYMBOL_PREV"), (5, 5, 40, 30),
                    events=(WidgetEvent(id="evt_back", target_screen_id="scr_set_1"),),
                    background_color="transparent", text_color="#1f2937",
                ),
                _widget(
                    "w_lbl_title2", "Title2", wifi,
                    LabelProps(text="Wi-Fi"), (50, 10, 100, 20), **caption,
                ),
                _widget(
                    "w_sw_wifi", "Toggle", wifi,
                    SwitchProps(checked=True), (250, 5, 50, 25),
                    background_color="#e5e7eb", border_color="#22c55e", border_radius=99,
                ),
                _widget(
                    "w_lbl_scan", "Scan", wifi,
                    LabelProps(text="Searching for networks..."), (20, 60, 200, 20),
                    text_color="#6b7280", font_size=12, background_color="transparent",
                ),
            ),
        ),
    )


SAMPLE_PROJECTS: dict[str, SampleProject] = {
    s.id: s
    for s in (
        SampleProject(
            "thermostat",
            "Smart Thermostat",
            "A round HVAC control with a temperature arc and mode buttons.",
            _thermostat(),
        ),
        SampleProject(
            "ebike_dash",
            "E-Bike Dashboard",
            "Instrument cluster showing speed, battery and riding mode.",
            _ebike_dashboard(),
        ),
        SampleProject(
            "audio_player",
            "HiFi Audio Player",
            "Playback controls with an album art placeholder and progress slider.",
            _audio_player(),
        ),
        SampleProject(
            "wifi_settings",
            "Settings Menu",
            "Two screens linked by navigation events, with a toggle switch.",
            _settings_menu(),
        ),
    )
}


__all__ = ["SampleProject", "SAMPLE_PROJECTS"]
