"""Document mutation façade.

Every edit is a pure function from an old Project to a new Project. Rejected
edits (unknown ids, invariant violations) return the very same Project object
so the history engine records nothing for them. Nothing here raises for a
rejected edit; it is logged at debug level and absorbed.
"""

import logging
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from studio import layers as layer_ops
from studio import selection as selection_ops
from studio.layers import ArrangeAction
from studio.model import (
    DEVICE_PRESETS,
    MAX_LAYERS,
    PROJECT_THEMES,
    CanvasSettings,
    Layer,
    Project,
    Screen,
    StylePreset,
    Widget,
    WidgetEvent,
    WidgetType,
    device_resolution,
    make_widget,
    theme_style,
)

logger = logging.getLogger(__name__)

# Placement for widgets added without explicit coordinates
DEFAULT_ORIGIN = (20, 20)
STACK_OFFSET = 10

WidgetChanges = tuple[str, Mapping[str, Any]]


def edit_screen(project: Project, screen_id: str, fn: Callable[[Screen], Screen]) -> Project:
    """Apply a screen-level edit; unknown screens leave the project as is."""
    screen = project.screen(screen_id)
    if screen is None:
        logger.debug(f"Edit rejected: unknown screen '{screen_id}'")
        return project
    return project.with_screen(fn(screen))


def update_screen_widget(screen: Screen, widget: Widget) -> Screen:
    """Replace the widget with the same id, keeping its stacking slot."""
    widgets = tuple(widget if w.id == widget.id else w for w in screen.widgets)
    return screen.model_copy(update={"widgets": widgets})


# =============================================================================
# Widgets
# =============================================================================


def add_widget(
    project: Project,
    screen_id: str,
    layer_id: str,
    widget_type: WidgetType | str,
    widget_id: str,
    x: int | None = None,
    y: int | None = None,
) -> Project:
    """Insert a widget with its type defaults on top of the given layer.

    Without coordinates it is placed at the default origin, shifted when the
    screen already has widgets so new widgets do not stack exactly.
    The name is ``<type>_<n>`` where n counts widgets of that type.
    """
    widget_type = WidgetType(widget_type)

    def _add(screen: Screen) -> Screen:
        if screen.layer(layer_id) is None:
            logger.debug(f"Add widget rejected: unknown layer '{layer_id}'")
            return screen

        pos_x = DEFAULT_ORIGIN[0] if x is None else x
        pos_y = DEFAULT_ORIGIN[1] if y is None else y
        if x is None and screen.widgets:
            pos_x += STACK_OFFSET
            pos_y += STACK_OFFSET

        count = sum(1 for w in screen.widgets if w.type == widget_type)
        widget = make_widget(
            widget_type,
            widget_id=widget_id,
            layer_id=layer_id,
            x=pos_x,
            y=pos_y,
            name=f"{widget_type.value}_{count + 1}",
        )
        return screen.model_copy(update={"widgets": screen.widgets + (widget,)})

    return edit_screen(project, screen_id, _add)


def update_widgets(project: Project, screen_id: str, updates: Iterable[WidgetChanges]) -> Project:
    """Apply partial changes to several widgets as one edit.

    Each change set is a shallow merge, with ``style`` merged one level
    deeper. Ids missing from the screen are skipped. If any widget would
    break a field constraint or move to a layer the screen does not have,
    the whole edit is rejected.
    """
    changes_by_id: dict[str, dict[str, Any]] = {}
    for widget_id, changes in updates:
        changes_by_id.setdefault(widget_id, {}).update(changes)

    def _update(screen: Screen) -> Screen:
        for changes in changes_by_id.values():
            if "layer_id" in changes and screen.layer(changes["layer_id"]) is None:
                logger.debug(f"Widget update rejected: unknown layer '{changes['layer_id']}'")
                return screen
        try:
            widgets = tuple(
                w.with_changes(changes_by_id[w.id]) if w.id in changes_by_id else w
                for w in screen.widgets
            )
        except ValidationError as e:
            logger.debug(f"Widget update rejected: {e.error_count()} invalid field(s)")
            return screen
        if all(a is b for a, b in zip(widgets, screen.widgets)):
            return screen
        updated = screen.model_copy(update={"widgets": widgets})
        if any("group_id" in c for c in changes_by_id.values()):
            updated = selection_ops.dissolve_singleton_groups(updated)
        return updated

    return edit_screen(project, screen_id, _update)


def delete_widgets(project: Project, screen_id: str, ids: Iterable[str]) -> Project:
    """Remove widgets; groups left with a single member are dissolved."""
    doomed = set(ids)

    def _delete(screen: Screen) -> Screen:
        widgets = tuple(w for w in screen.widgets if w.id not in doomed)
        if len(widgets) == len(screen.widgets):
            return screen
        trimmed = screen.model_copy(update={"widgets": widgets})
        return selection_ops.dissolve_singleton_groups(trimmed)

    return edit_screen(project, screen_id, _delete)


def group_widgets(project: Project, screen_id: str, ids: Iterable[str], group_id: str) -> Project:
    ids = tuple(ids)
    return edit_screen(
        project, screen_id, lambda s: selection_ops.group_widgets(s, ids, group_id)
    )


def ungroup_widgets(project: Project, screen_id: str, ids: Iterable[str]) -> Project:
    ids = tuple(ids)
    return edit_screen(project, screen_id, lambda s: selection_ops.ungroup_widgets(s, ids))


def arrange_widgets(
    project: Project, screen_id: str, ids: Iterable[str], action: ArrangeAction | str
) -> Project:
    ids = tuple(ids)
    return edit_screen(project, screen_id, lambda s: layer_ops.arrange_widgets(s, ids, action))


# =============================================================================
# Events
# =============================================================================


def add_event(project: Project, screen_id: str, widget_id: str, event: WidgetEvent) -> Project:
    """Append an event binding to a widget."""

    def _add(screen: Screen) -> Screen:
        widget = screen.widget(widget_id)
        if widget is None:
            return screen
        return update_screen_widget(screen, widget.with_changes({"events": widget.events + (event,)}))

    return edit_screen(project, screen_id, _add)


def remove_event(project: Project, screen_id: str, widget_id: str, event_id: str) -> Project:
    """Remove an event binding from a widget."""

    def _remove(screen: Screen) -> Screen:
        widget = screen.widget(widget_id)
        if widget is None or all(e.id != event_id for e in widget.events):
            return screen
        events = tuple(e for e in widget.events if e.id != event_id)
        return update_screen_widget(screen, widget.with_changes({"events": events}))

    return edit_screen(project, screen_id, _remove)


# =============================================================================
# Layers
# =============================================================================


def add_layer(
    project: Project,
    screen_id: str,
    layer_id: str,
    name: str | None = None,
    max_layers: int = MAX_LAYERS,
) -> Project:
    return edit_screen(
        project, screen_id, lambda s: layer_ops.add_layer(s, layer_id, name, max_layers)
    )


def delete_layer(project: Project, screen_id: str, layer_id: str) -> Project:
    return edit_screen(project, screen_id, lambda s: layer_ops.delete_layer(s, layer_id))


def rename_layer(project: Project, screen_id: str, layer_id: str, name: str) -> Project:
    return edit_screen(
        project, screen_id, lambda s: layer_ops.update_layer(s, layer_id, name=name)
    )


def reorder_layer(
    project: Project,
    screen_id: str,
    layer_id: str,
    target_id: str,
    position: str | None = None,
) -> Project:
    return edit_screen(
        project,
        screen_id,
        lambda s: layer_ops.reorder_layer(s, layer_id, target_id, position),
    )


def toggle_layer_visible(project: Project, screen_id: str, layer_id: str) -> Project:
    return edit_screen(project, screen_id, lambda s: layer_ops.toggle_layer_visible(s, layer_id))


def toggle_layer_locked(project: Project, screen_id: str, layer_id: str) -> Project:
    return edit_screen(project, screen_id, lambda s: layer_ops.toggle_layer_locked(s, layer_id))


# =============================================================================
# Screens
# =============================================================================


def add_screen(
    project: Project, screen_id: str, layer_id: str, name: str | None = None
) -> Project:
    """Append a screen with one base layer and the default background."""
    if project.screen(screen_id) is not None:
        logger.debug(f"Add screen rejected: '{screen_id}' already exists")
        return project
    screen = Screen(
        id=screen_id,
        name=name or f"Screen {len(project.screens) + 1}",
        background_color=project.settings.default_background_color,
        layers=(Layer(id=layer_id, name="Base Layer"),),
    )
    return project.model_copy(update={"screens": project.screens + (screen,)})


def delete_screen(project: Project, screen_id: str) -> Project:
    """Remove a screen. The only screen of a project cannot be deleted."""
    if project.screen(screen_id) is None:
        return project
    if len(project.screens) <= 1:
        logger.debug("Delete screen rejected: project needs at least one screen")
        return project
    screens = tuple(s for s in project.screens if s.id != screen_id)
    return project.model_copy(update={"screens": screens})


def update_screen(project: Project, screen_id: str, **changes) -> Project:
    """Set the name or background colour of a screen."""
    known = {k: v for k, v in changes.items() if k in ("name", "background_color")}

    def _update(screen: Screen) -> Screen:
        if all(getattr(screen, k) == v for k, v in known.items()):
            return screen
        try:
            return screen.revised(known)
        except ValidationError as e:
            logger.debug(f"Screen update rejected: {e.error_count()} invalid field(s)")
            return screen

    return edit_screen(project, screen_id, _update)


# =============================================================================
# Styles, themes and settings
# =============================================================================


def apply_style_preset(
    project: Project, screen_id: str, ids: Iterable[str], preset_id: str
) -> Project:
    """Copy a preset's style fields onto widgets, keeping fields it leaves unset."""
    preset = project.preset(preset_id)
    if preset is None:
        logger.debug(f"Apply preset rejected: unknown preset '{preset_id}'")
        return project
    return update_widgets(project, screen_id, [(wid, {"style": preset.style}) for wid in ids])


def save_style_preset(project: Project, preset: StylePreset) -> Project:
    """Add a preset, or replace the one with the same id."""
    existing = project.preset(preset.id)
    if existing == preset:
        return project
    if existing is None:
        presets = project.style_presets + (preset,)
    else:
        presets = tuple(preset if p.id == preset.id else p for p in project.style_presets)
    return project.model_copy(update={"style_presets": presets})


def delete_style_preset(project: Project, preset_id: str) -> Project:
    if project.preset(preset_id) is None:
        return project
    presets = tuple(p for p in project.style_presets if p.id != preset_id)
    return project.model_copy(update={"style_presets": presets})


def apply_theme(project: Project, theme_id: str) -> Project:
    """Restyle the whole project with a named theme.

    Sets the theme and default background in the settings, the background of
    every screen, and the type-specific colours of every widget. Screens and
    widgets the theme does not change are kept as they are.
    """
    theme = PROJECT_THEMES.get(theme_id)
    if theme is None:
        logger.debug(f"Apply theme rejected: unknown theme '{theme_id}'")
        return project

    background = theme.colors.background
    settings = project.settings
    if settings.theme != theme_id or settings.default_background_color != background:
        settings = settings.model_copy(
            update={"theme": theme_id, "default_background_color": background}
        )

    screens = []
    for screen in project.screens:
        widgets = tuple(
            w.with_changes({"style": theme_style(w.type, theme)}) for w in screen.widgets
        )
        if screen.background_color == background and all(
            a is b for a, b in zip(widgets, screen.widgets)
        ):
            screens.append(screen)
        else:
            screens.append(
                screen.model_copy(update={"background_color": background, "widgets": widgets})
            )

    if settings is project.settings and all(a is b for a, b in zip(screens, project.screens)):
        return project
    return project.model_copy(update={"settings": settings, "screens": tuple(screens)})


def update_settings(project: Project, **changes) -> Project:
    """Change canvas settings. Invalid values reject the whole edit."""
    known = {k: v for k, v in changes.items() if k in CanvasSettings.model_fields}
    current = project.settings
    if all(getattr(current, k) == v for k, v in known.items()):
        return project
    try:
        settings = CanvasSettings.model_validate({**current.model_dump(), **known})
    except ValidationError as e:
        logger.debug(f"Settings update rejected: {e.error_count()} invalid field(s)")
        return project
    return project.model_copy(update={"settings": settings})


def set_target_device(project: Project, device_id: str, rotation: int | None = None) -> Project:
    """Select a target board; the canvas takes its (rotated) resolution."""
    device = DEVICE_PRESETS.get(device_id)
    if device is None:
        logger.debug(f"Select device rejected: unknown device '{device_id}'")
        return project
    rotation = project.settings.rotation if rotation is None else rotation
    width, height = device_resolution(device, rotation)
    return update_settings(
        project, target_device=device_id, rotation=rotation, width=width, height=height
    )


__all__ = [
    "DEFAULT_ORIGIN",
    "STACK_OFFSET",
    "WidgetChanges",
    "edit_screen",
    "add_widget",
    "update_widgets",
    "delete_widgets",
    "group_widgets",
    "ungroup_widgets",
    "arrange_widgets",
    "add_event",
    "remove_event",
    "update_screen_widget",
    "add_layer",
    "delete_layer",
    "rename_layer",
    "reorder_layer",
    "toggle_layer_visible",
    "toggle_layer_locked",
    "add_screen",
    "delete_screen",
    "update_screen",
    "apply_style_preset",
    "save_style_preset",
    "delete_style_preset",
    "apply_theme",
    "update_settings",
    "set_target_device",
]
