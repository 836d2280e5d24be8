"""The editor state container.

``Editor`` owns the history of the project document plus the transient
editing state around it: the current screen, the active layer, the selection
and an in-progress drag. It is the single writer of the document; every
method that edits it goes through ``HistoryEngine.set`` with a label for the
history menu.
"""

import logging
from typing import Any, Callable, Iterable, Mapping

from studio.config import get_history_limit, get_max_layers
from studio.drag import (
    Dragging,
    DragEngine,
    PointerDown,
    PointerMove,
    PointerUp,
    ResizeDown,
    Resizing,
    drop_position,
    nudge_updates,
)
from studio.history import HistoryEngine
from studio.layers import ArrangeAction
from studio.model import (
    EventAction,
    EventTrigger,
    SAMPLE_PROJECTS,
    Project,
    Screen,
    StylePreset,
    WidgetEvent,
    WidgetStyle,
    WidgetType,
    new_id,
)
from studio.selection import Selection, prune_selection, resolve_selection

from . import lib

logger = logging.getLogger(__name__)

NUDGE_STEP = 1
NUDGE_STEP_LARGE = 10


class Editor:
    """Owned, versioned editing state with a single writer entry point.

    Example:
        >>> editor = Editor()
        >>> widget_id = editor.add_widget(WidgetType.BUTTON)
        >>> editor.history.labels()
        ['Add Button']
        >>> editor.undo()
        True
        >>> editor.screen.widgets
        ()

    Args:
        project: Initial document. Defaults to ``Project.create()``.
        history_limit: Maximum undo depth; None reads the environment.
        max_layers: Per-screen layer limit; None reads the environment.
        grid: Snap grid unit; None reads the environment.
    """

    def __init__(
        self,
        project: Project | None = None,
        *,
        history_limit: int | None = None,
        max_layers: int | None = None,
        grid: int | None = None,
    ):
        project = project or Project.create()
        self.history: HistoryEngine[Project] = HistoryEngine(
            project, limit=get_history_limit(history_limit)
        )
        self.max_layers = get_max_layers(max_layers)
        self.drag = DragEngine(grid)
        self.selection: Selection = ()
        self.current_screen_id = project.screens[0].id
        self.active_layer_id = project.screens[0].layers[0].id
        # Document being dragged, not yet recorded in history
        self._live: Project | None = None

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def project(self) -> Project:
        """The document as displayed, including an uncommitted drag."""
        return self._live if self._live is not None else self.history.present

    @property
    def screen(self) -> Screen:
        """The current screen."""
        screen = self.project.screen(self.current_screen_id)
        return screen if screen is not None else self.project.screens[0]

    @property
    def zoom(self) -> float:
        return self.drag.zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        self.drag.zoom = value

    @property
    def selected_widgets(self):
        return tuple(w for w in (self.screen.widget(i) for i in self.selection) if w)

    # =========================================================================
    # Internals
    # =========================================================================

    def _commit(self, fn: Callable[[Project], Project], label: str) -> bool:
        """Record one labeled edit."""
        self._flush_drag()
        changed = self.history.set(fn, label)
        if not changed:
            logger.debug(f"'{label}' left the document unchanged")
        return changed

    def _flush_drag(self) -> None:
        """Record the live drag document, keeping the gesture going."""
        if self._live is None:
            return
        live, self._live = self._live, None
        if live == self.history.present:
            # Pointer came back to where it started
            return
        label = "Resize Widget" if isinstance(self.drag.state, Resizing) else "Move Widget"
        self.history.set(live, label)

    def _repair(self) -> None:
        """Point screen, layer and selection at things that exist."""
        project = self.project
        screen = project.screen(self.current_screen_id)
        if screen is None:
            screen = project.screens[0]
            self.current_screen_id = screen.id
        if screen.layer(self.active_layer_id) is None:
            self.active_layer_id = screen.layers[-1].id
        self.selection = prune_selection(screen, self.selection)

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> bool:
        self.cancel_drag()
        changed = self.history.undo()
        self._repair()
        return changed

    def redo(self) -> bool:
        self.cancel_drag()
        changed = self.history.redo()
        self._repair()
        return changed

    def jump_to(self, index: int) -> bool:
        self.cancel_drag()
        changed = self.history.jump_to(index)
        self._repair()
        return changed

    def load(self, project: Project) -> None:
        """Replace the document and forget its history (new/open project)."""
        self.cancel_drag()
        self.history.reset(project)
        self.current_screen_id = project.screens[0].id
        self.active_layer_id = project.screens[0].layers[0].id
        self.selection = ()

    def load_sample(self, sample_id: str) -> bool:
        """Open a built-in sample project in place of the current one."""
        sample = SAMPLE_PROJECTS.get(sample_id)
        if sample is None:
            logger.debug(f"Load sample rejected: unknown sample '{sample_id}'")
            return False
        self.load(sample.project)
        logger.info(f"Loaded sample '{sample.name}'")
        return True

    # =========================================================================
    # Navigation and selection (not recorded in history)
    # =========================================================================

    def switch_screen(self, screen_id: str) -> bool:
        screen = self.project.screen(screen_id)
        if screen is None:
            return False
        self.current_screen_id = screen_id
        self.active_layer_id = screen.layers[0].id
        self.selection = ()
        return True

    def set_active_layer(self, layer_id: str) -> bool:
        if self.screen.layer(layer_id) is None:
            return False
        self.active_layer_id = layer_id
        return True

    def select(self, ids: Iterable[str]) -> Selection:
        """Replace the selection, dropping ids that cannot be selected."""
        self.selection = prune_selection(self.screen, tuple(dict.fromkeys(ids)))
        return self.selection

    def click(self, widget_id: str | None, additive: bool = False) -> Selection:
        """Resolve the effective selection for a click, without dragging."""
        self.selection = resolve_selection(self.screen, self.selection, widget_id, additive)
        return self.selection

    # =========================================================================
    # Pointer gestures
    # =========================================================================

    def pointer_down(self, widget_id: str | None, x: float, y: float, additive: bool = False) -> Selection:
        """Resolve the selection and start dragging it.

        The effective selection is computed before the drag captures its
        reference positions, so a group moves as one from the first move.
        """
        self.cancel_drag()
        selection = self.click(widget_id, additive)
        if widget_id is not None and widget_id in selection:
            self.drag.feed(PointerDown(x, y, selection), self.screen)
        return selection

    def resize_down(self, widget_id: str, handle: str, x: float, y: float) -> bool:
        """Start resizing a widget from one of its handles."""
        self.cancel_drag()
        self.drag.feed(ResizeDown(x, y, widget_id, handle), self.screen)
        if self.drag.is_active and widget_id not in self.selection:
            self.selection = (widget_id,)
        return self.drag.is_active

    def pointer_move(self, x: float, y: float, modifier: bool = False) -> bool:
        """Apply one pointer move to the live document as a single batch."""
        if not self.drag.is_active:
            return False
        updates = self.drag.feed(PointerMove(x, y, modifier), self.screen)
        if not updates:
            return False
        moved = lib.update_widgets(self.project, self.current_screen_id, updates)
        if moved is self.project:
            return False
        self._live = moved
        return True

    def pointer_up(self) -> bool:
        """Finish the gesture, recording it as one history step."""
        was_dragging = isinstance(self.drag.state, (Dragging, Resizing))
        before = self.history.present
        self._flush_drag()
        self.drag.feed(PointerUp(), self.screen)
        return was_dragging and self.history.present is not before

    def cancel_drag(self) -> None:
        """Abort a gesture, discarding its uncommitted moves."""
        self._live = None
        self.drag.cancel()

    def drop(
        self,
        widget_type: WidgetType | str,
        pointer: tuple[float, float],
        canvas_origin: tuple[float, float] = (0, 0),
    ) -> str | None:
        """Add a widget dragged in from the palette at the drop point."""
        x, y = drop_position(pointer, canvas_origin, self.zoom, self.drag.grid)
        return self.add_widget(widget_type, x, y)

    def nudge(self, dx: int, dy: int, large: bool = False) -> bool:
        """Move the selection by keyboard; locked layers stay put."""
        step = NUDGE_STEP_LARGE if large else NUDGE_STEP
        updates = nudge_updates(self.screen, self.selection, dx * step, dy * step)
        if not updates:
            return False
        return self._commit(
            lambda p: lib.update_widgets(p, self.current_screen_id, updates), "Nudge"
        )

    # =========================================================================
    # Widgets
    # =========================================================================

    def add_widget(
        self, widget_type: WidgetType | str, x: int | None = None, y: int | None = None
    ) -> str | None:
        """Add a widget to the active layer and select it.

        Returns:
            The new widget id, or None when the edit was rejected.
        """
        widget_type = WidgetType(widget_type)
        widget_id = new_id("widget")
        changed = self._commit(
            lambda p: lib.add_widget(
                p, self.current_screen_id, self.active_layer_id, widget_type, widget_id, x, y
            ),
            f"Add {widget_type.display_name}",
        )
        if not changed:
            return None
        self.selection = (widget_id,)
        return widget_id

    def update_widget(self, widget_id: str, changes: Mapping[str, Any]) -> bool:
        return self.update_widgets([(widget_id, changes)])

    def update_widgets(self, updates: Iterable[lib.WidgetChanges]) -> bool:
        updates = list(updates)
        label = "Update Widget" if len(updates) == 1 else "Update Widgets"
        changed = self._commit(
            lambda p: lib.update_widgets(p, self.current_screen_id, updates), label
        )
        self._repair()
        return changed

    def delete_widgets(self, ids: Iterable[str]) -> bool:
        ids = tuple(ids)
        label = "Delete Widget" if len(ids) == 1 else "Delete Widgets"
        changed = self._commit(lambda p: lib.delete_widgets(p, self.current_screen_id, ids), label)
        self.selection = tuple(i for i in self.selection if i not in ids)
        return changed

    def delete_selected(self) -> bool:
        return self.delete_widgets(self.selection)

    def group_selected(self) -> bool:
        group_id = new_id("group")
        ids = self.selection
        return self._commit(
            lambda p: lib.group_widgets(p, self.current_screen_id, ids, group_id), "Group"
        )

    def ungroup_selected(self) -> bool:
        ids = self.selection
        return self._commit(lambda p: lib.ungroup_widgets(p, self.current_screen_id, ids), "Ungroup")

    def arrange(self, action: ArrangeAction | str) -> bool:
        action = ArrangeAction(action)
        ids = self.selection
        return self._commit(
            lambda p: lib.arrange_widgets(p, self.current_screen_id, ids, action), action.label
        )

    # =========================================================================
    # Events
    # =========================================================================

    def add_event(
        self,
        widget_id: str,
        trigger: EventTrigger | str = EventTrigger.CLICKED,
        action: EventAction | str = EventAction.NAVIGATE,
        target_screen_id: str | None = None,
        custom_code: str | None = None,
    ) -> str | None:
        event = WidgetEvent(
            id=new_id("evt"),
            trigger=EventTrigger(trigger),
            action=EventAction(action),
            target_screen_id=target_screen_id,
            custom_code=custom_code,
        )
        changed = self._commit(
            lambda p: lib.add_event(p, self.current_screen_id, widget_id, event), "Add Event"
        )
        return event.id if changed else None

    def remove_event(self, widget_id: str, event_id: str) -> bool:
        return self._commit(
            lambda p: lib.remove_event(p, self.current_screen_id, widget_id, event_id),
            "Remove Event",
        )

    # =========================================================================
    # Layers
    # =========================================================================

    def add_layer(self, name: str | None = None) -> str | None:
        """Add a layer on top and make it active."""
        layer_id = new_id("layer")
        changed = self._commit(
            lambda p: lib.add_layer(p, self.current_screen_id, layer_id, name, self.max_layers),
            "Add Layer",
        )
        if not changed:
            return None
        self.active_layer_id = layer_id
        return layer_id

    def delete_layer(self, layer_id: str) -> bool:
        """Delete a layer and its widgets; the topmost remaining layer becomes active."""
        changed = self._commit(
            lambda p: lib.delete_layer(p, self.current_screen_id, layer_id), "Delete Layer"
        )
        if changed and self.active_layer_id == layer_id:
            self.active_layer_id = self.screen.layers[-1].id
        self._repair()
        return changed

    def rename_layer(self, layer_id: str, name: str) -> bool:
        return self._commit(
            lambda p: lib.rename_layer(p, self.current_screen_id, layer_id, name), "Rename Layer"
        )

    def reorder_layer(self, layer_id: str, target_id: str, position: str | None = None) -> bool:
        return self._commit(
            lambda p: lib.reorder_layer(p, self.current_screen_id, layer_id, target_id, position),
            "Reorder Layers",
        )

    def toggle_layer_visible(self, layer_id: str) -> bool:
        """Show or hide a layer; hidden widgets leave the selection."""
        changed = self._commit(
            lambda p: lib.toggle_layer_visible(p, self.current_screen_id, layer_id),
            "Toggle Layer Visibility",
        )
        self._repair()
        return changed

    def toggle_layer_lock(self, layer_id: str) -> bool:
        """Lock or unlock a layer; locked widgets leave the selection."""
        changed = self._commit(
            lambda p: lib.toggle_layer_locked(p, self.current_screen_id, layer_id),
            "Toggle Layer Lock",
        )
        self._repair()
        return changed

    # =========================================================================
    # Screens
    # =========================================================================

    def add_screen(self, name: str | None = None) -> str | None:
        """Add a screen and switch to it."""
        screen_id = new_id("screen")
        layer_id = new_id("layer")
        changed = self._commit(lambda p: lib.add_screen(p, screen_id, layer_id, name), "Add Screen")
        if not changed:
            return None
        self.switch_screen(screen_id)
        return screen_id

    def delete_screen(self, screen_id: str) -> bool:
        """Delete a screen; deleting the current one switches to the first left."""
        changed = self._commit(lambda p: lib.delete_screen(p, screen_id), "Delete Screen")
        if changed and self.current_screen_id == screen_id:
            self.switch_screen(self.project.screens[0].id)
        return changed

    def update_screen(self, **changes) -> bool:
        return self._commit(
            lambda p: lib.update_screen(p, self.current_screen_id, **changes), "Update Screen"
        )

    # =========================================================================
    # Styles, themes and settings
    # =========================================================================

    def apply_theme(self, theme_id: str) -> bool:
        return self._commit(lambda p: lib.apply_theme(p, theme_id), "Apply Theme")

    def apply_style_preset(self, preset_id: str, ids: Iterable[str] | None = None) -> bool:
        ids = self.selection if ids is None else tuple(ids)
        return self._commit(
            lambda p: lib.apply_style_preset(p, self.current_screen_id, ids, preset_id),
            "Apply Preset",
        )

    def save_style_preset(self, name: str, style: WidgetStyle | None = None) -> str | None:
        """Save a style, by default the first selected widget's, as a preset."""
        if style is None:
            widgets = self.selected_widgets
            if not widgets:
                return None
            style = widgets[0].style
        preset = StylePreset(id=new_id("preset"), name=name, style=style)
        changed = self._commit(lambda p: lib.save_style_preset(p, preset), "Save Preset")
        return preset.id if changed else None

    def delete_style_preset(self, preset_id: str) -> bool:
        return self._commit(lambda p: lib.delete_style_preset(p, preset_id), "Delete Preset")

    def update_settings(self, **changes) -> bool:
        return self._commit(lambda p: lib.update_settings(p, **changes), "Update Settings")

    def set_target_device(self, device_id: str, rotation: int | None = None) -> bool:
        return self._commit(
            lambda p: lib.set_target_device(p, device_id, rotation), "Select Device"
        )


__all__ = ["Editor", "NUDGE_STEP", "NUDGE_STEP_LARGE"]
