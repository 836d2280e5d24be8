"""Document mutation façade and the editor state container.

Example usage:
    >>> from studio.editor import Editor
    >>> editor = Editor()
    >>> first = editor.add_widget("lv_btn")
    >>> second = editor.add_widget("lv_btn")
    >>> _ = editor.select([first, second])
    >>> editor.group_selected()
    True
    >>> editor.history.labels()
    ['Add Button', 'Add Button', 'Group']
"""

from .lib import (
    DEFAULT_ORIGIN,
    STACK_OFFSET,
    WidgetChanges,
    add_event,
    add_layer,
    add_screen,
    add_widget,
    apply_style_preset,
    apply_theme,
    arrange_widgets,
    delete_layer,
    delete_screen,
    delete_style_preset,
    delete_widgets,
    edit_screen,
    group_widgets,
    remove_event,
    rename_layer,
    reorder_layer,
    save_style_preset,
    set_target_device,
    toggle_layer_locked,
    toggle_layer_visible,
    ungroup_widgets,
    update_screen,
    update_screen_widget,
    update_settings,
    update_widgets,
)
from .state import NUDGE_STEP, NUDGE_STEP_LARGE, Editor

__all__ = [
    # State container
    "Editor",
    "NUDGE_STEP",
    "NUDGE_STEP_LARGE",
    # Mutations
    "DEFAULT_ORIGIN",
    "STACK_OFFSET",
    "WidgetChanges",
    "edit_screen",
    "update_screen_widget",
    "add_widget",
    "update_widgets",
    "delete_widgets",
    "group_widgets",
    "ungroup_widgets",
    "arrange_widgets",
    "add_event",
    "remove_event",
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
