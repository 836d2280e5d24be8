"""Layer management and z-order for screens."""

from .lib import (
    ArrangeAction,
    add_layer,
    arrange_widgets,
    delete_layer,
    render_order,
    reorder_layer,
    toggle_layer_locked,
    toggle_layer_visible,
    update_layer,
    z_index,
)

__all__ = [
    "ArrangeAction",
    "add_layer",
    "delete_layer",
    "reorder_layer",
    "update_layer",
    "toggle_layer_visible",
    "toggle_layer_locked",
    "arrange_widgets",
    "render_order",
    "z_index",
]
