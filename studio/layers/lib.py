"""Layer management and widget stacking order.

Paint order across a screen is layer order (bottom to top) combined with the
order of each layer's widgets (bottom to top). Arrange actions only permute
widgets inside their own layer; widgets never cross a layer boundary here.

All functions are pure: they take a Screen and return a Screen, returning
the very same object when an action is rejected or changes nothing.
"""

import logging
from enum import Enum
from typing import Iterable, Literal

from pydantic import ValidationError

from studio.model import MAX_LAYERS, Layer, Screen, Widget
from studio.selection import dissolve_singleton_groups

logger = logging.getLogger(__name__)


class ArrangeAction(str, Enum):
    """Stacking changes for selected widgets within their layer."""

    FRONT = "front"
    BACK = "back"
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def label(self) -> str:
        return {
            ArrangeAction.FRONT: "Bring to Front",
            ArrangeAction.BACK: "Send to Back",
            ArrangeAction.FORWARD: "Bring Forward",
            ArrangeAction.BACKWARD: "Send Backward",
        }[self]


# =============================================================================
# Layer list operations
# =============================================================================


def add_layer(
    screen: Screen,
    layer_id: str,
    name: str | None = None,
    max_layers: int = MAX_LAYERS,
) -> Screen:
    """Append a new layer on top. Rejected at the layer limit."""
    if len(screen.layers) >= max_layers:
        logger.debug(f"Add layer rejected: '{screen.name}' already has {max_layers}")
        return screen
    layer = Layer(id=layer_id, name=name or f"Layer {len(screen.layers) + 1}")
    return screen.model_copy(update={"layers": screen.layers + (layer,)})


def delete_layer(screen: Screen, layer_id: str) -> Screen:
    """Remove a layer and the widgets drawn on it.

    Groups spanning layers lose the removed members and are dissolved when
    one member is left. Rejected for the last remaining layer or an
    unknown id.
    """
    if screen.layer(layer_id) is None:
        return screen
    if len(screen.layers) <= 1:
        logger.debug(f"Delete layer rejected: '{layer_id}' is the only layer")
        return screen

    layers = tuple(l for l in screen.layers if l.id != layer_id)
    widgets = tuple(w for w in screen.widgets if w.layer_id != layer_id)
    return dissolve_singleton_groups(
        screen.model_copy(update={"layers": layers, "widgets": widgets})
    )


def reorder_layer(
    screen: Screen,
    layer_id: str,
    target_id: str,
    position: Literal["before", "after"] | None = None,
) -> Screen:
    """Move a layer next to a target layer.

    Args:
        screen: Screen owning both layers.
        layer_id: Layer being moved.
        target_id: Layer it is dropped on.
        position: Place it immediately before or after the target. None takes
            the target's slot, which lands after the target when moving up the
            list and before it when moving down.

    Widgets keep their layer reference and are untouched.
    """
    ids = [l.id for l in screen.layers]
    if layer_id not in ids or target_id not in ids or layer_id == target_id:
        return screen

    layers = list(screen.layers)
    from_index = ids.index(layer_id)
    moved = layers.pop(from_index)

    if position is None:
        insert_at = ids.index(target_id)
    else:
        target_index = next(i for i, l in enumerate(layers) if l.id == target_id)
        insert_at = target_index if position == "before" else target_index + 1

    layers.insert(insert_at, moved)
    if [l.id for l in layers] == ids:
        return screen
    return screen.model_copy(update={"layers": tuple(layers)})


def update_layer(screen: Screen, layer_id: str, **changes) -> Screen:
    """Set name, visible or locked on one layer."""
    layer = screen.layer(layer_id)
    if layer is None:
        return screen
    known = {k: v for k, v in changes.items() if k in ("name", "visible", "locked")}
    if all(getattr(layer, k) == v for k, v in known.items()):
        return screen
    try:
        updated = layer.revised(known)
    except ValidationError as e:
        logger.debug(f"Layer update rejected for '{layer_id}': {e.error_count()} error(s)")
        return screen
    layers = tuple(updated if l.id == layer_id else l for l in screen.layers)
    return screen.model_copy(update={"layers": layers})


def toggle_layer_visible(screen: Screen, layer_id: str) -> Screen:
    layer = screen.layer(layer_id)
    if layer is None:
        return screen
    return update_layer(screen, layer_id, visible=not layer.visible)


def toggle_layer_locked(screen: Screen, layer_id: str) -> Screen:
    layer = screen.layer(layer_id)
    if layer is None:
        return screen
    return update_layer(screen, layer_id, locked=not layer.locked)


# =============================================================================
# Widget stacking
# =============================================================================


def _permute(sub: list[Widget], selected: set[str], action: ArrangeAction) -> list[Widget]:
    if action == ArrangeAction.FRONT:
        return [w for w in sub if w.id not in selected] + [w for w in sub if w.id in selected]
    if action == ArrangeAction.BACK:
        return [w for w in sub if w.id in selected] + [w for w in sub if w.id not in selected]

    sub = list(sub)
    if action == ArrangeAction.FORWARD:
        for i in range(len(sub) - 2, -1, -1):
            if sub[i].id in selected and sub[i + 1].id not in selected:
                sub[i], sub[i + 1] = sub[i + 1], sub[i]
    else:
        for i in range(1, len(sub)):
            if sub[i].id in selected and sub[i - 1].id not in selected:
                sub[i], sub[i - 1] = sub[i - 1], sub[i]
    return sub


def arrange_widgets(screen: Screen, ids: Iterable[str], action: ArrangeAction | str) -> Screen:
    """Change the stacking order of widgets inside their own layers.

    FRONT and BACK move the widgets to the top or bottom of their layer;
    FORWARD and BACKWARD swap each with its immediate neighbour. Several
    selected widgets keep their relative order.
    """
    action = ArrangeAction(action)
    selected = set(ids)
    affected = {w.layer_id for w in screen.widgets if w.id in selected}
    if not affected:
        return screen

    widgets = list(screen.widgets)
    for layer_id in affected:
        slots = [i for i, w in enumerate(widgets) if w.layer_id == layer_id]
        permuted = _permute([widgets[i] for i in slots], selected, action)
        for slot, widget in zip(slots, permuted):
            widgets[slot] = widget

    if all(a is b for a, b in zip(widgets, screen.widgets)):
        return screen
    return screen.model_copy(update={"widgets": tuple(widgets)})


def render_order(screen: Screen, visible_only: bool = False) -> tuple[Widget, ...]:
    """Full paint order of a screen, bottom to top.

    Widgets referencing a missing layer are skipped.
    """
    ordered: list[Widget] = []
    for layer in screen.layers:
        if visible_only and not layer.visible:
            continue
        ordered.extend(screen.widgets_on(layer.id))
    return tuple(ordered)


def z_index(screen: Screen, widget_id: str) -> int | None:
    """Position of a widget in the paint order; None when not painted."""
    for index, widget in enumerate(render_order(screen)):
        if widget.id == widget_id:
            return index
    return None


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
