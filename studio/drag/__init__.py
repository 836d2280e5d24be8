"""Pointer-driven move and resize of widgets.

Example usage:
    >>> from studio.drag import PointerDown, PointerMove, IDLE, transition
    >>> state, _ = transition(IDLE, PointerDown(0, 0, ("w1",)), screen)
    >>> state, updates = transition(state, PointerMove(13, -2), screen)
"""

from .lib import (
    ASPECT_LOCKED_TYPES,
    GRID_SIZE,
    IDLE,
    MIN_SIZE,
    RESIZE_HANDLES,
    DragEngine,
    DragEvent,
    Dragging,
    DragState,
    Idle,
    PointerDown,
    PointerMove,
    PointerUp,
    ResizeDown,
    Resizing,
    WidgetUpdate,
    drop_position,
    nudge_updates,
    resize_box,
    snap,
    transition,
)

__all__ = [
    "GRID_SIZE",
    "MIN_SIZE",
    "ASPECT_LOCKED_TYPES",
    "RESIZE_HANDLES",
    "WidgetUpdate",
    "snap",
    # Events
    "PointerDown",
    "ResizeDown",
    "PointerMove",
    "PointerUp",
    "DragEvent",
    # States
    "Idle",
    "Dragging",
    "Resizing",
    "DragState",
    "IDLE",
    # Engine
    "transition",
    "resize_box",
    "DragEngine",
    "drop_position",
    "nudge_updates",
]
