"""Pointer-driven move and resize of widgets.

The engine is an explicit state machine, Idle -> Dragging/Resizing -> Idle,
driven by discrete input events through the pure ``transition`` function.
The host's input loop feeds events in; the engine never touches the document
itself. It only returns batched widget updates for the caller to apply as
one document transition per pointer-move.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Union

from studio.config import get_grid_size
from studio.model import Screen, WidgetType

logger = logging.getLogger(__name__)

GRID_SIZE = 10
MIN_SIZE = 10

# Widget types that always keep their aspect ratio while resizing
ASPECT_LOCKED_TYPES = frozenset({WidgetType.ICON, WidgetType.IMAGE})

RESIZE_HANDLES = frozenset({"n", "s", "e", "w", "ne", "nw", "se", "sw"})

WidgetUpdate = tuple[str, dict[str, Any]]


def snap(value: float, grid: int = GRID_SIZE) -> int:
    """Snap to the nearest multiple of ``grid``, halves rounding away from zero.

    >>> snap(116), snap(95), snap(-15)
    (120, 100, -20)
    """
    steps = math.floor(abs(value) / grid + 0.5)
    return int(math.copysign(steps * grid, value)) if steps else 0


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class PointerDown:
    """Pointer pressed on a widget; ``widget_ids`` is the effective selection."""

    x: float
    y: float
    widget_ids: tuple[str, ...]


@dataclass(frozen=True)
class ResizeDown:
    """Pointer pressed on one of a widget's resize handles."""

    x: float
    y: float
    widget_id: str
    handle: str


@dataclass(frozen=True)
class PointerMove:
    """Pointer moved; ``modifier`` (shift) locks the aspect ratio on resize."""

    x: float
    y: float
    modifier: bool = False


@dataclass(frozen=True)
class PointerUp:
    """Pointer released anywhere."""


DragEvent = Union[PointerDown, ResizeDown, PointerMove, PointerUp]


# =============================================================================
# States
# =============================================================================


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    """Move in progress.

    Attributes:
        start: Pointer position at pointer-down.
        origins: Position of every dragged widget at pointer-down.
    """

    start: tuple[float, float]
    origins: dict[str, tuple[int, int]] = field(default_factory=dict)


@dataclass(frozen=True)
class Resizing:
    """Resize of a single widget in progress.

    Attributes:
        start: Pointer position at pointer-down.
        widget_id: Widget being resized.
        handle: Compass direction of the grabbed handle.
        box: Widget geometry (x, y, width, height) at pointer-down.
        locked_aspect: Whether the widget type always keeps its ratio.
    """

    start: tuple[float, float]
    widget_id: str
    handle: str
    box: tuple[int, int, int, int]
    locked_aspect: bool = False


DragState = Union[Idle, Dragging, Resizing]

IDLE = Idle()


# =============================================================================
# Transition
# =============================================================================


def _begin_drag(event: PointerDown, screen: Screen) -> DragState:
    origins: dict[str, tuple[int, int]] = {}
    for widget_id in event.widget_ids:
        widget = screen.widget(widget_id)
        if widget is None or screen.is_locked(widget):
            continue
        origins[widget_id] = (widget.x, widget.y)
    if not origins:
        return IDLE
    logger.debug(f"Drag started for {len(origins)} widget(s)")
    return Dragging(start=(event.x, event.y), origins=origins)


def _begin_resize(event: ResizeDown, screen: Screen) -> DragState:
    widget = screen.widget(event.widget_id)
    if widget is None or screen.is_locked(widget) or event.handle not in RESIZE_HANDLES:
        return IDLE
    return Resizing(
        start=(event.x, event.y),
        widget_id=widget.id,
        handle=event.handle,
        box=(widget.x, widget.y, widget.width, widget.height),
        locked_aspect=widget.type in ASPECT_LOCKED_TYPES,
    )


def _move_updates(
    state: Dragging, event: PointerMove, screen: Screen, grid: int, zoom: float
) -> list[WidgetUpdate]:
    dx = (event.x - state.start[0]) / zoom
    dy = (event.y - state.start[1]) / zoom
    updates: list[WidgetUpdate] = []
    for widget_id, (x0, y0) in state.origins.items():
        # Widgets deleted mid-drag are dropped from the batch
        if screen.widget(widget_id) is None:
            continue
        updates.append((widget_id, {"x": snap(x0 + dx, grid), "y": snap(y0 + dy, grid)}))
    return updates


def resize_box(
    box: tuple[int, int, int, int],
    handle: str,
    dx: float,
    dy: float,
    lock_aspect: bool = False,
    grid: int = GRID_SIZE,
) -> tuple[int, int, int, int]:
    """Geometry after dragging ``handle`` by (dx, dy) canvas units.

    West and north handles move the origin so the opposite edge stays put.
    Sizes never drop below ``MIN_SIZE``. Position snaps to the grid; size
    snaps too unless the aspect ratio is locked, in which case it is rounded
    so the ratio is kept smoothly.
    """
    x0, y0, w0, h0 = box
    x, y, w, h = float(x0), float(y0), float(w0), float(h0)
    aspect = w0 / h0

    if "e" in handle:
        w = max(MIN_SIZE, w0 + dx)
    elif "w" in handle:
        applied = min(w0 - MIN_SIZE, dx)
        x = x0 + applied
        w = w0 - applied

    if "s" in handle:
        h = max(MIN_SIZE, h0 + dy)
    elif "n" in handle:
        applied = min(h0 - MIN_SIZE, dy)
        y = y0 + applied
        h = h0 - applied

    if lock_aspect:
        if len(handle) == 2:
            # Corners are driven by width
            locked_h = w / aspect
            if "n" in handle:
                y = y0 + (h0 - locked_h)
            h = locked_h
        elif handle in ("e", "w"):
            h = w / aspect
        else:
            w = h * aspect

    x, y = snap(x, grid), snap(y, grid)
    if lock_aspect:
        w, h = snap(w, 1), snap(h, 1)
    else:
        w, h = snap(w, grid), snap(h, grid)

    return x, y, max(MIN_SIZE, w), max(MIN_SIZE, h)


def _resize_updates(
    state: Resizing, event: PointerMove, screen: Screen, grid: int, zoom: float
) -> list[WidgetUpdate]:
    if screen.widget(state.widget_id) is None:
        return []
    dx = (event.x - state.start[0]) / zoom
    dy = (event.y - state.start[1]) / zoom
    x, y, w, h = resize_box(
        state.box,
        state.handle,
        dx,
        dy,
        lock_aspect=state.locked_aspect or event.modifier,
        grid=grid,
    )
    return [(state.widget_id, {"x": x, "y": y, "width": w, "height": h})]


def transition(
    state: DragState,
    event: DragEvent,
    screen: Screen,
    *,
    grid: int = GRID_SIZE,
    zoom: float = 1.0,
) -> tuple[DragState, list[WidgetUpdate]]:
    """Advance the drag state machine by one input event.

    Args:
        state: Current state.
        event: Input event.
        screen: Live screen, used to capture origins and skip deleted widgets.
        grid: Snap grid unit.
        zoom: Canvas zoom; pointer deltas are divided by it.

    Returns:
        The next state and the batched updates to apply (possibly empty).
    """
    if isinstance(event, PointerUp):
        return IDLE, []

    if isinstance(event, PointerDown):
        return _begin_drag(event, screen), []

    if isinstance(event, ResizeDown):
        return _begin_resize(event, screen), []

    if isinstance(state, Dragging):
        return state, _move_updates(state, event, screen, grid, zoom)

    if isinstance(state, Resizing):
        return state, _resize_updates(state, event, screen, grid, zoom)

    return state, []


class DragEngine:
    """Holds the drag state between events.

    Example:
        >>> engine = DragEngine(grid=10)  # w1 sits at (20, 20)
        >>> engine.feed(PointerDown(100, 100, ("w1",)), screen)
        []
        >>> engine.feed(PointerMove(125, 133), screen)
        [('w1', {'x': 50, 'y': 50})]

    Args:
        grid: Snap grid unit. Defaults to the configured grid size.
        zoom: Canvas zoom factor.
    """

    def __init__(self, grid: int | None = None, zoom: float = 1.0):
        self.grid = get_grid_size(grid)
        self.zoom = zoom
        self.state: DragState = IDLE

    @property
    def is_active(self) -> bool:
        return not isinstance(self.state, Idle)

    def feed(self, event: DragEvent, screen: Screen) -> list[WidgetUpdate]:
        """Apply one event and return the updates it produces."""
        self.state, updates = transition(
            self.state, event, screen, grid=self.grid, zoom=self.zoom
        )
        return updates

    def cancel(self) -> None:
        self.state = IDLE


# =============================================================================
# Palette drop and keyboard nudge
# =============================================================================


def drop_position(
    pointer: tuple[float, float],
    canvas_origin: tuple[float, float],
    zoom: float = 1.0,
    grid: int = GRID_SIZE,
) -> tuple[int, int]:
    """Canvas position for a palette drop, snapped to the grid."""
    x = (pointer[0] - canvas_origin[0]) / zoom
    y = (pointer[1] - canvas_origin[1]) / zoom
    return snap(x, grid), snap(y, grid)


def nudge_updates(
    screen: Screen, ids: Iterable[str], dx: int, dy: int
) -> list[WidgetUpdate]:
    """Keyboard moves for the selected widgets, skipping locked layers."""
    updates: list[WidgetUpdate] = []
    for widget_id in ids:
        widget = screen.widget(widget_id)
        if widget is None or screen.is_locked(widget):
            continue
        updates.append((widget_id, {"x": widget.x + dx, "y": widget.y + dy}))
    return updates


__all__ = [
    "GRID_SIZE",
    "MIN_SIZE",
    "ASPECT_LOCKED_TYPES",
    "RESIZE_HANDLES",
    "WidgetUpdate",
    "snap",
    "PointerDown",
    "ResizeDown",
    "PointerMove",
    "PointerUp",
    "DragEvent",
    "Idle",
    "Dragging",
    "Resizing",
    "DragState",
    "IDLE",
    "transition",
    "resize_box",
    "DragEngine",
    "drop_position",
    "nudge_updates",
]
