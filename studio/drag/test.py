"""Unit tests for the drag and resize state machine."""

import pytest

from studio.layers import toggle_layer_locked
from studio.model import IconProps, Widget

from .lib import (
    IDLE,
    DragEngine,
    Dragging,
    Idle,
    PointerDown,
    PointerMove,
    PointerUp,
    ResizeDown,
    Resizing,
    drop_position,
    nudge_updates,
    resize_box,
    snap,
    transition,
)


@pytest.fixture
def drag_screen(button, screen_with):
    """Widget 'a' at (103, 97) and 'b' at (20, 20) on an unlocked layer."""
    return screen_with(button("a", x=103, y=97), button("b", x=20, y=20))


class TestSnap:
    """Tests for grid snapping."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [(116, 120), (95, 100), (94.9, 90), (0, 0), (4.9, 0), (-15, -20), (-14, -10)],
    )
    def test_snap_to_ten(self, value, expected):
        """Halves round away from zero."""
        assert snap(value) == expected

    @pytest.mark.unit
    def test_custom_grid(self):
        assert snap(12, 5) == 10
        assert snap(13, 5) == 15


class TestMove:
    """Tests for dragging widgets."""

    @pytest.mark.unit
    def test_move_snaps_each_axis(self, drag_screen):
        """(103, 97) dragged by (13, -2) lands on (120, 100)."""
        state, updates = transition(IDLE, PointerDown(0, 0, ("a",)), drag_screen)
        assert isinstance(state, Dragging)
        assert updates == []

        state, updates = transition(state, PointerMove(13, -2), drag_screen)
        assert updates == [("a", {"x": 120, "y": 100})]

    @pytest.mark.unit
    def test_move_is_relative_to_origin(self, drag_screen):
        """Successive moves are measured from pointer-down, not accumulated."""
        state, _ = transition(IDLE, PointerDown(0, 0, ("b",)), drag_screen)
        state, _ = transition(state, PointerMove(50, 50), drag_screen)
        state, updates = transition(state, PointerMove(10, 0), drag_screen)
        assert updates == [("b", {"x": 30, "y": 20})]

    @pytest.mark.unit
    def test_zoom_divides_delta(self, drag_screen):
        """At 2x zoom a 40px pointer move is 20 canvas units."""
        state, _ = transition(IDLE, PointerDown(0, 0, ("b",)), drag_screen, zoom=2.0)
        _, updates = transition(state, PointerMove(40, 40), drag_screen, zoom=2.0)
        assert updates == [("b", {"x": 40, "y": 40})]

    @pytest.mark.unit
    def test_multi_selection_moves_together(self, drag_screen):
        """All selected widgets get one batched update."""
        state, _ = transition(IDLE, PointerDown(0, 0, ("a", "b")), drag_screen)
        _, updates = transition(state, PointerMove(30, 10), drag_screen)
        assert dict(updates) == {"a": {"x": 130, "y": 110}, "b": {"x": 50, "y": 30}}

    @pytest.mark.unit
    def test_locked_widgets_do_not_drag(self, drag_screen):
        """Pointer-down on widgets of a locked layer stays idle."""
        locked = toggle_layer_locked(drag_screen, "layer_1")
        state, _ = transition(IDLE, PointerDown(0, 0, ("a",)), locked)
        assert state is IDLE

    @pytest.mark.unit
    def test_deleted_widget_dropped_from_batch(self, drag_screen):
        """Widgets removed mid-drag no longer receive updates."""
        state, _ = transition(IDLE, PointerDown(0, 0, ("a", "b")), drag_screen)
        without_a = drag_screen.model_copy(
            update={"widgets": tuple(w for w in drag_screen.widgets if w.id != "a")}
        )
        _, updates = transition(state, PointerMove(10, 10), without_a)
        assert [wid for wid, _ in updates] == ["b"]

    @pytest.mark.unit
    def test_pointer_up_returns_to_idle(self, drag_screen):
        state, _ = transition(IDLE, PointerDown(0, 0, ("a",)), drag_screen)
        state, updates = transition(state, PointerUp(), drag_screen)
        assert isinstance(state, Idle)
        assert updates == []

    @pytest.mark.unit
    def test_move_while_idle_does_nothing(self, drag_screen):
        state, updates = transition(IDLE, PointerMove(50, 50), drag_screen)
        assert state is IDLE
        assert updates == []


class TestResize:
    """Tests for handle-driven resizing."""

    @pytest.mark.unit
    def test_south_east_snaps_size(self):
        assert resize_box((0, 0, 100, 40), "se", 23, 7) == (0, 0, 120, 50)

    @pytest.mark.unit
    def test_west_handle_moves_origin(self):
        """Dragging the west edge keeps the east edge in place."""
        assert resize_box((100, 0, 100, 40), "w", -20, 0) == (80, 0, 120, 40)

    @pytest.mark.unit
    def test_minimum_size(self):
        """Sizes stop at ten units; the origin stops with them."""
        assert resize_box((0, 0, 100, 40), "w", 200, 0) == (90, 0, 10, 40)
        assert resize_box((0, 0, 100, 40), "s", 0, -200) == (0, 0, 100, 10)

    @pytest.mark.unit
    def test_locked_aspect_edge(self):
        """East handle with a locked ratio scales the height too."""
        assert resize_box((0, 0, 100, 50), "e", 100, 0, lock_aspect=True) == (0, 0, 200, 100)

    @pytest.mark.unit
    def test_icon_keeps_aspect(self, screen_with):
        """Icons are always resized with their ratio locked and unsnapped size."""
        icon = Widget(id="i", layer_id="layer_1", width=32, height=32, props=IconProps())
        screen = screen_with(icon)
        state, _ = transition(IDLE, ResizeDown(0, 0, "i", "se"), screen)
        assert isinstance(state, Resizing)
        assert state.locked_aspect

        _, updates = transition(state, PointerMove(10, 0), screen)
        assert updates == [("i", {"x": 0, "y": 0, "width": 42, "height": 42})]

    @pytest.mark.unit
    def test_modifier_locks_aspect(self, button, screen_with):
        screen = screen_with(button("a", width=100, height=50))
        state, _ = transition(IDLE, ResizeDown(0, 0, "a", "e"), screen)
        _, updates = transition(state, PointerMove(100, 0, modifier=True), screen)
        assert updates == [("a", {"x": 0, "y": 0, "width": 200, "height": 100})]

    @pytest.mark.unit
    def test_unknown_handle_stays_idle(self, drag_screen):
        state, _ = transition(IDLE, ResizeDown(0, 0, "a", "middle"), drag_screen)
        assert state is IDLE


class TestDragEngine:
    """Tests for the stateful wrapper."""

    @pytest.mark.unit
    def test_feed_tracks_state(self, drag_screen):
        engine = DragEngine(grid=10)
        assert not engine.is_active

        engine.feed(PointerDown(0, 0, ("b",)), drag_screen)
        assert engine.is_active
        assert engine.feed(PointerMove(25, 33), drag_screen) == [("b", {"x": 50, "y": 50})]

        engine.feed(PointerUp(), drag_screen)
        assert not engine.is_active

    @pytest.mark.unit
    def test_cancel(self, drag_screen):
        engine = DragEngine(grid=10)
        engine.feed(PointerDown(0, 0, ("b",)), drag_screen)
        engine.cancel()
        assert engine.state is IDLE


class TestDropAndNudge:
    """Tests for palette drops and keyboard nudges."""

    @pytest.mark.unit
    def test_drop_position(self):
        """Pointer is made canvas-relative, unzoomed and snapped."""
        assert drop_position((250, 130), (100, 50), zoom=2.0) == (80, 40)

    @pytest.mark.unit
    def test_nudge_is_not_snapped(self, drag_screen):
        assert nudge_updates(drag_screen, ["a"], 1, 0) == [("a", {"x": 104, "y": 97})]

    @pytest.mark.unit
    def test_nudge_skips_locked_and_missing(self, drag_screen):
        locked = toggle_layer_locked(drag_screen, "layer_1")
        assert nudge_updates(locked, ["a", "b"], 10, 0) == []
        assert nudge_updates(drag_screen, ["ghost"], 10, 0) == []
