"""Unit tests for layer management and z-order."""

import pytest

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


def _ids(widgets) -> list[str]:
    return [w.id for w in widgets]


def _layer_ids(screen) -> list[str]:
    return [l.id for l in screen.layers]


@pytest.fixture
def abc_screen(button, screen_with):
    """Three widgets A, B, C on one layer, C topmost."""
    return screen_with(button("A"), button("B"), button("C"))


@pytest.fixture
def two_layer_screen(button, screen_with):
    """Layer 'bottom' holds A and C, layer 'top' holds B; stored as A, B, C."""
    return screen_with(
        button("A", layer_id="bottom"),
        button("B", layer_id="top"),
        button("C", layer_id="bottom"),
        layers=("bottom", "top"),
    )


class TestLayerList:
    """Tests for adding, deleting and reordering layers."""

    @pytest.mark.unit
    def test_add_layer_appends_on_top(self, screen_with):
        """New layers go to the end of the sequence."""
        screen = add_layer(screen_with(), "new")
        assert _layer_ids(screen) == ["layer_1", "new"]
        assert screen.layers[-1].name == "Layer 2"

    @pytest.mark.unit
    def test_sixth_layer_rejected(self, screen_with):
        """A screen with five layers stays at five."""
        screen = screen_with(layers=("1", "2", "3", "4", "5"))
        assert add_layer(screen, "6") is screen
        assert len(screen.layers) == 5

    @pytest.mark.unit
    def test_delete_last_layer_rejected(self, screen_with):
        """The sole remaining layer cannot be deleted."""
        screen = screen_with()
        assert delete_layer(screen, "layer_1") is screen
        assert len(screen.layers) == 1

    @pytest.mark.unit
    def test_delete_layer_removes_its_widgets(self, two_layer_screen):
        """Widgets on a deleted layer go with it."""
        screen = delete_layer(two_layer_screen, "bottom")
        assert _layer_ids(screen) == ["top"]
        assert _ids(screen.widgets) == ["B"]

    @pytest.mark.unit
    def test_delete_layer_dissolves_split_group(self, button, screen_with):
        """A group spanning layers keeps no lone member after a delete."""
        screen = screen_with(
            button("A", layer_id="bottom", group_id="g1"),
            button("B", layer_id="top", group_id="g1"),
            layers=("bottom", "top"),
        )
        screen = delete_layer(screen, "top")
        assert _ids(screen.widgets) == ["A"]
        assert screen.widget("A").group_id is None

    @pytest.mark.unit
    def test_delete_unknown_layer_is_noop(self, two_layer_screen):
        assert delete_layer(two_layer_screen, "nope") is two_layer_screen

    @pytest.mark.unit
    def test_reorder_before_and_after(self, screen_with):
        """Explicit placement puts the layer beside the target."""
        screen = screen_with(layers=("a", "b", "c"))
        assert _layer_ids(reorder_layer(screen, "c", "a", "before")) == ["c", "a", "b"]
        assert _layer_ids(reorder_layer(screen, "a", "b", "after")) == ["b", "a", "c"]
        assert _layer_ids(reorder_layer(screen, "c", "a", "after")) == ["a", "c", "b"]

    @pytest.mark.unit
    def test_reorder_takes_target_slot(self, screen_with):
        """Without a position the layer takes the target's index."""
        screen = screen_with(layers=("a", "b", "c"))
        assert _layer_ids(reorder_layer(screen, "a", "c")) == ["b", "c", "a"]
        assert _layer_ids(reorder_layer(screen, "c", "a")) == ["c", "a", "b"]

    @pytest.mark.unit
    def test_reorder_keeps_widget_records(self, two_layer_screen):
        """Widgets are shared untouched after a layer move."""
        screen = reorder_layer(two_layer_screen, "top", "bottom", "before")
        assert screen.widgets is two_layer_screen.widgets
        assert _ids(render_order(screen)) == ["B", "A", "C"]

    @pytest.mark.unit
    def test_reorder_invalid_is_noop(self, two_layer_screen):
        assert reorder_layer(two_layer_screen, "top", "top") is two_layer_screen
        assert reorder_layer(two_layer_screen, "top", "ghost") is two_layer_screen
        assert reorder_layer(two_layer_screen, "bottom", "top", "before") is two_layer_screen


class TestLayerFlags:
    """Tests for visibility, lock and rename."""

    @pytest.mark.unit
    def test_toggle_visible_and_locked(self, screen_with):
        screen = toggle_layer_visible(screen_with(), "layer_1")
        assert screen.layers[0].visible is False
        screen = toggle_layer_locked(screen, "layer_1")
        assert screen.layers[0].locked is True

    @pytest.mark.unit
    def test_rename(self, screen_with):
        screen = update_layer(screen_with(), "layer_1", name="Background")
        assert screen.layers[0].name == "Background"

    @pytest.mark.unit
    def test_invalid_update_is_noop(self, screen_with):
        screen = screen_with()
        assert update_layer(screen, "layer_1", visible="maybe") is screen
        assert update_layer(screen, "layer_1", name=None) is screen

    @pytest.mark.unit
    def test_unchanged_update_is_identity(self, screen_with):
        screen = screen_with()
        assert update_layer(screen, "layer_1", visible=True) is screen
        assert toggle_layer_visible(screen, "ghost") is screen


class TestArrange:
    """Tests for stacking order within a layer."""

    @pytest.mark.unit
    def test_front(self, abc_screen):
        """Sending A to front yields B, C, A."""
        assert _ids(arrange_widgets(abc_screen, ["A"], ArrangeAction.FRONT).widgets) == ["B", "C", "A"]

    @pytest.mark.unit
    def test_backward(self, abc_screen):
        """Sending C backward yields A, C, B."""
        assert _ids(arrange_widgets(abc_screen, ["C"], "backward").widgets) == ["A", "C", "B"]

    @pytest.mark.unit
    def test_back_and_forward(self, abc_screen):
        assert _ids(arrange_widgets(abc_screen, ["C"], "back").widgets) == ["C", "A", "B"]
        assert _ids(arrange_widgets(abc_screen, ["A"], "forward").widgets) == ["B", "A", "C"]

    @pytest.mark.unit
    def test_forward_multiple_keeps_relative_order(self, abc_screen):
        """A and B both move up one step."""
        assert _ids(arrange_widgets(abc_screen, ["A", "B"], "forward").widgets) == ["C", "A", "B"]

    @pytest.mark.unit
    def test_already_on_top_is_identity(self, abc_screen):
        assert arrange_widgets(abc_screen, ["C"], "front") is abc_screen
        assert arrange_widgets(abc_screen, ["ghost"], "front") is abc_screen

    @pytest.mark.unit
    def test_front_stays_within_layer(self, two_layer_screen):
        """Bringing A to front puts it above C but still below B's layer."""
        screen = arrange_widgets(two_layer_screen, ["A"], "front")
        assert _ids(screen.widgets_on("bottom")) == ["C", "A"]
        assert _ids(render_order(screen)) == ["C", "A", "B"]
        assert screen.widget("A").layer_id == "bottom"

    @pytest.mark.unit
    def test_label(self):
        assert ArrangeAction.FRONT.label == "Bring to Front"


class TestRenderOrder:
    """Tests for paint order and export filtering."""

    @pytest.mark.unit
    def test_layer_order_then_widget_order(self, two_layer_screen):
        """Layers paint bottom to top, widgets within a layer in order."""
        assert _ids(render_order(two_layer_screen)) == ["A", "C", "B"]
        assert z_index(two_layer_screen, "B") == 2
        assert z_index(two_layer_screen, "ghost") is None

    @pytest.mark.unit
    def test_dangling_layer_skipped(self, button, screen_with):
        """Widgets whose layer is gone are not painted."""
        screen = screen_with(button("A"), button("X", layer_id="gone"))
        assert _ids(render_order(screen)) == ["A"]

