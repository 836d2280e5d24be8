"""Unit tests for selection resolution and grouping."""

import pytest

from studio.model import Layer

from .lib import (
    dissolve_singleton_groups,
    group_members,
    group_widgets,
    prune_selection,
    resolve_selection,
    ungroup_widgets,
)


@pytest.fixture
def grouped_screen(button, screen_with):
    """A and B share group g1, C is ungrouped."""
    return screen_with(
        button("A", group_id="g1"),
        button("B", group_id="g1"),
        button("C"),
    )


class TestResolveSelection:
    """Tests for pointer-down selection resolution."""

    @pytest.mark.unit
    def test_plain_click_on_grouped_selects_group(self, grouped_screen):
        """Clicking a grouped widget selects all its peers."""
        result = resolve_selection(grouped_screen, (), "A")
        assert set(result) == {"A", "B"}

    @pytest.mark.unit
    def test_plain_click_on_ungrouped(self, grouped_screen):
        """Clicking a lone widget selects only it."""
        assert resolve_selection(grouped_screen, ("A", "B"), "C") == ("C",)

    @pytest.mark.unit
    def test_additive_click_extends(self, button, screen_with):
        """Shift-click adds to the current selection."""
        screen = screen_with(button("A"), button("C"))
        assert set(resolve_selection(screen, ("A",), "C", additive=True)) == {"A", "C"}

    @pytest.mark.unit
    def test_additive_click_pulls_in_group(self, grouped_screen):
        """Shift-click on a grouped widget adds its whole group."""
        result = resolve_selection(grouped_screen, ("C",), "B", additive=True)
        assert set(result) == {"A", "B", "C"}

    @pytest.mark.unit
    def test_click_on_selected_keeps_selection(self, grouped_screen):
        """Clicking inside the selection keeps it for a multi-drag."""
        assert resolve_selection(grouped_screen, ("C", "A"), "A") == ("C", "A")

    @pytest.mark.unit
    def test_empty_canvas_clears(self, grouped_screen):
        """A plain click on empty canvas clears the selection."""
        assert resolve_selection(grouped_screen, ("A",), None) == ()
        assert resolve_selection(grouped_screen, ("A",), None, additive=True) == ("A",)

    @pytest.mark.unit
    def test_missing_widget_ignored(self, grouped_screen):
        """Unknown ids do not change the selection."""
        assert resolve_selection(grouped_screen, ("C",), "ghost") == ("C",)

    @pytest.mark.unit
    def test_locked_layer_not_selectable(self, button, screen_with):
        """Widgets on locked layers cannot be picked."""
        screen = screen_with(button("A"))
        locked = screen.model_copy(
            update={"layers": (Layer(id="layer_1", name="l", locked=True),)}
        )
        assert resolve_selection(locked, (), "A") == ()


class TestPruneSelection:
    """Tests for dropping stale selection entries."""

    @pytest.mark.unit
    def test_drops_missing_and_hidden(self, button, screen_with):
        """Deleted widgets and hidden-layer widgets leave the selection."""
        screen = screen_with(button("A"), button("B", layer_id="top"), layers=("layer_1", "top"))
        hidden = screen.model_copy(
            update={"layers": (screen.layers[0], Layer(id="top", name="top", visible=False))}
        )
        assert prune_selection(hidden, ("A", "B", "gone")) == ("A",)

    @pytest.mark.unit
    def test_no_screen_clears(self):
        """A missing screen leaves nothing selected."""
        assert prune_selection(None, ("A",)) == ()


class TestGrouping:
    """Tests for group and ungroup."""

    @pytest.mark.unit
    def test_group_assigns_shared_id(self, button, screen_with):
        """All selected widgets receive the new group id."""
        screen = group_widgets(screen_with(button("A"), button("B")), ["A", "B"], "g")
        assert group_members(screen.widgets, "g") == ("A", "B")

    @pytest.mark.unit
    def test_group_needs_two(self, button, screen_with):
        """Grouping a single widget is rejected."""
        screen = screen_with(button("A"), button("B"))
        assert group_widgets(screen, ["A"], "g") is screen
        assert group_widgets(screen, ["A", "ghost"], "g") is screen

    @pytest.mark.unit
    def test_regroup_dissolves_old_singleton(self, grouped_screen):
        """Stealing one member of a pair dissolves the old group."""
        screen = group_widgets(grouped_screen, ["B", "C"], "g2")
        assert screen.widget("A").group_id is None
        assert screen.widget("B").group_id == "g2"
        assert screen.widget("C").group_id == "g2"

    @pytest.mark.unit
    def test_ungroup_clears_group(self, grouped_screen):
        """Ungrouping clears the group of the selected members."""
        screen = ungroup_widgets(grouped_screen, ["A", "B"])
        assert all(w.group_id is None for w in screen.widgets)

    @pytest.mark.unit
    def test_partial_ungroup_dissolves_remainder(self, grouped_screen):
        """The member left alone is ungrouped too."""
        screen = ungroup_widgets(grouped_screen, ["A"])
        assert screen.widget("B").group_id is None

    @pytest.mark.unit
    def test_ungroup_without_groups_is_identity(self, grouped_screen):
        """Ungrouping ungrouped widgets changes nothing."""
        assert ungroup_widgets(grouped_screen, ["C"]) is grouped_screen

    @pytest.mark.unit
    def test_dissolve_keeps_valid_groups(self, button, screen_with):
        """Groups of two or more survive."""
        screen = screen_with(button("A", group_id="g"), button("B", group_id="g"), button("C", group_id="h"))
        result = dissolve_singleton_groups(screen)
        assert result.widget("A").group_id == "g"
        assert result.widget("C").group_id is None
