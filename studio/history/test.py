"""Tests for the history engine.

Tests cover:
- set/undo/redo stack mechanics
- Branch cut on a new set after undo
- jump_to as a multi-step undo
- Labels, limits and reset
"""

import pytest

from .lib import HistoryEngine, HistoryItem

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def history():
    """History with three recorded edits: a -> b -> c -> d."""
    engine = HistoryEngine("a")
    engine.set("b", "to b")
    engine.set("c", "to c")
    engine.set("d", "to d")
    return engine


def _states(items: tuple[HistoryItem, ...]) -> list:
    return [item.state for item in items]


def _labels(items: tuple[HistoryItem, ...]) -> list[str]:
    return [item.label for item in items]


# =============================================================================
# set
# =============================================================================


class TestSet:
    """Tests for recording new states."""

    @pytest.mark.unit
    def test_set_pushes_old_present(self):
        """The previous present is captured with the action label."""
        engine = HistoryEngine("a")
        assert engine.set("b", "Edit") is True
        assert engine.present == "b"
        assert _states(engine.past) == ["a"]
        assert _labels(engine.past) == ["Edit"]
        assert engine.future == ()

    @pytest.mark.unit
    def test_identical_state_is_noop(self):
        """Setting the same object records nothing."""
        state = {"x": 1}
        engine = HistoryEngine(state)
        assert engine.set(state, "Nothing") is False
        assert engine.past == ()

    @pytest.mark.unit
    def test_functional_update(self):
        """A callable receives the current present."""
        engine = HistoryEngine(1)
        engine.set(lambda n: n + 41, "Add")
        assert engine.present == 42

    @pytest.mark.unit
    def test_functional_update_returning_present_is_noop(self):
        """A callable that changes nothing records nothing."""
        engine = HistoryEngine([1])
        assert engine.set(lambda s: s, "Nothing") is False
        assert not engine.can_undo

    @pytest.mark.unit
    def test_default_label(self):
        """Unlabeled edits are called Update."""
        engine = HistoryEngine(0)
        engine.set(1)
        assert engine.labels() == ["Update"]

    @pytest.mark.unit
    def test_timestamps_recorded(self):
        """Items carry an aware timestamp."""
        engine = HistoryEngine(0)
        engine.set(1, "x")
        assert engine.past[0].timestamp.tzinfo is not None


# =============================================================================
# undo / redo
# =============================================================================


class TestUndoRedo:
    """Tests for stepping through history."""

    @pytest.mark.unit
    def test_round_trip(self, history):
        """Undoing every step returns to the start; redoing restores the end."""
        for _ in range(3):
            assert history.undo() is True
        assert history.present == "a"
        for _ in range(3):
            assert history.redo() is True
        assert history.present == "d"

    @pytest.mark.unit
    def test_undo_moves_present_to_future_front(self, history):
        """The undone state becomes the soonest redo target."""
        history.undo()
        history.undo()
        assert history.present == "b"
        assert _states(history.future) == ["c", "d"]
        assert _labels(history.future) == ["to c", "to d"]

    @pytest.mark.unit
    def test_redo_keeps_label(self, history):
        """Redo writes the redone label back onto the past."""
        history.undo()
        history.redo()
        assert history.labels() == ["to b", "to c", "to d"]

    @pytest.mark.unit
    def test_empty_stacks_are_noops(self):
        """Nothing to undo or redo leaves the engine untouched."""
        engine = HistoryEngine("only")
        assert engine.undo() is False
        assert engine.redo() is False
        assert engine.present == "only"

    @pytest.mark.unit
    def test_branch_cut(self, history):
        """A new edit after undo discards the redo stack."""
        history.undo()
        history.set("x", "branch")
        assert history.future == ()
        assert history.redo() is False
        assert history.present == "x"

    @pytest.mark.unit
    def test_snapshot_count_conserved(self, history):
        """Undo and redo never drop snapshots."""
        total = len(history)
        history.undo()
        assert len(history) == total
        history.redo()
        assert len(history) == total
        history.jump_to(0)
        assert len(history) == total


# =============================================================================
# jump_to
# =============================================================================


class TestJumpTo:
    """Tests for random-access jumps."""

    @pytest.mark.unit
    def test_jump_restores_past_entry(self, history):
        """Jumping to index 1 restores the state recorded there."""
        assert history.jump_to(1) is True
        assert history.present == "b"
        assert _states(history.past) == ["a"]
        assert _states(history.future) == ["c", "d"]

    @pytest.mark.unit
    def test_jump_then_redo_returns(self, history):
        """Redoing len(past) - i times returns to the pre-jump present."""
        steps = len(history.past) - 0
        history.jump_to(0)
        for _ in range(steps):
            history.redo()
        assert history.present == "d"
        assert _states(history.past) == ["a", "b", "c"]
        assert history.labels() == ["to b", "to c", "to d"]

    @pytest.mark.unit
    def test_jump_keeps_existing_future_after(self, history):
        """Pre-existing redo entries stay behind the moved ones."""
        history.undo()  # future: [d]
        history.jump_to(0)  # present a
        assert _states(history.future) == ["b", "c", "d"]

    @pytest.mark.unit
    def test_jump_labels_follow_transitions(self, history):
        """Each redo entry is labeled with the action that produced it."""
        history.jump_to(0)
        assert _labels(history.future) == ["to b", "to c", "to d"]

    @pytest.mark.unit
    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_out_of_range_is_noop(self, history, index):
        """Indices outside past leave the engine untouched."""
        assert history.jump_to(index) is False
        assert history.present == "d"
        assert len(history.past) == 3


# =============================================================================
# Limits and reset
# =============================================================================


class TestLimitAndReset:
    """Tests for history depth limits and resets."""

    @pytest.mark.unit
    def test_limit_drops_oldest(self):
        """Only the newest entries survive a limit."""
        engine = HistoryEngine(0, limit=2)
        for n in range(1, 5):
            engine.set(n, f"to {n}")
        assert _states(engine.past) == [2, 3]
        assert engine.limit == 2

    @pytest.mark.unit
    def test_reset_clears_stacks(self, history):
        """Reset forgets past and future."""
        history.undo()
        history.reset("fresh")
        assert history.present == "fresh"
        assert not history.can_undo
        assert not history.can_redo
