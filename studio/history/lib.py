"""Undo/redo history over immutable document snapshots.

The engine is type-agnostic: it stores whole-document snapshots and never
looks inside them. ``past`` is ordered oldest first, ``future`` soonest-redo
first. A new ``set`` clears ``future``; branching history is not kept.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryItem(Generic[T]):
    """A labeled, timestamped snapshot.

    Attributes:
        state: The document version.
        label: Best-effort description of the action linking this version to
            its neighbour (e.g. "Add Button").
        timestamp: When the item was recorded.
    """

    state: T
    label: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class HistoryEngine(Generic[T]):
    """Undo/redo container with random-access jump.

    None of the operations raise: empty stacks and out-of-range indices are
    no-ops. Each operation returns True when it changed the history.

    Example:
        >>> history = HistoryEngine("a")
        >>> history.set("b", "Edit")
        True
        >>> history.undo()
        True
        >>> history.present
        'a'
        >>> history.redo()
        True
        >>> history.present
        'b'

    Args:
        initial: The initial document.
        limit: Maximum number of undo steps kept. None keeps everything.
    """

    def __init__(self, initial: T, limit: int | None = None):
        self._past: list[HistoryItem[T]] = []
        self._present: T = initial
        self._future: list[HistoryItem[T]] = []
        self._limit = limit

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def present(self) -> T:
        """The current document."""
        return self._present

    @property
    def past(self) -> tuple[HistoryItem[T], ...]:
        """Undo stack, oldest first."""
        return tuple(self._past)

    @property
    def future(self) -> tuple[HistoryItem[T], ...]:
        """Redo stack, soonest first."""
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def limit(self) -> int | None:
        return self._limit

    def labels(self) -> list[str]:
        """Labels of the undo stack, oldest first, for a history menu."""
        return [item.label for item in self._past]

    def __len__(self) -> int:
        return len(self._past) + 1 + len(self._future)

    # =========================================================================
    # Transitions
    # =========================================================================

    def set(self, new_state: T | Callable[[T], T], label: str = "Update") -> bool:
        """Record a new present.

        Args:
            new_state: The next document, or a function computing it from the
                current present.
            label: Description of the action for the history menu.

        Returns:
            False when the next state is the current present (no entry made).
        """
        next_state = new_state(self._present) if callable(new_state) else new_state
        if next_state is self._present:
            return False

        self._past.append(HistoryItem(self._present, label))
        self._present = next_state
        self._future.clear()
        self._trim()
        logger.debug(f"History set '{label}' ({len(self._past)} undo steps)")
        return True

    def undo(self) -> bool:
        """Step back one version. No-op when there is nothing to undo."""
        if not self._past:
            return False

        previous = self._past.pop()
        self._future.insert(0, HistoryItem(self._present, previous.label))
        self._present = previous.state
        logger.debug(f"Undo '{previous.label}'")
        return True

    def redo(self) -> bool:
        """Step forward one version. No-op when there is nothing to redo."""
        if not self._future:
            return False

        following = self._future.pop(0)
        self._past.append(HistoryItem(self._present, following.label))
        self._present = following.state
        logger.debug(f"Redo '{following.label}'")
        return True

    def jump_to(self, index: int) -> bool:
        """Restore ``past[index]``, a multi-step undo.

        Every later past entry plus the current present moves to ``future``
        so that redoing ``len(past) - index`` times returns to where the jump
        started. Labels travel with the transitions they describe.

        Args:
            index: Position in ``past``. Out-of-range values are a no-op.
        """
        if index < 0 or index >= len(self._past):
            return False

        target = self._past[index]
        later = self._past[index + 1 :]
        states = [item.state for item in later] + [self._present]
        labels = [item.label for item in self._past[index:]]

        moved = [HistoryItem(state, label) for state, label in zip(states, labels)]
        self._future = moved + self._future
        self._past = self._past[:index]
        self._present = target.state
        logger.debug(f"Jumped back {len(moved)} steps to before '{target.label}'")
        return True

    def reset(self, state: T) -> None:
        """Replace the present and forget all history (new/loaded project)."""
        self._past.clear()
        self._future.clear()
        self._present = state

    def _trim(self) -> None:
        if self._limit is not None and len(self._past) > self._limit:
            dropped = len(self._past) - self._limit
            del self._past[:dropped]
            logger.debug(f"History limit {self._limit} reached, dropped {dropped} oldest")


__all__ = ["HistoryItem", "HistoryEngine"]
