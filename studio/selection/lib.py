"""Selection resolution and grouping.

Resolution turns a raw pointer-down into the *effective selection*: the ids
that a drag or the property panel will act on once group membership and the
additive modifier are taken into account. It is a pure function so callers
can compute it synchronously before the first pointer-move.
"""

import logging
from typing import Iterable

from studio.model import Screen, Widget

logger = logging.getLogger(__name__)

Selection = tuple[str, ...]


def _unique(ids: Iterable[str]) -> Selection:
    return tuple(dict.fromkeys(ids))


def group_members(widgets: Iterable[Widget], group_id: str | None) -> Selection:
    """Ids of every widget sharing ``group_id``, in stacking order."""
    if not group_id:
        return ()
    return tuple(w.id for w in widgets if w.group_id == group_id)


def is_selectable(screen: Screen, widget: Widget) -> bool:
    """Widgets on locked or hidden layers cannot be picked."""
    layer = screen.layer(widget.layer_id)
    if layer is None:
        return True
    return layer.visible and not layer.locked


def resolve_selection(
    screen: Screen,
    selection: Selection,
    widget_id: str | None,
    additive: bool = False,
) -> Selection:
    """Compute the effective selection after a pointer-down.

    Rules:
        1. Clicking a selected widget keeps the selection, so the drag moves
           all of it.
        2. A plain click selects the widget, or its whole group.
        3. An additive click adds the widget and its group to the selection.
        4. A plain click on empty canvas (``widget_id`` None) clears it.

    Clicks on missing, locked or hidden widgets leave the selection alone.

    Args:
        screen: Screen the pointer-down happened on.
        selection: Current selection.
        widget_id: Widget under the pointer, or None for empty canvas.
        additive: Whether the additive modifier (shift) is held.

    Returns:
        The new selection, in first-selected order.
    """
    if widget_id is None:
        return selection if additive else ()

    widget = screen.widget(widget_id)
    if widget is None or not is_selectable(screen, widget):
        return selection

    if widget_id in selection:
        return selection

    peers = group_members(screen.widgets, widget.group_id) or (widget_id,)
    if not additive:
        return _unique((widget_id, *peers))
    return _unique((*selection, widget_id, *peers))


def prune_selection(screen: Screen | None, selection: Selection) -> Selection:
    """Drop ids that no longer exist on the screen or cannot be selected."""
    if screen is None:
        return ()
    kept = []
    for widget_id in selection:
        widget = screen.widget(widget_id)
        if widget is not None and is_selectable(screen, widget):
            kept.append(widget_id)
    return tuple(kept)


# =============================================================================
# Grouping
# =============================================================================


def dissolve_singleton_groups(screen: Screen) -> Screen:
    """Clear group ids shared by fewer than two widgets."""
    counts: dict[str, int] = {}
    for w in screen.widgets:
        if w.group_id:
            counts[w.group_id] = counts.get(w.group_id, 0) + 1

    lonely = {gid for gid, n in counts.items() if n < 2}
    if not lonely:
        return screen

    logger.debug(f"Dissolving singleton groups: {sorted(lonely)}")
    widgets = tuple(
        w.with_changes({"group_id": None}) if w.group_id in lonely else w
        for w in screen.widgets
    )
    return screen.model_copy(update={"widgets": widgets})


def group_widgets(screen: Screen, ids: Iterable[str], group_id: str) -> Screen:
    """Put the given widgets into a new group.

    Needs at least two existing widgets; otherwise the screen is returned
    unchanged. Widgets taken out of an older group may leave it with a single
    member, which is then dissolved.
    """
    wanted = {w.id for w in screen.widgets} & set(ids)
    if len(wanted) < 2:
        logger.debug(f"Group rejected: {len(wanted)} widget(s) selected, need 2")
        return screen

    widgets = tuple(
        w.with_changes({"group_id": group_id}) if w.id in wanted else w
        for w in screen.widgets
    )
    return dissolve_singleton_groups(screen.model_copy(update={"widgets": widgets}))


def ungroup_widgets(screen: Screen, ids: Iterable[str]) -> Screen:
    """Clear the group id of the given widgets.

    Group members left behind alone lose their group as well.
    """
    wanted = set(ids)
    if not any(w.id in wanted and w.group_id for w in screen.widgets):
        return screen

    widgets = tuple(
        w.with_changes({"group_id": None}) if w.id in wanted else w
        for w in screen.widgets
    )
    return dissolve_singleton_groups(screen.model_copy(update={"widgets": widgets}))


__all__ = [
    "Selection",
    "group_members",
    "is_selectable",
    "resolve_selection",
    "prune_selection",
    "dissolve_singleton_groups",
    "group_widgets",
    "ungroup_widgets",
]
