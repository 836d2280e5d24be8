"""Selection resolution and widget grouping."""

from .lib import (
    Selection,
    dissolve_singleton_groups,
    group_members,
    group_widgets,
    is_selectable,
    prune_selection,
    resolve_selection,
    ungroup_widgets,
)

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
