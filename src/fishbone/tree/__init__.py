"""Tree traversal over fishbone root causes."""

from fishbone.tree.traversal import (
    DELETE,
    NO_CHANGE,
    Outcome,
    OutcomeKind,
    TraversalStats,
    Visitor,
    for_each_root_cause,
    iter_root_causes,
    replace,
)

__all__ = [
    "DELETE",
    "NO_CHANGE",
    "Outcome",
    "OutcomeKind",
    "TraversalStats",
    "Visitor",
    "for_each_root_cause",
    "iter_root_causes",
    "replace",
]
