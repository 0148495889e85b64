"""Canonical task order and subtree lookup over the flat tasks table.

parent_index only means something among siblings, so rows are ordered by
parent_id first. Root tasks (parent_id NULL) form the first bucket on every
backend; unindexed siblings sort after indexed ones; id breaks ties.
"""

from __future__ import annotations

from sqlmodel import select

from models import GanttTask


def order_by_clauses() -> tuple:
    """ORDER BY expressions for the canonical scan."""
    return (
        GanttTask.parent_id.nulls_first(),  # type: ignore[union-attr]
        GanttTask.parent_index.nulls_last(),  # type: ignore[union-attr]
        GanttTask.id,
    )


def subtree_ids(root_id: int):
    """SELECT of root_id and the ids of all its transitive descendants.

    Walks parent_id with a recursive CTE, so only the subtree is read. UNION
    (not UNION ALL) drops repeats, which stops the walk on a parent cycle.
    """
    tree = (
        select(GanttTask.id)
        .where(GanttTask.id == root_id)
        .cte("subtree", recursive=True)
    )
    children = select(GanttTask.id).where(GanttTask.parent_id == tree.c.id)
    tree = tree.union(children)
    return select(tree.c.id)
