"""Persistence for the task tree.

Thin functions over an open SQLModel session. Every mutating call commits
before returning, so each item of a sync batch is durable on its own.
Database errors propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import delete
from sqlmodel import Session, select

import ordering
from models import GanttTask

logger = logging.getLogger(__name__)


def get_by_id(session: Session, task_id: int) -> GanttTask | None:
    """Return a task by id, or None if not found."""
    return session.get(GanttTask, task_id)


def insert(session: Session, task: GanttTask) -> int:
    """Insert a new task row and return its id."""
    session.add(task)
    session.commit()
    session.refresh(task)
    return task.id


def update(session: Session, task_id: int, setter: Callable[[GanttTask], object]) -> GanttTask | None:
    """Apply setter to the stored task and commit. Returns None (and writes nothing) if absent."""
    task = session.get(GanttTask, task_id)
    if task is None:
        return None
    setter(task)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def delete_cascade(session: Session, task_id: int) -> list[int]:
    """Delete a task and all of its descendants in one statement and one commit.

    Returns the deleted ids (root first), or [] when the task does not exist.
    """
    if session.get(GanttTask, task_id) is None:
        return []
    subtree = set(session.exec(ordering.subtree_ids(task_id)))
    ids = [task_id] + sorted(subtree - {task_id})
    session.exec(delete(GanttTask).where(GanttTask.id.in_(ids)))  # type: ignore[attr-defined]
    session.commit()
    logger.debug("Deleted task %s with %d descendant(s)", task_id, len(ids) - 1)
    return ids


def scan_ordered(session: Session) -> list[GanttTask]:
    """Return every task in canonical (parent_id, parent_index) order."""
    q = select(GanttTask).order_by(*ordering.order_by_clauses())
    return list(session.exec(q))
