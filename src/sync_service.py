"""Apply a client's sync batch to the task tree.

Categories run in a fixed order: added, then updated, then removed. Items run
in input order and each one is committed on its own, so a failure part way
through leaves earlier items applied and later ones not. The response does
not say which items made it.

Updates and removes aimed at an id <= 0 or at a task that does not exist are
skipped without telling the client. The revision in the response is just the
client's revision plus one; it is never checked against server state.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlmodel import Session

import patch_codec
import task_store
from models import GanttTask
from schemas import SyncRequest, SyncResponse, SyncRows, TaskChanges, TaskDraft, TaskPatch, TaskRef, TaskRow

logger = logging.getLogger(__name__)

SYNC_ERROR_MESSAGE = "There was an error syncing the data changes."


def sync(session: Session, request: SyncRequest) -> SyncResponse:
    """Apply request.tasks and build the response. Never raises for store errors."""
    logger.info("Sync request received. RequestId: %s", request.request_id)
    try:
        rows: list[TaskRow] = []
        if request.tasks is not None:
            apply_changes(session, request.tasks, rows)
        return SyncResponse(
            success=True,
            request_id=request.request_id,
            revision=(request.revision or 0) + 1,
            tasks=SyncRows(rows=rows),
        )
    except Exception:
        logger.exception("Error syncing data (requestId=%s)", request.request_id)
        session.rollback()
        return SyncResponse(
            success=False,
            request_id=request.request_id,
            message=SYNC_ERROR_MESSAGE,
        )


def apply_changes(session: Session, changes: TaskChanges, rows: list[TaskRow]) -> None:
    """Run added, updated, removed in that order, appending created tasks to rows."""
    phantom_ids: dict[Any, int] = {}
    for draft in changes.added or []:
        rows.append(add_task(session, draft, phantom_ids))
    for patch in changes.updated or []:
        update_task(session, patch, phantom_ids)
    for ref in changes.removed or []:
        remove_task(session, ref)


def add_task(session: Session, draft: TaskDraft, phantom_ids: dict[Any, int] | None = None) -> TaskRow:
    """Insert draft as a new task and echo it back with the client's phantom id attached.

    Any id on the draft is dropped. A missing or null name becomes "". When the draft
    names a parent by $PhantomParentId that was created earlier in the batch, the new
    parent id is filled in. phantom_ids is updated with this task's mapping.
    """
    phantom_ids = phantom_ids if phantom_ids is not None else {}
    phantom_id = draft.phantom_id
    values = draft.task_values()
    if values.get("name") is None:
        values["name"] = ""
    if values.get("parent_id") is None and draft.phantom_parent_id in phantom_ids:
        values["parent_id"] = phantom_ids[draft.phantom_parent_id]

    task = GanttTask(**values)
    new_id = task_store.insert(session, task)
    if phantom_id is not None:
        phantom_ids[phantom_id] = new_id
    logger.debug("Added task %s (phantom %s)", new_id, phantom_id)
    return TaskRow.from_task(task, phantom_id=phantom_id)


def update_task(session: Session, patch: TaskPatch, phantom_ids: dict[Any, int] | None = None) -> bool:
    """Overwrite every field the patch sent. Returns False when the patch was skipped."""
    if patch.id <= 0:
        logger.debug("Skipping update with invalid id %s", patch.id)
        return False
    changes = patch_codec.decode_patch(patch)
    changes = patch_codec.resolve_phantom_parent(patch, changes, phantom_ids or {})
    task = task_store.update(session, patch.id, lambda t: patch_codec.apply_changes(t, changes))
    if task is None:
        logger.debug("Skipping update for missing task %s", patch.id)
        return False
    return True


def remove_task(session: Session, ref: TaskRef) -> bool:
    """Delete the task and its subtree. Returns False when the reference was skipped."""
    if ref.id <= 0:
        logger.debug("Skipping remove with invalid id %s", ref.id)
        return False
    deleted = task_store.delete_cascade(session, ref.id)
    if not deleted:
        logger.debug("Skipping remove for missing task %s", ref.id)
        return False
    return True
