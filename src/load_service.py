"""Full-tree projection for the client's initial load."""

import logging
import time

from sqlmodel import Session

import task_store
from schemas import LoadResponse, LoadRows, TaskRow

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "There was an error loading the tasks data."

# Every load resets the client's baseline
INITIAL_REVISION = 1


def new_request_id() -> str:
    """Millisecond Unix timestamp, used when the client sent no request id."""
    return str(int(time.time() * 1000))


def load(session: Session, request_id: str | int | None = None) -> LoadResponse:
    """Return every task as flat rows in canonical order, with the total count.

    Store errors propagate; the HTTP layer turns them into a 500.
    """
    tasks = task_store.scan_ordered(session)
    rows = [TaskRow.from_task(t) for t in tasks]
    logger.info("Loaded %d tasks", len(rows))
    return LoadResponse(
        success=True,
        request_id=request_id if request_id is not None else new_request_id(),
        revision=INITIAL_REVISION,
        tasks=LoadRows(rows=rows, total=len(rows)),
    )
