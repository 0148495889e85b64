"""Wire schemas for the load and sync endpoints (request/response only).

JSON keys are camelCase; the client's placeholder ids travel as $PhantomId
and $PhantomParentId. Uses SQLModel (table=False) for consistency with models.py.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

from models import GanttTask

# Task columns a client may send on add or patch, by attribute name
TASK_FIELDS = (
    "name",
    "start_date",
    "end_date",
    "duration",
    "percent_done",
    "parent_id",
    "parent_index",
    "expanded",
    "rollup",
    "manually_scheduled",
    "effort",
)


class WireModel(SQLModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskFields(WireModel):
    """Every mutable task column, all optional."""

    name: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration: float | None = None
    percent_done: float | None = None
    parent_id: int | None = None
    parent_index: int | None = None
    expanded: bool | None = None
    rollup: bool | None = None
    manually_scheduled: bool | None = None
    effort: int | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_to_naive_utc(cls, value: datetime | None) -> datetime | None:
        """Dates are stored naive. Offset-qualified input is converted to UTC; naive input is kept as sent."""
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)


class TaskRow(TaskFields):
    """A task as sent to the client. phantom_id is only filled on rows echoed for an add."""

    id: int
    phantom_id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("$PhantomId", "phantomId", "phantom_id"),
        serialization_alias="$PhantomId",
    )
    name: str = ""

    @classmethod
    def from_task(cls, task: GanttTask, phantom_id: str | int | None = None) -> "TaskRow":
        values = {field: getattr(task, field) for field in TASK_FIELDS}
        if values["name"] is None:
            values["name"] = ""
        return cls(id=task.id, phantom_id=phantom_id, **values)


class TaskDraft(TaskFields):
    """A new task proposed by the client. Any id it carries is ignored."""

    id: int | str | None = None
    phantom_id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("$PhantomId", "phantomId", "phantom_id"),
    )
    phantom_parent_id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("$PhantomParentId", "phantomParentId", "phantom_parent_id"),
    )

    def task_values(self) -> dict[str, Any]:
        """Column values the client actually sent; omitted keys fall back to table defaults."""
        return {field: getattr(self, field) for field in TASK_FIELDS if field in self.model_fields_set}


class TaskPatch(TaskFields):
    """Proposed changes for one existing task, keyed by id. Omitted keys mean no change."""

    id: int = 0
    phantom_parent_id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("$PhantomParentId", "phantomParentId", "phantom_parent_id"),
    )


class TaskRef(WireModel):
    id: int = 0


class TaskChanges(WireModel):
    added: list[TaskDraft] | None = None
    updated: list[TaskPatch] | None = None
    removed: list[TaskRef] | None = None


class SyncRequest(WireModel):
    request_id: int | None = None
    revision: int | None = None
    tasks: TaskChanges | None = None


class LoadRows(WireModel):
    rows: list[TaskRow] = []
    total: int = 0


class LoadResponse(WireModel):
    success: bool = True
    request_id: str | int | None = None
    revision: int = 1
    tasks: LoadRows | None = None


class SyncRows(WireModel):
    rows: list[TaskRow] | None = None


class SyncResponse(WireModel):
    success: bool = False
    request_id: int | None = None
    revision: int | None = None
    message: str | None = None
    tasks: SyncRows | None = None


class ErrorResponse(WireModel):
    success: bool = False
    message: str
