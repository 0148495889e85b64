from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlmodel import Field, SQLModel


class GanttTask(SQLModel, table=True):
    """One row of the task tree. Hierarchy is held as parent_id references, never as object links."""

    __tablename__ = "tasks"
    # AUTOINCREMENT keeps SQLite from handing out a deleted max id again
    __table_args__ = {"sqlite_autoincrement": True}

    id: int = Field(default=None, primary_key=True)
    name: str = Field(default="")
    # naive columns; offsets are normalised to UTC before they get here
    start_date: datetime | None = Field(default=None, sa_type=DateTime(), sa_column_kwargs={"name": "startDate"})
    end_date: datetime | None = Field(default=None, sa_type=DateTime(), sa_column_kwargs={"name": "endDate"})
    duration: float | None = Field(default=None)
    percent_done: float | None = Field(default=0, sa_column_kwargs={"name": "percentDone"})
    parent_id: int | None = Field(
        default=None,
        sa_column=Column(
            "parentId",
            Integer,
            ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
    )
    parent_index: int | None = Field(default=None, sa_column_kwargs={"name": "parentIndex"})
    expanded: bool | None = Field(default=True)
    rollup: bool | None = Field(default=False)
    manually_scheduled: bool | None = Field(default=True, sa_column_kwargs={"name": "manuallyScheduled"})
    effort: int | None = Field(default=None)
