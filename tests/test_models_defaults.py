"""Verify GanttTask column defaults and wire-row conversion."""

from models import GanttTask
from schemas import TaskRow


def test_task_defaults_match_client_expectations():
    t = GanttTask()
    assert t.name == ""
    assert t.percent_done == 0
    assert t.expanded is True
    assert t.rollup is False
    assert t.manually_scheduled is True
    assert t.parent_id is None
    assert t.effort is None


def test_row_from_task_dumps_camel_case_without_nulls():
    row = TaskRow.from_task(GanttTask(id=3, name="X", parent_id=1, parent_index=2), phantom_id="ph")
    dumped = row.model_dump(mode="json", by_alias=True, exclude_none=True)
    assert dumped["$PhantomId"] == "ph"
    assert dumped["parentId"] == 1
    assert dumped["parentIndex"] == 2
    assert "startDate" not in dumped
    assert "phantom_id" not in dumped
