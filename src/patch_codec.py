"""Tri-state decoding of task patches.

Every patchable field of an inbound patch decodes to one of:

- UNSET: the key was not in the payload, leave the stored value alone
- CLEAR: the key was sent as null, overwrite with null
- SET: the key was sent with a value, overwrite with it

"Missing" and "null" are told apart by pydantic's fields_set, which only
holds keys the client actually sent. The rule is the same for every field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from models import GanttTask
from schemas import TASK_FIELDS, TaskPatch

PATCHABLE_FIELDS = TASK_FIELDS

# NOT NULL columns and the value an explicit null clears them to
_CLEARED_VALUE = {"name": ""}


class FieldState(str, Enum):
    UNSET = "unset"
    SET = "set"
    CLEAR = "clear"


@dataclass(frozen=True)
class FieldChange:
    state: FieldState
    value: Any = None

    @property
    def is_unset(self) -> bool:
        return self.state is FieldState.UNSET


UNSET = FieldChange(FieldState.UNSET)
CLEAR = FieldChange(FieldState.CLEAR)


def set_to(value: Any) -> FieldChange:
    """Change that writes value; None is normalised to CLEAR."""
    if value is None:
        return CLEAR
    return FieldChange(FieldState.SET, value)


def decode_patch(patch: TaskPatch) -> dict[str, FieldChange]:
    """Return a FieldChange for every patchable field of patch."""
    sent = patch.model_fields_set
    changes: dict[str, FieldChange] = {}
    for field in PATCHABLE_FIELDS:
        if field not in sent:
            changes[field] = UNSET
        else:
            changes[field] = set_to(getattr(patch, field))
    return changes


def resolve_phantom_parent(
    patch: TaskPatch | Any,
    changes: dict[str, FieldChange],
    phantom_ids: Mapping[Any, int],
) -> dict[str, FieldChange]:
    """Point parent_id at a task created earlier in the batch when the patch names its phantom id.

    A non-null parentId in the same patch takes precedence. Unknown phantoms are ignored.
    """
    phantom_parent = getattr(patch, "phantom_parent_id", None)
    if phantom_parent is None or changes["parent_id"].state is FieldState.SET:
        return changes
    if phantom_parent not in phantom_ids:
        return changes
    resolved = dict(changes)
    resolved["parent_id"] = set_to(phantom_ids[phantom_parent])
    return resolved


def apply_changes(task: GanttTask, changes: Mapping[str, FieldChange]) -> list[str]:
    """Write every non-UNSET change onto task; return the field names written."""
    written = []
    for field, change in changes.items():
        if change.is_unset:
            continue
        if change.state is FieldState.CLEAR:
            value = _CLEARED_VALUE.get(field)
        else:
            value = change.value
        setattr(task, field, value)
        written.append(field)
    return written
