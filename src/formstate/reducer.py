from __future__ import annotations
from dataclasses import fields as dc_fields, replace
from typing import Any, Dict, Optional, Sequence

from .model import Field, FieldList
from .commands import (
    Command, AddField, RemoveField, UpdateField, MoveField, ResetFields,
)
from .errors import DuplicateFieldId


_PATCHABLE = frozenset(f.name for f in dc_fields(Field)) - {"id"}


def reduce(fields: FieldList, cmd: Command) -> FieldList:
    """
    Pure list transformer. Never mutates the input.
    A no-op returns the very same tuple so callers can test with `is`.
    Raises DuplicateFieldId / ValueError on impossible edits.
    """
    if isinstance(cmd, AddField):
        return add_field(fields, cmd.field)
    if isinstance(cmd, RemoveField):
        return remove_field(fields, cmd.field_id)
    if isinstance(cmd, UpdateField):
        return update_field(fields, cmd.field_id, cmd.patch)
    if isinstance(cmd, MoveField):
        return move_field(fields, cmd.field_id, cmd.index)
    if isinstance(cmd, ResetFields):
        return reset_fields(fields, cmd.fields)

    raise ValueError(f"Unsupported command: {type(cmd).__name__}")


def add_field(fields: FieldList, new: Field) -> FieldList:
    if index_of(fields, new.id) is not None:
        raise DuplicateFieldId(new.id)
    return tuple(fields) + (new,)


def remove_field(fields: FieldList, field_id: str) -> FieldList:
    idx = index_of(fields, field_id)
    if idx is None:
        return fields
    return tuple(fields[:idx]) + tuple(fields[idx + 1:])


def update_field(fields: FieldList, field_id: str, patch: Dict[str, Any]) -> FieldList:
    if "id" in patch and patch["id"] != field_id:
        raise ValueError("Field ids are stable and cannot be patched.")
    unknown = set(patch) - _PATCHABLE - {"id"}
    if unknown:
        raise ValueError(f"Unknown field attribute(s): {', '.join(sorted(unknown))}")

    idx = index_of(fields, field_id)
    if idx is None:
        return fields
    old = fields[idx]
    changes = {k: v for k, v in patch.items() if k != "id"}
    new = replace(old, **changes)
    if new == old:
        return fields
    return tuple(fields[:idx]) + (new,) + tuple(fields[idx + 1:])


def move_field(fields: FieldList, field_id: str, target_index: int) -> FieldList:
    idx = index_of(fields, field_id)
    if idx is None:
        return fields
    target = clamp_index(target_index, len(fields))
    if target == idx:
        return fields
    lst = list(fields)
    item = lst.pop(idx)
    lst.insert(target, item)
    return tuple(lst)


def reset_fields(fields: FieldList, new_fields: Sequence[Field]) -> FieldList:
    new = tuple(new_fields)
    seen = set()
    for f in new:
        if f.id in seen:
            raise DuplicateFieldId(f.id)
        seen.add(f.id)
    if new == tuple(fields):
        return fields
    return new


# ----- helpers -----

def index_of(fields: FieldList, field_id: str) -> Optional[int]:
    for i, f in enumerate(fields):
        if f.id == field_id:
            return i
    return None


def clamp_index(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(int(index), length - 1))
