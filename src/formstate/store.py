from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from .model import Field, FieldList
from .commands import (
    Command, AddField, RemoveField, UpdateField, MoveField, ResetFields,
)
from .reducer import reduce, index_of


class FieldListStore:
    """
    Holds the authoritative field list and swaps it for the result of the
    pure reducer on every edit.

    Usage:
        store = FieldListStore(initial_fields)
        store.add(Field(id="email", name="email", label="Email"))
        store.move_to("email", 0)

    Every method returns the resulting list; a no-op returns the same object.
    """

    def __init__(self, fields: Iterable[Field] = ()):
        self._fields: FieldList = ()
        self.reset(fields)

    @property
    def fields(self) -> FieldList:
        return self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def index_of(self, field_id: str) -> Optional[int]:
        return index_of(self._fields, field_id)

    def apply(self, cmd: Command) -> FieldList:
        self._fields = reduce(self._fields, cmd)
        return self._fields

    def add(self, field: Field) -> FieldList:
        return self.apply(AddField(field))

    def remove(self, field_id: str) -> FieldList:
        return self.apply(RemoveField(field_id))

    def update(self, field_id: str, patch: Dict[str, Any]) -> FieldList:
        return self.apply(UpdateField(field_id, dict(patch)))

    def move_to(self, field_id: str, target_index: int) -> FieldList:
        return self.apply(MoveField(field_id, target_index))

    def reset(self, fields: Iterable[Field]) -> FieldList:
        return self.apply(ResetFields(tuple(fields)))
