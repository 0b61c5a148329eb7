from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from .model import Field


class Command:
    """Marker base class for all field-list edits (intents)."""
    pass


@dataclass
class AddField(Command):
    field: Field


@dataclass
class RemoveField(Command):
    field_id: str


@dataclass
class UpdateField(Command):
    field_id: str
    patch: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MoveField(Command):
    """Move to an absolute index; out-of-range indices are clamped."""
    field_id: str
    index: int


@dataclass
class ResetFields(Command):
    """Replace the whole list (restore defaults, load a document)."""
    fields: Sequence[Field] = ()
