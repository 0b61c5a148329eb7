from __future__ import annotations
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Tuple


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    SELECT = "select"
    TEXTAREA = "textarea"


# kinds that carry an ordered list of options
CHOICE_TYPES = frozenset({FieldType.SELECT})


@dataclass(frozen=True)
class Field:
    id: str
    name: str
    label: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "type", FieldType(self.type))
        if self.type not in CHOICE_TYPES:
            object.__setattr__(self, "options", None)
        elif self.options is not None:
            # a bare string would otherwise be split into characters
            if isinstance(self.options, (str, bytes)) or not isinstance(self.options, Iterable):
                raise ValueError(f"Field {self.id} options must be a list of strings, got: {self.options!r}")
            object.__setattr__(self, "options", tuple(str(o) for o in self.options))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["type"] = self.type.value
        if self.options is not None:
            d["options"] = list(self.options)
        return d


# Ordered, immutable; the index is the display/tab order.
FieldList = Tuple[Field, ...]


@dataclass(frozen=True)
class HistoryStatus:
    """Read-only view of the history for undo/redo affordances."""
    position: int     # 1-based index of `present` in past+present+future
    depth: int        # total number of states
    can_undo: bool
    can_redo: bool

    def __str__(self) -> str:
        return f"{self.position} / {self.depth}"


@dataclass
class HistoryState:
    past: Deque[Tuple[Field, ...]] = field(default_factory=deque)
    present: FieldList = ()
    future: List[Tuple[Field, ...]] = field(default_factory=list)
