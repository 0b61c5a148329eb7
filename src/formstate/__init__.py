"""
Public API for the formstate package.

Import from here everywhere else, so you can refactor internals freely:
    from formstate import (
        Field, FieldType, FieldList, HistoryStatus,
        AddField, RemoveField, UpdateField, MoveField, ResetFields,
        FieldListStore, HistoryManager, DragReorderController,
        ChangeController, ChangeOrigin, DuplicateFieldId,
    )
"""
from .model import (
    Field, FieldType, FieldList, CHOICE_TYPES, HistoryState, HistoryStatus,
)
from .commands import (
    Command,
    AddField, RemoveField, UpdateField, MoveField, ResetFields,
)
from .errors import DuplicateFieldId
from .protocol import RegistryProtocol
from .reducer import reduce
from .serialize import serialize, to_records
from .store import FieldListStore
from .history import HistoryManager, DEFAULT_CAPACITY
from .drag import DragReorderController, DragState
from .controller import ChangeController, ChangeOrigin

__all__ = [
    # model
    "Field", "FieldType", "FieldList", "CHOICE_TYPES", "HistoryState", "HistoryStatus",
    # commands
    "Command",
    "AddField", "RemoveField", "UpdateField", "MoveField", "ResetFields",
    # errors & protocol
    "DuplicateFieldId", "RegistryProtocol",
    # reducer, store & history
    "reduce", "serialize", "to_records", "FieldListStore",
    "HistoryManager", "DEFAULT_CAPACITY",
    "DragReorderController", "DragState",
    "ChangeController", "ChangeOrigin",
]
