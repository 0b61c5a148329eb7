from __future__ import annotations
import logging
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, List, Optional

from .model import CHOICE_TYPES, Field, FieldList, HistoryStatus
from .commands import (
    Command, AddField, RemoveField, UpdateField, MoveField, ResetFields,
)
from .store import FieldListStore
from .history import HistoryManager, DEFAULT_CAPACITY
from .drag import DragReorderController
from .protocol import RegistryProtocol

log = logging.getLogger(__name__)


class ChangeOrigin(Enum):
    EDIT = auto()       # user edit: recorded in history
    LIVE = auto()       # drag step: shown, never recorded
    HISTORY = auto()    # undo/redo restore: shown, never recorded


class ChangeController:
    """
    Entry point for the host UI.

    Every successful operation ends in exactly one `on_change(fields)` call;
    operations that leave the list unchanged (or are rejected) return False
    and do not notify. Rejected edits keep their message in `last_error`.
    """

    def __init__(self, fields: Iterable[Field] = (),
                 on_change: Optional[Callable[[FieldList], None]] = None,
                 registry: Optional[RegistryProtocol] = None,
                 capacity: int = DEFAULT_CAPACITY):
        self.store = FieldListStore(fields)
        self.history = HistoryManager(self.store.fields, capacity=capacity)
        self.on_change = on_change
        self.registry = registry
        self.drag = DragReorderController(
            self.store, self.history,
            notify=lambda f: self._emit(f, ChangeOrigin.LIVE),
        )
        self.last_error: Optional[str] = None

    # ----- read-only -----

    @property
    def fields(self) -> FieldList:
        return self.store.fields

    def status(self) -> HistoryStatus:
        return self.history.status()

    # ----- edits (committed) -----

    def apply(self, cmd: Command) -> bool:
        self._settle_drag()
        self.last_error = None
        before = self.store.fields
        try:
            after = self.store.apply(cmd)
        except ValueError as e:
            self.last_error = str(e)
            log.warning("%s rejected: %s", type(cmd).__name__, e)
            return False
        return self._publish(before, after, ChangeOrigin.EDIT)

    def apply_add(self, field: Field) -> bool:
        return self.apply(AddField(field))

    def apply_remove(self, field_id: str) -> bool:
        return self.apply(RemoveField(field_id))

    def apply_update(self, field_id: str, patch: Dict[str, Any]) -> bool:
        return self.apply(UpdateField(field_id, dict(patch)))

    def apply_move(self, field_id: str, index: int) -> bool:
        """Single-step reorder (keyboard move); drags go through `self.drag`."""
        return self.apply(MoveField(field_id, index))

    def apply_reset(self, fields: Iterable[Field]) -> bool:
        return self.apply(ResetFields(tuple(fields)))

    # ----- per-field edits (one commit each) -----

    def toggle_required(self, field_id: str) -> bool:
        f = self._find(field_id)
        if f is None:
            return False
        return self.apply_update(field_id, {"required": not f.required})

    def add_option(self, field_id: str, value: str) -> bool:
        f = self._choice_field(field_id)
        value = (value or "").strip()
        if f is None:
            return False
        if not value:
            self._reject("Option text is empty")
            return False
        return self.apply_update(field_id, {"options": (f.options or ()) + (value,)})

    def remove_option(self, field_id: str, index: int) -> bool:
        f = self._choice_field(field_id, index)
        if f is None:
            return False
        opts = f.options[:index] + f.options[index + 1:]
        return self.apply_update(field_id, {"options": opts})

    def update_option(self, field_id: str, index: int, value: str) -> bool:
        f = self._choice_field(field_id, index)
        value = (value or "").strip()
        if f is None:
            return False
        if not value:
            self._reject("Option text is empty")
            return False
        opts = f.options[:index] + (value,) + f.options[index + 1:]
        return self.apply_update(field_id, {"options": opts})

    # ----- history navigation (never committed) -----

    def request_undo(self) -> bool:
        self._settle_drag()
        if not self.history.can_undo:
            log.debug("undo: nothing to undo")
            return False
        self.apply_from_history(self.history.undo())
        return True

    def request_redo(self) -> bool:
        self._settle_drag()
        if not self.history.can_redo:
            log.debug("redo: nothing to redo")
            return False
        self.apply_from_history(self.history.redo())
        return True

    def apply_from_history(self, snapshot: Iterable[Field]) -> bool:
        """Install a snapshot produced by undo/redo without committing it."""
        self._settle_drag()
        before = self.store.fields
        after = self.store.reset(snapshot)
        return self._publish(before, after, ChangeOrigin.HISTORY)

    def handle_action(self, action: Optional[str]) -> bool:
        """Dispatch a resolved shortcut action ("undo" / "redo")."""
        if action == "undo":
            return self.request_undo()
        if action == "redo":
            return self.request_redo()
        return False

    # ----- registry conveniences -----

    def add_custom_field(self) -> Optional[Field]:
        new = self._require_registry().new_custom_field(self.store.fields)
        return new if self.apply_add(new) else None

    def add_predefined(self, field_id: str) -> bool:
        try:
            new = self._require_registry().predefined(field_id)
        except KeyError:
            self._reject(f"Unknown predefined field: {field_id}")
            return False
        return self.apply_add(new)

    def available_predefined(self) -> List[Field]:
        return self._require_registry().available_predefined(self.store.fields)

    def reset_to_defaults(self) -> bool:
        return self.apply_reset(self._require_registry().defaults())

    # ----- internals -----

    def _settle_drag(self) -> None:
        # a gesture still open when another input arrives is finished first
        if self.drag.is_dragging:
            self.drag.end()

    def _publish(self, before: FieldList, after: FieldList, origin: ChangeOrigin) -> bool:
        if after is before or after == before:
            return False
        if origin is ChangeOrigin.EDIT:
            self.history.commit(after)
        self._emit(after, origin)
        return True

    def _emit(self, fields: FieldList, origin: ChangeOrigin) -> None:
        log.debug("on_change (%s): %d field(s)", origin.name.lower(), len(fields))
        if self.on_change is not None:
            self.on_change(fields)

    def _find(self, field_id: str) -> Optional[Field]:
        idx = self.store.index_of(field_id)
        if idx is None:
            self._reject(f"Unknown field: {field_id}")
            return None
        return self.store.fields[idx]

    def _choice_field(self, field_id: str, index: Optional[int] = None) -> Optional[Field]:
        """Look up a field that carries options; `index`, when given, must address one."""
        f = self._find(field_id)
        if f is None:
            return None
        if f.type not in CHOICE_TYPES:
            self._reject(f"Field {field_id} ({f.type.value}) has no options")
            return None
        if index is not None and not 0 <= index < len(f.options or ()):
            self._reject(f"Field {field_id} has no option #{index}")
            return None
        return f

    def _reject(self, message: str) -> None:
        self.last_error = message
        log.warning(message)

    def _require_registry(self) -> RegistryProtocol:
        if self.registry is None:
            raise RuntimeError("ChangeController was created without a field registry.")
        return self.registry
