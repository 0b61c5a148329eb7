from __future__ import annotations
import logging
from enum import Enum, auto
from typing import Callable, Optional

from .model import FieldList
from .store import FieldListStore
from .history import HistoryManager
from .reducer import clamp_index

log = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = auto()
    DRAGGING = auto()


class DragReorderController:
    """
    Turns one pointer-drag gesture into live, uncommitted moves on the store
    and a single history commit when the gesture ends.

        drag.start("email", 2)   # Idle -> Dragging
        drag.over(0)             # live move, no commit
        drag.end()               # Dragging -> Idle, one commit
    """

    def __init__(self, store: FieldListStore, history: HistoryManager,
                 notify: Optional[Callable[[FieldList], None]] = None):
        self.store = store
        self.history = history
        self.notify = notify
        self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.dragged_id: Optional[str] = None
        self.origin_index: Optional[int] = None
        self.current_index: Optional[int] = None
        self._start_snapshot: Optional[FieldList] = None

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def start(self, field_id: str, origin_index: Optional[int] = None) -> bool:
        if self.is_dragging:
            log.debug("drag start ignored: gesture already in progress for %s", self.dragged_id)
            return False
        actual = self.store.index_of(field_id)
        if actual is None:
            log.debug("drag start ignored: unknown field %s", field_id)
            return False
        if origin_index is not None and origin_index != actual:
            log.debug("drag origin %s for %s corrected to %s", origin_index, field_id, actual)

        self.state = DragState.DRAGGING
        self.dragged_id = field_id
        self.origin_index = actual
        self.current_index = actual
        self._start_snapshot = self.store.fields
        return True

    def over(self, target_index: int) -> bool:
        """Live move to `target_index` (clamped). True when the order changed."""
        if not self.is_dragging:
            return False
        target = clamp_index(target_index, len(self.store))
        if target == self.current_index:
            return False
        before = self.store.fields
        after = self.store.move_to(self.dragged_id, target)
        self.current_index = target
        if after is before:
            return False
        self._notify(after)
        return True

    def end(self) -> bool:
        """Finish the gesture. True when a history entry was recorded."""
        if not self.is_dragging:
            return False
        committed = False
        if self.current_index != self.origin_index:
            committed = self.history.commit(self.store.fields)
        log.debug("drag end %s: %s -> %s (committed=%s)",
                  self.dragged_id, self.origin_index, self.current_index, committed)
        self._reset()
        return committed

    def cancel(self) -> bool:
        """Abort the gesture and restore the list as it was at `start`."""
        if not self.is_dragging:
            return False
        snapshot = self._start_snapshot
        before = self.store.fields
        self._reset()
        after = self.store.reset(snapshot)
        if after != before:
            self._notify(after)
        log.debug("drag cancelled")
        return True

    def _notify(self, fields: FieldList) -> None:
        if self.notify is not None:
            self.notify(fields)
