from __future__ import annotations
import logging
from collections import deque
from typing import Iterable

from .model import Field, FieldList, HistoryState, HistoryStatus
from .serialize import serialize

log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


class HistoryManager:
    """
    Bounded past/present/future stacks of field-list snapshots.

    Only `commit` records new states. Snapshots handed back by `undo`/`redo`
    must be applied by the caller without going through `commit` again,
    otherwise the redo stack is wiped on every undo.

    The future stack has no cap of its own: entries only reach it from
    `past`, so it never holds more than `capacity` snapshots.
    """

    def __init__(self, initial: Iterable[Field] = (), capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.capacity = capacity
        self._state = HistoryState(
            past=deque(maxlen=capacity),
            present=tuple(initial),
            future=[],
        )

    # ----- read-only views -----

    @property
    def present(self) -> FieldList:
        return self._state.present

    @property
    def past(self) -> tuple:
        return tuple(self._state.past)

    @property
    def future(self) -> tuple:
        # nearest redo target last, same orientation as `past`
        return tuple(self._state.future)

    @property
    def can_undo(self) -> bool:
        return bool(self._state.past)

    @property
    def can_redo(self) -> bool:
        return bool(self._state.future)

    def status(self) -> HistoryStatus:
        n_past = len(self._state.past)
        return HistoryStatus(
            position=n_past + 1,
            depth=n_past + 1 + len(self._state.future),
            can_undo=self.can_undo,
            can_redo=self.can_redo,
        )

    # ----- transitions -----

    def commit(self, snapshot: Iterable[Field]) -> bool:
        """Record `snapshot` as the new present. Returns False when deduplicated."""
        snap = tuple(snapshot)
        st = self._state
        if snap is st.present or serialize(snap) == serialize(st.present):
            return False
        if len(st.past) == self.capacity:
            log.debug("history full (%d); evicting oldest snapshot", self.capacity)
        st.past.append(st.present)
        st.present = snap
        st.future.clear()
        log.debug("commit: %d field(s), history %s", len(snap), self.status())
        return True

    def undo(self) -> FieldList:
        st = self._state
        if not st.past:
            return st.present
        st.future.append(st.present)
        st.present = st.past.pop()
        log.debug("undo -> %s", self.status())
        return st.present

    def redo(self) -> FieldList:
        st = self._state
        if not st.future:
            return st.present
        st.past.append(st.present)
        st.present = st.future.pop()
        log.debug("redo -> %s", self.status())
        return st.present

    def clear(self) -> None:
        """Forget past and future; keep the present snapshot."""
        self._state.past.clear()
        self._state.future.clear()
