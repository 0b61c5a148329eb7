import pytest
from formstate import Field, HistoryManager


def F(fid, **kw):
    return Field(id=fid, name=fid, label=fid.upper(), **kw)


def lists(n):
    """n distinct snapshots: (f0,), (f0, f1), ..."""
    return [tuple(F(f"f{j}") for j in range(i + 1)) for i in range(n)]


def test_commit_pushes_present_and_clears_future():
    h = HistoryManager([F("a")])
    s1, s2 = (F("a"), F("b")), (F("b"),)
    assert h.commit(s1)
    h.undo()
    assert h.can_redo
    assert h.commit(s2)
    assert h.future == ()
    assert h.present == s2
    assert h.past == ((F("a"),),)


def test_commit_deduplicates_identical_snapshots():
    h = HistoryManager([F("a")])
    h.commit((F("a"), F("b")))
    past, future = h.past, h.future
    for _ in range(5):
        # equal content, different objects
        assert h.commit((F("a"), F("b"))) is False
    assert h.past == past
    assert h.future == future


def test_undo_redo_on_empty_stacks_are_noops():
    h = HistoryManager([F("a")])
    assert h.undo() == (F("a"),)
    assert h.redo() == (F("a"),)
    assert h.status().position == 1
    assert h.status().depth == 1


def test_undo_then_redo_round_trip():
    h = HistoryManager()
    snaps = lists(4)
    for s in snaps:
        h.commit(s)
    before = h.present
    h.undo()
    assert h.redo() == before


def test_bounded_past_evicts_oldest():
    h = HistoryManager(capacity=50)
    snaps = lists(60)
    for s in snaps:
        h.commit(s)
    assert len(h.past) == 50
    # oldest kept is the state after the 10th commit
    assert h.past[0] == snaps[9]
    assert h.present == snaps[59]


def test_redo_respects_bound_too():
    h = HistoryManager(capacity=3)
    for s in lists(3):
        h.commit(s)
    h.undo()
    h.undo()
    h.redo()
    h.redo()
    assert len(h.past) == 3


def test_status_reports_position_and_depth():
    h = HistoryManager()
    for s in lists(6):
        h.commit(s)
    h.undo()
    h.undo()
    st = h.status()
    assert (st.position, st.depth) == (5, 7)
    assert st.can_undo and st.can_redo
    assert str(st) == "5 / 7"


def test_clear_keeps_present():
    h = HistoryManager()
    for s in lists(3):
        h.commit(s)
    h.undo()
    present = h.present
    h.clear()
    assert h.present == present
    assert not h.can_undo and not h.can_redo


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryManager(capacity=0)
