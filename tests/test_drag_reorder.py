from formstate import DragState


def ids(fields):
    return [f.id for f in fields]


def test_live_moves_do_not_commit(controller, changes):
    drag = controller.drag
    assert drag.start("a", 0)
    assert drag.state is DragState.DRAGGING
    assert drag.over(1)
    assert drag.over(2)
    assert ids(controller.fields) == ["b", "c", "a"]
    # two live notifications, no history yet
    assert len(changes) == 2
    assert not controller.history.can_undo


def test_end_records_exactly_one_commit(controller):
    drag = controller.drag
    drag.start("c", 2)
    drag.over(1)
    drag.over(0)
    assert drag.end() is True
    assert drag.state is DragState.IDLE
    assert len(controller.history.past) == 1
    assert ids(controller.fields) == ["c", "a", "b"]
    controller.request_undo()
    assert ids(controller.fields) == ["a", "b", "c"]


def test_gesture_back_to_origin_commits_nothing(controller, changes):
    drag = controller.drag
    drag.start("a", 0)
    drag.over(2)
    drag.over(0)
    assert drag.end() is False
    assert controller.history.past == ()
    assert ids(controller.fields) == ["a", "b", "c"]
    # only the live feedback was emitted; final state equals the start
    assert ids(changes[-1]) == ["a", "b", "c"]


def test_repeated_over_same_index_is_ignored(controller, changes):
    drag = controller.drag
    drag.start("a", 0)
    assert drag.over(1)
    assert not drag.over(1)
    assert len(changes) == 1


def test_out_of_range_target_is_clamped(controller):
    drag = controller.drag
    drag.start("a", 0)
    drag.over(42)
    assert drag.current_index == 2
    assert ids(controller.fields) == ["b", "c", "a"]
    drag.over(-3)
    assert drag.current_index == 0
    assert ids(controller.fields) == ["a", "b", "c"]


def test_cancel_restores_start_snapshot(controller, changes):
    start = controller.fields
    drag = controller.drag
    drag.start("b", 1)
    drag.over(2)
    assert drag.cancel() is True
    assert controller.fields == start
    assert ids(changes[-1]) == ["a", "b", "c"]
    assert not controller.history.can_undo
    assert drag.state is DragState.IDLE


def test_origin_index_is_taken_from_the_list(controller):
    drag = controller.drag
    assert drag.start("c", 0)
    assert drag.origin_index == 2


def test_transitions_outside_a_gesture_are_ignored(controller):
    drag = controller.drag
    assert not drag.over(1)
    assert not drag.end()
    assert not drag.cancel()
    assert not drag.start("missing", 0)
    drag.start("a", 0)
    assert not drag.start("b", 1)
    assert drag.dragged_id == "a"


def test_undo_during_drag_reverts_the_drag(controller):
    controller.drag.start("a", 0)
    controller.drag.over(2)
    assert controller.request_undo()
    assert not controller.drag.is_dragging
    assert ids(controller.fields) == ["a", "b", "c"]
    assert controller.history.can_redo
