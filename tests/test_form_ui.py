import os
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")
from PySide6.QtCore import Qt
from PySide6.QtTest import QTest

from formstate import ChangeController, Field, FieldType
from form_ui import FormBuilderWidget, FIELD_ID_ROLE


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def widget(qapp, abc, registry, changes):
    ctl = ChangeController(abc, on_change=changes.append, registry=registry)
    w = FormBuilderWidget(ctl, registry)
    w.show()
    yield w
    w.deleteLater()


def rows(w):
    return [w.list.item(i).data(FIELD_ID_ROLE) for i in range(w.list.count())]


def test_initial_render(widget):
    assert rows(widget) == ["a", "b", "c"]
    assert widget.history_label.text() == "1 / 1"
    assert not widget.undo_btn.isEnabled()
    assert not widget.redo_btn.isEnabled()
    # all seven library fields are still available
    assert widget.predefined_combo.count() == 7


def test_edits_rerender_and_reach_host_listener(widget, changes):
    widget.controller.add_predefined("phone")
    assert rows(widget) == ["a", "b", "c", "phone"]
    assert widget.history_label.text() == "2 / 2"
    assert widget.undo_btn.isEnabled()
    assert widget.predefined_combo.count() == 6
    assert len(changes) == 1


def test_keyboard_undo_redo(widget):
    widget.controller.apply_remove("b")
    QTest.keyClick(widget, Qt.Key_Z, Qt.ControlModifier)
    assert rows(widget) == ["a", "b", "c"]
    QTest.keyClick(widget, Qt.Key_Z, Qt.ControlModifier | Qt.ShiftModifier)
    assert rows(widget) == ["a", "c"]
    QTest.keyClick(widget, Qt.Key_Z, Qt.ControlModifier)
    QTest.keyClick(widget, Qt.Key_Y, Qt.ControlModifier)
    assert rows(widget) == ["a", "c"]


def test_drag_gesture_is_one_history_step(widget):
    assert widget.begin_drag(0)
    widget.drag_to(1)
    widget.drag_to(2)
    assert rows(widget) == ["b", "c", "a"]
    assert widget.history_label.text() == "1 / 1"
    assert widget.finish_drag()
    assert widget.history_label.text() == "2 / 2"
    widget.undo_btn.click()
    assert rows(widget) == ["a", "b", "c"]


def test_escape_cancels_drag(widget):
    widget.begin_drag(2)
    widget.drag_to(0)
    assert rows(widget) == ["c", "a", "b"]
    QTest.keyClick(widget, Qt.Key_Escape)
    assert rows(widget) == ["a", "b", "c"]
    assert not widget.controller.drag.is_dragging
    assert widget.history_label.text() == "1 / 1"


def test_buttons(widget):
    widget.reset_btn.click()
    assert rows(widget) == ["firstName", "lastName", "email"]
    widget.add_custom_btn.click()
    assert rows(widget)[-1].startswith("custom-")
    widget.list.setCurrentRow(0)
    widget.remove_btn.click()
    assert rows(widget)[0] == "lastName"
    assert widget.history_label.text() == "4 / 4"


def test_details_follow_selection(widget):
    widget.list.setCurrentRow(1)
    assert widget.details.isEnabled()
    assert widget.label_edit.text() == "B"
    assert not widget.required_check.isChecked()
    assert not widget.options_box.isVisible()


def test_required_checkbox_and_label_edit(widget, changes):
    widget.list.setCurrentRow(0)
    widget.required_check.click()
    assert widget.controller.fields[0].required is True
    assert rows(widget) == ["a", "b", "c"]
    assert widget.list.currentRow() == 0
    assert widget.required_check.isChecked()

    widget.label_edit.setText("Given name")
    widget.label_edit.editingFinished.emit()
    widget.placeholder_edit.setText("  Jane  ")
    widget.placeholder_edit.editingFinished.emit()
    a = widget.controller.fields[0]
    assert (a.label, a.placeholder) == ("Given name", "Jane")
    assert widget.history_label.text() == "4 / 4"
    assert len(changes) == 3

    # finishing an edit without changing the text records nothing
    widget.label_edit.editingFinished.emit()
    assert widget.history_label.text() == "4 / 4"


def test_option_editing_panel(qapp, registry):
    size = Field(id="size", name="size", label="Size", type=FieldType.SELECT, options=("S",))
    ctl = ChangeController((size,), registry=registry)
    w = FormBuilderWidget(ctl, registry)
    w.show()
    w.list.setCurrentRow(0)
    assert w.options_box.isVisible()
    assert not w.remove_option_btn.isEnabled()

    w.option_edit.setText("M")
    QTest.keyClick(w.option_edit, Qt.Key_Return)
    assert ctl.fields[0].options == ("S", "M")
    assert w.option_edit.text() == ""
    assert w.options_list.count() == 2

    w.options_list.setCurrentRow(0)
    w.option_edit.setText("Small")
    w.update_option_btn.click()
    assert ctl.fields[0].options == ("Small", "M")
    assert w.options_list.currentRow() == 0

    w.remove_option_btn.click()
    assert ctl.fields[0].options == ("M",)

    w.option_edit.setText("  ")
    w.add_option_btn.click()
    assert w.status_label.text() == "Option text is empty"
    assert str(ctl.status()) == "4 / 4"
    w.deleteLater()
