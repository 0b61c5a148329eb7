# src/form_ui.py
from __future__ import annotations

from typing import Callable, Optional

from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtCore import Qt

from fieldregistry import FieldRegistry
from formstate import ChangeController, FieldList
from form_keys import KeyChord, Keymap


FIELD_ID_ROLE = Qt.UserRole


def chord_from_event(event: QtGui.QKeyEvent) -> KeyChord:
    """Translate a Qt key event into a toolkit-free KeyChord."""
    mods = event.modifiers()
    key = QtGui.QKeySequence(event.key()).toString().lower()
    return KeyChord(
        key=key,
        ctrl=bool(mods & Qt.ControlModifier),
        meta=bool(mods & Qt.MetaModifier),
        shift=bool(mods & Qt.ShiftModifier),
        alt=bool(mods & Qt.AltModifier),
    )


class FormBuilderWidget(QtWidgets.QWidget):
    """
    Field list editor: ordered list with drag reordering, undo/redo buttons,
    a history indicator ("3 / 7") and add/remove/reset actions.

    All edits go through the ChangeController; the widget only re-renders
    from `controller.fields` when `on_change` fires.
    """

    def __init__(self, controller: ChangeController, registry: FieldRegistry,
                 keymap: Optional[Keymap] = None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.registry = registry
        self.keymap = keymap or Keymap()

        # chain any listener the host installed before us
        self._external_on_change: Optional[Callable[[FieldList], None]] = controller.on_change
        controller.on_change = self._on_fields_changed

        self.setFocusPolicy(Qt.StrongFocus)

        # --------- History row ----------
        self.undo_btn = QtWidgets.QPushButton("Undo")
        self.undo_btn.setToolTip("Undo (Ctrl+Z)")
        self.redo_btn = QtWidgets.QPushButton("Redo")
        self.redo_btn.setToolTip("Redo (Ctrl+Y)")
        self.history_label = QtWidgets.QLabel()
        self.history_label.setObjectName("historyIndicator")
        self.reset_btn = QtWidgets.QPushButton("Reset")
        self.reset_btn.setToolTip("Restore the default fields")

        self.undo_btn.clicked.connect(self.controller.request_undo)
        self.redo_btn.clicked.connect(self.controller.request_redo)
        self.reset_btn.clicked.connect(self._reset_to_defaults)

        history_row = QtWidgets.QHBoxLayout()
        history_row.addWidget(self.undo_btn)
        history_row.addWidget(self.redo_btn)
        history_row.addWidget(self.history_label)
        history_row.addStretch()
        history_row.addWidget(self.reset_btn)

        # --------- Field list ----------
        self.list = QtWidgets.QListWidget()
        self.list.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.list.setDragDropMode(QtWidgets.QAbstractItemView.NoDragDrop)
        self.list.viewport().installEventFilter(self)

        # --------- Add / remove row ----------
        self.predefined_combo = QtWidgets.QComboBox()
        self.add_predefined_btn = QtWidgets.QPushButton("Add")
        self.add_custom_btn = QtWidgets.QPushButton("Add custom field")
        self.remove_btn = QtWidgets.QPushButton("Remove")

        self.add_predefined_btn.clicked.connect(self._add_predefined)
        self.add_custom_btn.clicked.connect(self._add_custom)
        self.remove_btn.clicked.connect(self._remove_selected)

        add_row = QtWidgets.QHBoxLayout()
        add_row.addWidget(self.predefined_combo, 1)
        add_row.addWidget(self.add_predefined_btn)
        add_row.addWidget(self.add_custom_btn)
        add_row.addWidget(self.remove_btn)

        # --------- Selected field ----------
        self.details = QtWidgets.QGroupBox("Field")
        self.label_edit = QtWidgets.QLineEdit()
        self.placeholder_edit = QtWidgets.QLineEdit()
        self.required_check = QtWidgets.QCheckBox("Required")

        self.label_edit.editingFinished.connect(self._commit_label)
        self.placeholder_edit.editingFinished.connect(self._commit_placeholder)
        # clicked, not toggled: programmatic setChecked must not edit
        self.required_check.clicked.connect(self._toggle_required)

        self.options_box = QtWidgets.QWidget()
        self.options_list = QtWidgets.QListWidget()
        self.option_edit = QtWidgets.QLineEdit()
        self.option_edit.setPlaceholderText("Option text")
        self.add_option_btn = QtWidgets.QPushButton("Add option")
        self.update_option_btn = QtWidgets.QPushButton("Rename")
        self.remove_option_btn = QtWidgets.QPushButton("Remove option")

        self.options_list.currentRowChanged.connect(self._on_option_selected)
        self.option_edit.returnPressed.connect(self._add_option)
        self.add_option_btn.clicked.connect(self._add_option)
        self.update_option_btn.clicked.connect(self._update_option)
        self.remove_option_btn.clicked.connect(self._remove_option)

        option_row = QtWidgets.QHBoxLayout()
        option_row.addWidget(self.option_edit, 1)
        option_row.addWidget(self.add_option_btn)
        option_row.addWidget(self.update_option_btn)
        option_row.addWidget(self.remove_option_btn)
        options_layout = QtWidgets.QVBoxLayout(self.options_box)
        options_layout.setContentsMargins(0, 0, 0, 0)
        options_layout.addWidget(self.options_list)
        options_layout.addLayout(option_row)

        form = QtWidgets.QFormLayout(self.details)
        form.addRow("Label", self.label_edit)
        form.addRow("Placeholder", self.placeholder_edit)
        form.addRow("", self.required_check)
        form.addRow("Options", self.options_box)

        self._detail_id: Optional[str] = None
        self._options_for: Optional[str] = None
        self.list.currentRowChanged.connect(lambda _row: self._load_details())

        self.status_label = QtWidgets.QLabel()
        self.status_label.setObjectName("toast")

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(history_row)
        layout.addWidget(self.list, 1)
        layout.addLayout(add_row)
        layout.addWidget(self.details)
        layout.addWidget(self.status_label)

        self.refresh()

    # ------------- Rendering -------------

    def refresh(self) -> None:
        fields = self.controller.fields
        selected = self.selected_field_id()

        self.list.clear()
        for f in fields:
            text = f"{f.label}  ·  {self.registry.kind_label(f.type)}"
            if f.required:
                text += "  *"
            item = QtWidgets.QListWidgetItem(text)
            item.setData(FIELD_ID_ROLE, f.id)
            self.list.addItem(item)
            if f.id == selected:
                self.list.setCurrentItem(item)

        status = self.controller.status()
        self.undo_btn.setEnabled(status.can_undo)
        self.redo_btn.setEnabled(status.can_redo)
        self.history_label.setText(str(status))

        self.predefined_combo.clear()
        for f in self.registry.available_predefined(fields):
            self.predefined_combo.addItem(f.label, f.id)
        self.add_predefined_btn.setEnabled(self.predefined_combo.count() > 0)
        self._load_details()

    def _load_details(self) -> None:
        """Fill the field panel from the selected field."""
        field_id = self.selected_field_id()
        idx = self.controller.store.index_of(field_id) if field_id else None
        f = self.controller.fields[idx] if idx is not None else None
        self._detail_id = f.id if f is not None else None
        self.details.setEnabled(f is not None)
        if f is None:
            self.label_edit.clear()
            self.placeholder_edit.clear()
            self.required_check.setChecked(False)
            self.options_box.setVisible(False)
            return

        self.label_edit.setText(f.label)
        self.placeholder_edit.setText(f.placeholder or "")
        self.required_check.setChecked(f.required)

        has_options = self.registry.requires_options(f.type)
        self.options_box.setVisible(has_options)
        # keep the option cursor while the same field stays selected
        row = self.options_list.currentRow() if f.id == self._options_for else -1
        self._options_for = f.id
        self.options_list.clear()
        if has_options:
            self.options_list.addItems(list(f.options or ()))
            if 0 <= row < self.options_list.count():
                self.options_list.setCurrentRow(row)
        self._on_option_selected(self.options_list.currentRow())

    def _on_option_selected(self, row: int) -> None:
        self.update_option_btn.setEnabled(row >= 0)
        self.remove_option_btn.setEnabled(row >= 0)

    def toast(self, message: str, ttl: float = 2.0) -> None:
        self.status_label.setText(message)
        QtCore.QTimer.singleShot(int(ttl * 1000), lambda: self._clear_toast(message))

    def _clear_toast(self, message: str) -> None:
        if self.status_label.text() == message:
            self.status_label.clear()

    def selected_field_id(self) -> Optional[str]:
        item = self.list.currentItem()
        return item.data(FIELD_ID_ROLE) if item is not None else None

    def _on_fields_changed(self, fields: FieldList) -> None:
        self.refresh()
        if self._external_on_change is not None:
            self._external_on_change(fields)

    # ------------- Actions -------------

    def _add_predefined(self) -> None:
        field_id = self.predefined_combo.currentData()
        if field_id and not self.controller.add_predefined(field_id):
            self.toast(self.controller.last_error or "Field not added")

    def _add_custom(self) -> None:
        new = self.controller.add_custom_field()
        if new is None:
            self.toast(self.controller.last_error or "Field not added")

    def _remove_selected(self) -> None:
        field_id = self.selected_field_id()
        if field_id:
            self.controller.apply_remove(field_id)

    def _edit(self, ok: bool) -> None:
        if not ok and self.controller.last_error:
            self.toast(self.controller.last_error)

    def _commit_label(self) -> None:
        if self._detail_id:
            self._edit(self.controller.apply_update(self._detail_id, {"label": self.label_edit.text()}))

    def _commit_placeholder(self) -> None:
        if self._detail_id:
            text = self.placeholder_edit.text().strip()
            self._edit(self.controller.apply_update(self._detail_id, {"placeholder": text or None}))

    def _toggle_required(self) -> None:
        if self._detail_id:
            self._edit(self.controller.toggle_required(self._detail_id))

    def _add_option(self) -> None:
        if not self._detail_id:
            return
        ok = self.controller.add_option(self._detail_id, self.option_edit.text())
        if ok:
            self.option_edit.clear()
        self._edit(ok)

    def _update_option(self) -> None:
        row = self.options_list.currentRow()
        if self._detail_id and row >= 0:
            self._edit(self.controller.update_option(self._detail_id, row, self.option_edit.text()))

    def _remove_option(self) -> None:
        row = self.options_list.currentRow()
        if self._detail_id and row >= 0:
            self._edit(self.controller.remove_option(self._detail_id, row))

    def _reset_to_defaults(self) -> None:
        if not self.controller.reset_to_defaults():
            self.toast("Already at defaults", ttl=1.0)

    # ------------- Drag gesture -------------

    def begin_drag(self, row: int) -> bool:
        item = self.list.item(row)
        if item is None:
            return False
        return self.controller.drag.start(item.data(FIELD_ID_ROLE), row)

    def drag_to(self, row: int) -> bool:
        return self.controller.drag.over(row)

    def finish_drag(self) -> bool:
        committed = self.controller.drag.end()
        # end() does not notify; buttons and indicator still need the new depth
        self.refresh()
        return committed

    def cancel_drag(self) -> bool:
        cancelled = self.controller.drag.cancel()
        if cancelled:
            self.toast("Move cancelled", ttl=1.0)
        return cancelled

    def _row_at(self, pos: QtCore.QPoint) -> int:
        row = self.list.indexAt(pos).row()
        if row < 0:
            # below the last item counts as "move to the end"
            row = self.list.count() - 1 if pos.y() > 0 else 0
        return row

    # ------------- Events -------------

    def eventFilter(self, obj, event) -> bool:
        if obj is not self.list.viewport():
            return super().eventFilter(obj, event)

        etype = event.type()
        if etype == QtCore.QEvent.MouseButtonPress and event.button() == Qt.LeftButton:
            self.begin_drag(self.list.indexAt(event.position().toPoint()).row())
            return False
        if etype == QtCore.QEvent.MouseMove and self.controller.drag.is_dragging:
            if event.buttons() & Qt.LeftButton:
                self.drag_to(self._row_at(event.position().toPoint()))
                return True
        if etype == QtCore.QEvent.MouseButtonRelease and self.controller.drag.is_dragging:
            self.finish_drag()
            return False
        return super().eventFilter(obj, event)

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:
        if event.key() == Qt.Key_Escape and self.controller.drag.is_dragging:
            self.cancel_drag()
            event.accept()
            return

        action = self.keymap.resolve(chord_from_event(event))
        if action is not None:
            self.controller.handle_action(action)
            event.accept()
            return

        if event.key() == Qt.Key_Delete:
            self._remove_selected()
            event.accept()
            return

        super().keyPressEvent(event)
