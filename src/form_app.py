# src/form_app.py
from __future__ import annotations


import argparse
import copy
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

# local imports
from fieldregistry import FieldRegistry
from formstate import ChangeController, FieldList
from form_export import Exporter
from form_keys import Keymap

log = logging.getLogger("form_app")


# ---------------------------
# Config loading
# ---------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "history": {
        "capacity": 50,
    },
    "keys": {
        # action → one binding or a list; "Primary" means Ctrl or Cmd
        "undo": ["Primary+Z"],
        "redo": ["Primary+Y", "Primary+Shift+Z"],
    },
    "registry": {
        "plugins_dir": None,
    },
    "export": {
        "pretty": True,
    },
}

def load_config(path: Optional[str]) -> Dict[str, Any]:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if not p.exists():
            log.warning("config not found: %s (using defaults)", p)
            return cfg
        with p.open("r", encoding="utf-8") as f:
            user = yaml.safe_load(f) or {}
        # shallow merge is enough here
        for k, v in user.items():
            if isinstance(v, dict) and k in cfg and isinstance(cfg[k], dict):
                cfg[k].update(v)
            else:
                cfg[k] = v
    return cfg


def build_editor(config: Dict[str, Any], target: Optional[str] = None):
    """
    Wire registry, exporter, keymap and controller from a config dict.
    The initial list comes from `target` (json/yaml) or the registry defaults.
    Returns (controller, registry, exporter, keymap).
    """
    registry = FieldRegistry(plugins_dir=config["registry"].get("plugins_dir"))
    exporter = Exporter(registry)
    keymap = Keymap.from_config(config.get("keys"))

    initial: FieldList = registry.defaults()
    if target:
        p = Path(target).expanduser()
        if p.is_file():
            initial = exporter.load(p)
        else:
            log.warning("form definition not found: %s (starting from defaults)", p)

    controller = ChangeController(
        initial,
        registry=registry,
        capacity=int(config["history"].get("capacity", 50)),
    )
    return controller, registry, exporter, keymap


def open_document(controller: ChangeController, exporter: Exporter, path: str | Path) -> bool:
    """
    Replace the editor contents with the definition at `path`.
    Raises OSError / ValueError on unreadable input. Returns False when the
    document equals the current list; history is kept in that case.
    """
    fields = exporter.load(path)
    if not controller.apply_reset(fields):
        if controller.last_error:
            raise ValueError(controller.last_error)
        return False
    # a different document starts with a fresh history
    controller.history.clear()
    return True


# ---------------------------
# App bootstrap
# ---------------------------

def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Form field editor")
    parser.add_argument("target", nargs="?", help="Path to a form definition (.json / .yaml)")
    parser.add_argument("--config", "-c", help="Path to config.yaml", default=None)
    parser.add_argument("--verbose", "-v", action="store_true", help="Log history and drag transitions")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    config = load_config(args.config)
    try:
        controller, registry, exporter, keymap = build_editor(config, args.target)
    except (OSError, ValueError) as e:
        parser.error(f"cannot open {args.target}: {e}")

    from PySide6 import QtWidgets
    from form_ui import FormBuilderWidget

    qt = QtWidgets.QApplication(sys.argv)
    win = QtWidgets.QMainWindow()
    win.setWindowTitle("Form Builder")
    editor = FormBuilderWidget(controller, registry, keymap=keymap)
    win.setCentralWidget(editor)

    current_path: Dict[str, Optional[Path]] = {"path": Path(args.target) if args.target else None}
    pretty = bool(config["export"].get("pretty", True))

    def on_open():
        name, _ = QtWidgets.QFileDialog.getOpenFileName(
            win, "Open form definition", "", "Form definitions (*.json *.yaml *.yml)")
        if not name:
            return
        try:
            open_document(controller, exporter, name)
        except (OSError, ValueError) as e:
            editor.toast(str(e), ttl=3.0)
            return
        editor.refresh()
        current_path["path"] = Path(name)
        editor.toast(f"Opened {Path(name).name}", ttl=1.2)

    def on_save():
        path = current_path["path"]
        if path is None or path.suffix.lower() != ".json":
            name, _ = QtWidgets.QFileDialog.getSaveFileName(
                win, "Save form definition", "form.json", "JSON (*.json)")
            if not name:
                return
            path = Path(name)
        try:
            exporter.write(controller.fields, path, pretty=pretty)
        except (OSError, ValueError) as e:
            editor.toast(str(e), ttl=3.0)
            return
        current_path["path"] = path
        editor.toast(f"Saved {path.name}", ttl=1.0)

    _install_menu(win, on_open, on_save)

    win.resize(720, 560)
    win.show()
    editor.setFocus()
    return qt.exec()


# ---------------------------
# Helpers
# ---------------------------

def _install_menu(win, on_open_cb, on_save_cb):
    bar = win.menuBar()
    m_file = bar.addMenu("&File")

    act_open = m_file.addAction("Open…")
    act_open.setShortcut("Ctrl+O")
    act_open.triggered.connect(on_open_cb)

    act_save = m_file.addAction("Save")
    act_save.setShortcut("Ctrl+S")
    act_save.triggered.connect(on_save_cb)

    m_file.addSeparator()
    act_exit = m_file.addAction("Exit")
    act_exit.setShortcut("Ctrl+Q")
    act_exit.triggered.connect(win.close)


if __name__ == "__main__":
    raise SystemExit(main())
