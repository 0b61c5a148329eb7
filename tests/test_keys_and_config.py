import pytest
from form_keys import Keymap, KeyChord, parse_chord, UNDO, REDO
from form_app import load_config, build_editor, open_document, main, DEFAULT_CONFIG


@pytest.mark.parametrize("chord,expected", [
    (KeyChord("z", ctrl=True), UNDO),
    (KeyChord("z", meta=True), UNDO),
    (KeyChord("Z", ctrl=True), UNDO),
    (KeyChord("y", ctrl=True), REDO),
    (KeyChord("z", meta=True, shift=True), REDO),
    (KeyChord("z"), None),
    (KeyChord("z", ctrl=True, alt=True), None),
    (KeyChord("s", ctrl=True), None),
])
def test_default_keymap(chord, expected):
    assert Keymap().resolve(chord) == expected


def test_parse_chord():
    c = parse_chord("Ctrl+Shift+Z")
    assert c == KeyChord("z", ctrl=True, shift=True)
    assert parse_chord("Primary+y").primary
    with pytest.raises(ValueError):
        parse_chord("Hyper+Z")
    with pytest.raises(ValueError):
        parse_chord("")


def test_keymap_overrides_from_config():
    keys = Keymap.from_config({"redo": "Ctrl+R"})
    assert keys.resolve(KeyChord("r", ctrl=True)) == REDO
    assert keys.resolve(KeyChord("y", ctrl=True)) is None
    # explicit Ctrl does not match Cmd
    assert keys.resolve(KeyChord("r", meta=True)) is None
    assert keys.resolve(KeyChord("z", ctrl=True)) == UNDO


def test_load_config_merges_over_defaults(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("history:\n  capacity: 5\nkeys:\n  undo: Ctrl+U\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg["history"]["capacity"] == 5
    assert cfg["keys"]["undo"] == "Ctrl+U"
    assert cfg["keys"]["redo"] == DEFAULT_CONFIG["keys"]["redo"]
    # defaults untouched
    assert DEFAULT_CONFIG["history"]["capacity"] == 50


def test_missing_config_falls_back_to_defaults(tmp_path, caplog):
    cfg = load_config(str(tmp_path / "nope.yaml"))
    assert cfg == DEFAULT_CONFIG
    assert "config not found" in caplog.text


def test_build_editor_uses_config_and_target(tmp_path):
    form = tmp_path / "form.json"
    form.write_text('{"fields": [{"id": "a", "label": "A"}, {"id": "b", "label": "B"}]}', encoding="utf-8")
    cfg = load_config(None)
    cfg["history"]["capacity"] = 2

    controller, registry, exporter, keymap = build_editor(cfg, str(form))
    assert [f.id for f in controller.fields] == ["a", "b"]
    assert controller.history.capacity == 2
    for i in range(4):
        controller.add_custom_field()
    assert len(controller.history.past) == 2
    assert keymap.resolve(KeyChord("z", ctrl=True)) == UNDO


def test_build_editor_defaults_without_target():
    controller, *_ = build_editor(load_config(None))
    assert [f.id for f in controller.fields] == ["firstName", "lastName", "email"]
    assert controller.status().depth == 1


def test_open_document_starts_fresh_history(tmp_path):
    controller, _, exporter, _ = build_editor(load_config(None))
    controller.add_predefined("phone")
    form = tmp_path / "form.yaml"
    form.write_text("- id: a\n- id: b\n", encoding="utf-8")

    assert open_document(controller, exporter, form)
    assert [f.id for f in controller.fields] == ["a", "b"]
    assert not controller.history.can_undo


def test_open_identical_document_keeps_history(tmp_path):
    controller, _, exporter, _ = build_editor(load_config(None))
    controller.add_predefined("phone")
    form = exporter.write(controller.fields, tmp_path / "same.json")

    assert open_document(controller, exporter, form) is False
    assert controller.history.can_undo
    assert controller.status().depth == 2


def test_open_malformed_document_leaves_editor_untouched(tmp_path):
    controller, _, exporter, _ = build_editor(load_config(None))
    before = controller.fields
    form = tmp_path / "bad.yaml"
    form.write_text("fields: [a, b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        open_document(controller, exporter, form)
    assert controller.fields is before


def test_main_rejects_unreadable_target(tmp_path, capsys):
    form = tmp_path / "bad.yaml"
    form.write_text("- firstName\n- email\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main([str(form)])
    assert exc.value.code == 2
    assert "cannot open" in capsys.readouterr().err
