# src/form_keys.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union


# -------------------------
# Action kinds
# -------------------------

UNDO = "undo"
REDO = "redo"

DEFAULT_BINDINGS: Dict[str, List[str]] = {
    UNDO: ["Primary+Z"],
    REDO: ["Primary+Y", "Primary+Shift+Z"],
}


@dataclass(frozen=True)
class KeyChord:
    """
    One key press with its modifiers, independent of any GUI toolkit.
    `primary` is Ctrl on Windows/Linux and Cmd on macOS; bindings written as
    "Primary+Z" match either.
    """
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False
    primary: bool = False

    def matches(self, pressed: "KeyChord") -> bool:
        if self.key != pressed.key or self.shift != pressed.shift or self.alt != pressed.alt:
            return False
        if self.primary:
            return pressed.ctrl or pressed.meta
        return self.ctrl == pressed.ctrl and self.meta == pressed.meta


_MODIFIERS = {
    "ctrl": "ctrl", "control": "ctrl",
    "cmd": "meta", "meta": "meta", "command": "meta",
    "shift": "shift",
    "alt": "alt", "option": "alt",
    "primary": "primary", "mod": "primary",
}


def parse_chord(text: str) -> KeyChord:
    """'Ctrl+Shift+Z' -> KeyChord(key='z', ctrl=True, shift=True)."""
    parts = [p.strip() for p in str(text).split("+") if p.strip()]
    if not parts:
        raise ValueError(f"Empty key binding: {text!r}")
    key = parts[-1].lower()
    flags = {"ctrl": False, "meta": False, "shift": False, "alt": False, "primary": False}
    for mod in parts[:-1]:
        name = _MODIFIERS.get(mod.lower())
        if name is None:
            raise ValueError(f"Unknown modifier {mod!r} in key binding {text!r}")
        flags[name] = True
    return KeyChord(key=key, **flags)


class Keymap:
    """
    Resolve key chords to semantic actions.

        keys = Keymap.from_config({"undo": "Primary+Z"})
        keys.resolve(KeyChord("z", ctrl=True))  # -> "undo"
    """

    def __init__(self, bindings: Optional[Mapping[str, Union[str, Iterable[str]]]] = None):
        self._bindings: List[tuple] = []
        merged: Dict[str, Union[str, Iterable[str]]] = dict(DEFAULT_BINDINGS)
        merged.update(bindings or {})
        for action, chords in merged.items():
            if isinstance(chords, str):
                chords = [chords]
            for c in chords:
                self._bindings.append((parse_chord(c), action))

    @classmethod
    def from_config(cls, keys_cfg: Optional[Mapping[str, Union[str, Iterable[str]]]]) -> "Keymap":
        return cls(keys_cfg or {})

    def resolve(self, pressed: KeyChord) -> Optional[str]:
        pressed = KeyChord(
            key=pressed.key.lower(), ctrl=pressed.ctrl, meta=pressed.meta,
            shift=pressed.shift, alt=pressed.alt,
        )
        for chord, action in self._bindings:
            if chord.matches(pressed):
                return action
        return None

    def bindings_for(self, action: str) -> List[KeyChord]:
        return [c for c, a in self._bindings if a == action]
