from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

def _lc(x: Any) -> str:
    return str(x).strip().lower()

def normalize_enum(value: Any, mapping: Dict[str, Any]) -> Tuple[bool, Any, Optional[str]]:
    if value is None:
        return False, None, "Value is required."
    key = _lc(value)
    if key in mapping:
        return True, mapping[key], None
    return False, None, f"Invalid value: {value}"

def normalize_bool(value: Any, default: bool = False) -> Tuple[bool, Any, Optional[str]]:
    if value is None or value == "":
        return True, default, None
    if isinstance(value, bool):
        return True, value, None
    s = _lc(value)
    if s in {"y", "yes", "true", "1", "on"}:
        return True, True, None
    if s in {"n", "no", "false", "0", "off"}:
        return True, False, None
    return False, None, f"Invalid boolean: {value}"

def normalize_text(value: Any, required: bool = True) -> Tuple[bool, Any, Optional[str]]:
    if value is None or str(value).strip() == "":
        if required:
            return False, None, "Value is required."
        return True, None, None
    return True, str(value).strip(), None

def normalize_options(value: Any) -> Tuple[bool, Any, Optional[str]]:
    """Accept a list/tuple or a comma-separated string; blank entries are dropped."""
    if value is None:
        return True, None, None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return False, None, f"Expected a list of options, got: {value!r}"
    opts = tuple(str(o).strip() for o in items if o is not None and str(o).strip())
    return True, opts, None
