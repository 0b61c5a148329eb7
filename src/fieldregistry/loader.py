from __future__ import annotations
from typing import Dict, Any, Optional
from pathlib import Path

import yaml

def load_plugin_specs(path: Optional[str | Path]) -> Dict[str, Any]:
    """
    Load YAML field plugins from a directory (optional).

    Each *.yaml file may contain any of:
        kinds:      {<type id>: {aliases: [...], label: ...}}
        fields:     [<predefined field>, ...]
        defaults:   [<field id>, ...]

    Returns {"kinds": {...}, "fields": [...], "defaults": [...] | None}.
    Safe no-op if path is missing; later files win on conflicts.
    """
    out: Dict[str, Any] = {"kinds": {}, "fields": [], "defaults": None}
    if not path:
        return out
    p = Path(path)
    if not p.exists() or not p.is_dir():
        return out
    for yml in sorted(p.glob("*.yaml")):
        data = (yaml.safe_load(yml.read_text(encoding="utf-8")) or {})
        if not isinstance(data, dict):
            raise ValueError(f"{yml}: expected a mapping at top level")
        for kind, spec in (data.get("kinds") or {}).items():
            out["kinds"].setdefault(kind, {}).update(spec or {})
        for spec in data.get("fields") or []:
            if not spec.get("id"):
                raise ValueError(f"{yml}: predefined field missing 'id'")
            out["fields"].append(spec)
        if data.get("defaults") is not None:
            out["defaults"] = list(data["defaults"])
    return out
