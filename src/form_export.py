# src/form_export.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from formstate import FieldList, to_records
from fieldregistry import FieldRegistry


# ---------------------------
# Public Facade
# ---------------------------

class Exporter:
    """
    Turn a field list into a form-definition document and back.

    Typical usage:
        xp = Exporter(registry)
        data = xp.build(controller.fields)   # dict
        ok, errors = xp.validate(data)       # structural checks only
        if ok:
            Path(out).write_text(xp.dumps(data, pretty=True), encoding="utf-8")
        fields = xp.load("form.yaml")        # .json / .yaml / .yml
    """

    def __init__(self, registry: FieldRegistry):
        self.registry = registry

    # ---- Build document (dict) ----
    def build(self, fields: FieldList) -> Dict[str, Any]:
        return {"fields": to_records(fields)}

    # ---- Validate definitions ----
    def validate(self, data: Dict[str, Any]) -> Tuple[bool, List[str]]:
        return _validate_document(data, self.registry)

    # ---- JSON text ----
    def dumps(self, data: Dict[str, Any], pretty: bool = True) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) if pretty else json.dumps(data, separators=(",", ":"))

    # ---- Read a document back ----
    def loads(self, text: str, fmt: str = "json") -> FieldList:
        if fmt in ("yaml", "yml"):
            try:
                raw = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML: {e}") from e
        else:
            raw = json.loads(text)  # JSONDecodeError is a ValueError
        return self.from_document(raw)

    def load(self, path: str | Path) -> FieldList:
        p = Path(path)
        return self.loads(p.read_text(encoding="utf-8"), fmt=p.suffix.lower().lstrip(".") or "json")

    def from_document(self, raw: Any) -> FieldList:
        # accept {"fields": [...]} or a bare list
        items = raw.get("fields", []) if isinstance(raw, dict) else raw
        if not isinstance(items, list):
            raise ValueError("Form definition must be a list of fields or a mapping with a 'fields' list.")
        for pos, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                raise ValueError(f"Field #{pos}: expected a mapping, got {type(item).__name__}")
        fields = tuple(self.registry.field_from_dict(item) for item in items)
        ok, errs = self.validate(self.build(fields))
        if not ok:
            raise ValueError("\n".join(errs[:5]))
        return fields

    def write(self, fields: FieldList, path: str | Path, pretty: bool = True) -> Path:
        data = self.build(fields)
        ok, errs = self.validate(data)
        if not ok:
            raise ValueError("\n".join(errs[:5]))
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.dumps(data, pretty=pretty), encoding="utf-8")
        return out


# ---------------------------
# Validation (definitions, not respondent values)
# ---------------------------

def _validate_document(data: Dict[str, Any], registry: FieldRegistry) -> Tuple[bool, List[str]]:
    """
    Check ids are unique, kinds are known, name/label are set and choice
    fields carry at least one option.
    Return (ok, errors).
    """
    errors: List[str] = []
    seen: set = set()
    for pos, rec in enumerate(data.get("fields", []), start=1):
        fid = rec.get("id")
        where = f"Field #{pos} ({fid or '?'})"
        if not fid:
            errors.append(f"{where}: missing id")
        elif fid in seen:
            errors.append(f"{where}: duplicate id")
        else:
            seen.add(fid)

        kind = registry.resolve_kind(rec.get("type"))
        if kind is None:
            errors.append(f"{where}: unknown type {rec.get('type')!r}")
        elif registry.requires_options(kind) and not rec.get("options"):
            errors.append(f"{where}: '{registry.kind_label(kind)}' needs at least one option")

        for key in ("name", "label"):
            if not str(rec.get(key) or "").strip():
                errors.append(f"{where}: missing {key}")

    return (len(errors) == 0), errors
