from __future__ import annotations
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
from pathlib import Path

from formstate import Field, FieldList, FieldType
from formstate.protocol import RegistryProtocol
from .normalize import normalize_enum, normalize_bool, normalize_text, normalize_options
from .specs import BUILTIN_KINDS, PREDEFINED_FIELDS, DEFAULT_FIELD_IDS, CUSTOM_FIELD_LABEL
from .loader import load_plugin_specs

log = logging.getLogger(__name__)

def _lc(x: Any) -> str:
    return str(x).strip().lower()

class FieldRegistry(RegistryProtocol):
    """
    Concrete registry with:
      - Built-in field kinds (labels, aliases, whether options are needed)
      - The predefined field library and the default field set
      - Optional YAML plugin overrides/extensions
      - Optional extra_fields injection (for tests)
    """

    def __init__(self, plugins_dir: Optional[str | Path] = None,
                 extra_fields: Optional[Iterable[Dict[str, Any]]] = None,
                 clock: Callable[[], float] = time.time):
        self._kinds: Dict[str, Dict[str, Any]] = {}
        self._aliases: Dict[str, FieldType] = {}
        self._predefined: Dict[str, Field] = {}
        self._default_ids: List[str] = list(DEFAULT_FIELD_IDS)
        self._issued_ids: Set[str] = set()
        self._clock = clock

        # 1) built-ins
        for kind, spec in BUILTIN_KINDS.items():
            self._register_kind(kind, spec)

        plugins = load_plugin_specs(plugins_dir)
        for kind, spec in plugins["kinds"].items():
            self._register_kind(kind, spec)
        self._rebuild_alias_index()

        # 2) predefined library: built-ins, caller extras, then YAML plugins
        for spec in list(PREDEFINED_FIELDS) + list(extra_fields or []) + plugins["fields"]:
            f = self.field_from_dict(spec)
            self._predefined[f.id] = f
        if plugins["defaults"] is not None:
            self._default_ids = plugins["defaults"]
        for fid in self._default_ids:
            if fid not in self._predefined:
                raise ValueError(f"Default field '{fid}' is not in the predefined library")

    # ----- kinds -----

    def kinds(self) -> List[FieldType]:
        return [FieldType(k) for k in self._kinds]

    def kind_label(self, kind: FieldType | str) -> str:
        ft = self.resolve_kind(kind)
        if ft is None:
            return str(kind)
        return self._kinds[ft.value].get("label", ft.value)

    def requires_options(self, kind: FieldType | str) -> bool:
        ft = self.resolve_kind(kind)
        return bool(ft and self._kinds[ft.value].get("requires_options"))

    def resolve_kind(self, token: Any) -> Optional[FieldType]:
        if isinstance(token, FieldType):
            return token
        if not token:
            return None
        return self._aliases.get(_lc(token))

    # ----- predefined library (RegistryProtocol) -----

    def predefined(self, field_id: str) -> Field:
        return self._predefined[field_id]

    def predefined_fields(self) -> List[Field]:
        return list(self._predefined.values())

    def available_predefined(self, fields: FieldList) -> List[Field]:
        existing = {f.id for f in fields}
        return [f for f in self._predefined.values() if f.id not in existing]

    def defaults(self) -> FieldList:
        return tuple(self._predefined[fid] for fid in self._default_ids)

    def new_custom_field(self, fields: FieldList) -> Field:
        taken = {f.id for f in fields} | self._issued_ids
        stamp = int(self._clock() * 1000)
        fid = f"custom-{stamp}"
        while fid in taken:
            stamp += 1
            fid = f"custom-{stamp}"
        self._issued_ids.add(fid)
        return Field(
            id=fid,
            name=f"field_{len(fields) + 1}",
            label=CUSTOM_FIELD_LABEL,
            type=FieldType.TEXT,
            required=False,
        )

    # ----- loose input -> Field -----

    def field_from_dict(self, data: Dict[str, Any]) -> Field:
        """Normalise a dict from YAML/JSON into a Field. Raises ValueError."""
        if not isinstance(data, dict):
            raise ValueError(f"Field definition must be a mapping, got: {data!r}")
        ok, fid, err = normalize_text(data.get("id"))
        if not ok:
            raise ValueError(f"Field id: {err}")
        ok, name, err = normalize_text(data.get("name", fid))
        if not ok:
            raise ValueError(f"Field {fid} name: {err}")
        ok, label, err = normalize_text(data.get("label", name))
        if not ok:
            raise ValueError(f"Field {fid} label: {err}")
        kind_token = data.get("type") or "text"
        if isinstance(kind_token, FieldType):
            kind_token = kind_token.value
        ok, kind, err = normalize_enum(kind_token, self._aliases)
        if not ok:
            raise ValueError(f"Field {fid} type: {err}")
        ok, required, err = normalize_bool(data.get("required"))
        if not ok:
            raise ValueError(f"Field {fid} required: {err}")
        _, placeholder, _ = normalize_text(data.get("placeholder"), required=False)
        ok, options, err = normalize_options(data.get("options"))
        if not ok:
            raise ValueError(f"Field {fid} options: {err}")
        if options is None and self.requires_options(kind):
            options = ()
        return Field(
            id=fid, name=name, label=label, type=kind,
            required=required, placeholder=placeholder, options=options,
        )

    # ----- internal plumbing -----

    def _register_kind(self, kind: str, spec: Dict[str, Any]) -> None:
        try:
            ft = FieldType(kind)
        except ValueError:
            raise ValueError(f"Unknown field kind '{kind}' (allowed: {', '.join(t.value for t in FieldType)})")
        merged = dict(self._kinds.get(ft.value, {}))
        merged.update(spec)
        merged.setdefault("label", ft.value)
        merged.setdefault("requires_options", ft.value == FieldType.SELECT.value)
        merged["aliases"] = list(dict.fromkeys(
            list(self._kinds.get(ft.value, {}).get("aliases", [])) + list(spec.get("aliases", []))
        ))
        self._kinds[ft.value] = merged

    def _rebuild_alias_index(self) -> None:
        self._aliases.clear()
        for kind, spec in self._kinds.items():
            tokens = list(spec.get("aliases", [])) + [kind, spec.get("label", "")]
            for t in tokens:
                if not t:
                    continue
                if _lc(t) in self._aliases and self._aliases[_lc(t)].value != kind:
                    log.debug("alias %r already maps to %s; ignored for %s", t, self._aliases[_lc(t)].value, kind)
                self._aliases.setdefault(_lc(t), FieldType(kind))  # first writer wins
