from __future__ import annotations
from typing import Protocol, List

from .model import Field, FieldList


class RegistryProtocol(Protocol):
    """
    Minimal contract the controller uses to stay decoupled from the field registry.

    Implementations must provide:
      - defaults() -> the "restore defaults" field list
      - predefined(field_id) -> a library field, KeyError if unknown
      - available_predefined(fields) -> library fields not yet in `fields`
      - new_custom_field(fields) -> a blank field with a fresh, never reused id
    """
    def defaults(self) -> FieldList: ...
    def predefined(self, field_id: str) -> Field: ...
    def available_predefined(self, fields: FieldList) -> List[Field]: ...
    def new_custom_field(self, fields: FieldList) -> Field: ...
