from __future__ import annotations
import json
from typing import Any, Dict, List

from .model import FieldList


def to_records(fields: FieldList) -> List[Dict[str, Any]]:
    return [f.to_dict() for f in fields]


def serialize(fields: FieldList) -> str:
    """Canonical text form of a snapshot; equal lists give equal strings."""
    return json.dumps(to_records(fields), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
