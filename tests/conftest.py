# tests/conftest.py
import sys
from pathlib import Path
import pytest

# Make "src" importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fieldregistry import FieldRegistry
from formstate import ChangeController, Field


def make_field(fid, label=None, **kw):
    return Field(id=fid, name=fid, label=label or fid.upper(), **kw)


@pytest.fixture(scope="session")
def registry():
    # Built-in kinds + predefined library from fieldregistry/specs.py
    return FieldRegistry(clock=lambda: 1_700_000_000.0)


@pytest.fixture
def abc():
    return (make_field("a"), make_field("b"), make_field("c"))


@pytest.fixture
def changes():
    # Records every on_change payload
    return []


@pytest.fixture
def controller(abc, changes, registry):
    # Fresh controller per test, seeded with [A, B, C]
    return ChangeController(abc, on_change=changes.append, registry=registry)
