"""
Public API for the fieldregistry package.
Usage:
    from fieldregistry import FieldRegistry
"""
from .registry import FieldRegistry

__all__ = ["FieldRegistry"]
