"""File I/O helpers used across rulestack."""
from __future__ import annotations

from .core import atomic_write, ensure_directory, ensure_parent_dir
from .json import read_json, write_json_atomic
from .yaml import read_yaml

__all__ = [
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "read_json",
    "write_json_atomic",
    "read_yaml",
]
