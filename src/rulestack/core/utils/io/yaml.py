"""YAML loading for bundled schemas."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Load a YAML document, falling back to ``default``.

    Missing files, unreadable files and parse errors all yield ``default``
    unless ``raise_on_error`` is set. An empty document yields ``default``.
    """
    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return default if data is None else data


__all__ = ["read_yaml"]
