"""JSON documents on disk: the lock ledger and ``rulesync.jsonc``."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .core import atomic_write

_REQUIRED = object()


def read_json(file_path: Path | str, *, default: Any = _REQUIRED) -> Any:
    """Load a JSON document.

    A missing file returns ``default`` when one is given and raises
    ``FileNotFoundError`` otherwise. Malformed JSON always raises
    ``json.JSONDecodeError``.
    """
    path = Path(file_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if default is _REQUIRED:
            raise FileNotFoundError(f"JSON file not found: {path}") from None
        return default
    return json.loads(raw)


def write_json_atomic(file_path: Path | str, data: Any, *, indent: int = 2) -> None:
    """Write ``data`` as indented JSON with a trailing newline."""
    text = json.dumps(data, indent=indent, ensure_ascii=False)
    atomic_write(Path(file_path), text + "\n")


__all__ = ["read_json", "write_json_atomic"]
