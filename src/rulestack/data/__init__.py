"""Files shipped inside the rulestack package (JSON schemas)."""
from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """Filesystem path of ``rulestack/data/<subpackage>/<filename>``.

    Example:
        >>> get_data_path("schemas", "lock.schema.yaml").name
        'lock.schema.yaml'
    """
    root = Path(str(resources.files(__name__).joinpath(subpackage)))
    return root.joinpath(filename) if filename else root


__all__ = ["get_data_path"]
