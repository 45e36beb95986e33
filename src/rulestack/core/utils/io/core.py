"""Filesystem primitives shared by the lock ledger, generator descriptor
and source cache.

Writes go through a sibling temp file that replaces the target only once
its bytes are on disk, so a crashed sync never leaves a half-written lock.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_parent_dir(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: Path, create: bool = True) -> Path:
    """Return ``path`` as an existing directory.

    Raises:
        NotADirectoryError: ``path`` exists as something other than a directory.
        FileNotFoundError: ``path`` is missing and ``create`` is False.
    """
    directory = Path(path)
    if directory.is_dir():
        return directory
    if directory.exists():
        raise NotADirectoryError(f"Not a directory: {directory}")
    if not create:
        raise FileNotFoundError(f"Directory does not exist: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``text`` in one rename."""
    target = Path(path)
    ensure_parent_dir(target)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


__all__ = [
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
]
