"""Lock file management.

The lock file (``.rulestack/rulestack-lock.json``) records every file
rulestack deployed into a project, so later runs can replace or remove
them without touching files the user owns::

    {
      "version": "1.0.0",
      "created": "2026-01-05T10:00:00.000Z",
      "lastSynced": "2026-01-06T09:30:12.345Z",
      "files": [".claude/commands/review.md", ".cursor/rules/base.mdc"]
    }
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from rulestack.core.constants import CONFIG_DIR, LOCK_FILE, LOCK_VERSION
from rulestack.core.exceptions import LockError
from rulestack.core.schemas import validate_payload_safe
from rulestack.core.utils.io import read_json, write_json_atomic
from rulestack.core.utils.time import parse_timestamp, utc_now, utc_timestamp

from .models import LockRecord, RemovalFailure, RemoveResult

logger = logging.getLogger(__name__)

LOCK_SCHEMA = "lock"


class LockLedger:
    """Reads and writes a project's lock file and removes tracked files."""

    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root)

    @property
    def lock_path(self) -> Path:
        return self.project_root / CONFIG_DIR / LOCK_FILE

    def exists(self) -> bool:
        return self.lock_path.exists()

    def read(self) -> Optional[LockRecord]:
        """Return the current record, or None when absent or invalid."""
        try:
            data = read_json(self.lock_path, default=None)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable lock file %s: %s", self.lock_path, exc)
            return None
        if data is None:
            return None

        errors = validate_payload_safe(data, LOCK_SCHEMA)
        if errors:
            logger.warning("Ignoring invalid lock file %s: %s", self.lock_path, errors[0])
            return None
        return LockRecord.from_dict(data)

    def tracked_files(self) -> List[str]:
        record = self.read()
        return list(record.files) if record else []

    def is_tracked(self, path: str) -> bool:
        return path in self.tracked_files()

    def write(self, files: Iterable[str], *, now: datetime | None = None) -> LockRecord:
        """Persist ``files`` as the new owned set.

        ``created`` is kept from the previous record; ``lastSynced`` never
        moves backwards.

        Raises:
            LockError: If the lock file cannot be written.
        """
        previous = self.read()
        moment = now or utc_now()
        stamp = utc_timestamp(moment)
        if previous is not None:
            prior = parse_timestamp(previous.last_synced)
            if prior is not None and prior > moment:
                stamp = previous.last_synced

        record = LockRecord(
            version=LOCK_VERSION,
            created=previous.created if previous else stamp,
            last_synced=stamp,
            files=tuple(sorted(set(files))),
        )
        try:
            write_json_atomic(self.lock_path, record.to_dict())
        except OSError as exc:
            raise LockError(
                f"Failed to write lock file {self.lock_path}: {exc}",
                context={"path": str(self.lock_path)},
            ) from exc
        logger.debug("Wrote lock file with %d files", len(record.files))
        return record

    def delete(self) -> bool:
        """Delete the lock file; return False if there was none.

        Raises:
            LockError: If the file exists but cannot be removed.
        """
        if not self.lock_path.exists():
            return False
        try:
            self.lock_path.unlink()
        except OSError as exc:
            raise LockError(
                f"Failed to delete lock file {self.lock_path}: {exc}",
                context={"path": str(self.lock_path)},
            ) from exc
        return True

    def remove(self, paths: Iterable[str], *, dry_run: bool = False) -> RemoveResult:
        """Delete project files and then any directories they leave empty.

        Missing files are skipped. Failures are collected per file and do
        not stop the batch. Absolute paths, paths containing ``..`` and paths
        resolving outside the project are reported as failures and left
        untouched. Only ancestors of removed files are considered
        for directory cleanup, deepest first.
        """
        result = RemoveResult()
        for rel in paths:
            full = self._project_path(rel)
            if full is None:
                logger.warning("Refusing to remove %s: path is outside the project", rel)
                result.failed.append(
                    RemovalFailure(file=rel, error="Path is outside the project")
                )
                continue
            if not full.exists() and not full.is_symlink():
                continue
            if dry_run:
                logger.info("Would remove: %s", rel)
                result.removed.append(rel)
                continue
            try:
                full.unlink()
            except OSError as exc:
                logger.warning("Failed to remove %s: %s", rel, exc)
                result.failed.append(RemovalFailure(file=rel, error=str(exc)))
                continue
            logger.debug("Removed: %s", rel)
            result.removed.append(rel)

        if not dry_run:
            self._clean_empty_directories(result.removed)
        return result

    def remove_tracked(self, *, dry_run: bool = False) -> RemoveResult:
        return self.remove(self.tracked_files(), dry_run=dry_run)

    def _project_path(self, rel: str) -> Optional[Path]:
        posix = PurePosixPath(rel)
        if not rel or posix.is_absolute() or Path(rel).is_absolute() or ".." in posix.parts:
            return None
        root = self.project_root.resolve()
        full = root / posix
        try:
            full.parent.resolve().relative_to(root)
        except ValueError:
            return None
        return full

    def _clean_empty_directories(self, removed: Iterable[str]) -> None:
        dirs = set()
        for rel in removed:
            parent = PurePosixPath(rel).parent
            while parent != parent.parent:
                dirs.add(parent)
                parent = parent.parent

        for rel_dir in sorted(dirs, key=lambda d: len(d.parts), reverse=True):
            full = self.project_root / rel_dir
            try:
                if full.is_dir() and not any(full.iterdir()):
                    full.rmdir()
                    logger.debug("Removed empty directory: %s", rel_dir)
            except OSError as exc:
                logger.debug("Could not remove directory %s: %s", rel_dir, exc)


__all__ = ["LockLedger", "LOCK_SCHEMA"]
