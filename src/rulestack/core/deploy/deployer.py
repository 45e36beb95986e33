"""Deploy generator output into a project.

Generated files are copied from ``<scratch>/<tool dir>/`` to
``<project>/<prefix><tool dir>/``. A destination that already exists but is
not in the previous lock record belongs to the user and is never
overwritten.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Collection, Iterable, List, Optional, Sequence, Tuple

from rulestack.core.config.project import normalize_output_prefix
from rulestack.core.constants import CONFIG_DIR, LOCK_FILE, TARGET_DIRECTORIES

from .models import Conflict, DeploymentResult, DeployOptions, LockRecord

logger = logging.getLogger(__name__)

CONFLICT_REASON = "Native file exists"


def generated_target_dirs(
    generated_path: Path, targets: Optional[Iterable[str]] = None
) -> List[Tuple[str, Path]]:
    """Return ``(dir name, path)`` for each generated tool directory.

    Directories shared by several targets appear once.
    """
    wanted = set(targets) if targets is not None else None
    seen = set()
    dirs: List[Tuple[str, Path]] = []
    for target, dirname in TARGET_DIRECTORIES.items():
        if wanted is not None and target not in wanted:
            continue
        full = Path(generated_path) / dirname
        if full.is_dir() and dirname not in seen:
            seen.add(dirname)
            dirs.append((dirname, full))
    return dirs


def _iter_generated(
    generated_path: Path, targets: Optional[Iterable[str]], prefix: str
) -> Iterable[Tuple[Path, str]]:
    for dirname, source_dir in generated_target_dirs(generated_path, targets):
        for path in sorted(source_dir.rglob("*")):
            if path.is_file():
                rel = path.relative_to(source_dir).as_posix()
                yield path, f"{prefix}{dirname}/{rel}"


def files_to_deploy(
    generated_path: Path,
    targets: Optional[Iterable[str]] = None,
    output_prefix: str = "",
) -> List[str]:
    """List project-relative destinations of every generated file."""
    prefix = normalize_output_prefix(output_prefix)
    return [dest for _, dest in _iter_generated(generated_path, targets, prefix)]


def check_conflicts(
    generated_path: Path,
    project_root: Path,
    tracked_files: Collection[str],
    targets: Optional[Iterable[str]] = None,
    output_prefix: str = "",
) -> List[str]:
    """List destinations that exist but are not tracked."""
    tracked = set(tracked_files)
    return [
        dest
        for dest in files_to_deploy(generated_path, targets, output_prefix)
        if (Path(project_root) / dest).exists() and dest not in tracked
    ]


def deploy(
    generated_path: Path,
    project_root: Path,
    prior_record: Optional[LockRecord] = None,
    options: Optional[DeployOptions] = None,
) -> DeploymentResult:
    """Copy generated files into ``project_root``.

    Per-file copy failures are logged and listed in ``skipped``.
    """
    options = options or DeployOptions()
    project_root = Path(project_root)
    tracked = set(prior_record.files) if prior_record else set()
    prefix = normalize_output_prefix(options.output_prefix)
    result = DeploymentResult()

    for source_file, dest_rel in _iter_generated(generated_path, options.targets, prefix):
        dest = project_root / dest_rel
        existed = dest.exists()

        if existed and dest_rel not in tracked:
            result.conflicts.append(Conflict(file=dest_rel, reason=CONFLICT_REASON))
            result.skipped.append(dest_rel)
            logger.warning(
                "File conflict detected: %s\n"
                "This file exists but is not tracked in %s/%s.\n"
                "Skipping to preserve native file. Remove or rename the file to let rulestack manage it.",
                dest_rel,
                CONFIG_DIR,
                LOCK_FILE,
            )
            continue

        if options.dry_run:
            logger.info("Would deploy: %s", dest_rel)
        else:
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source_file, dest)
            except OSError as exc:
                logger.warning("Failed to deploy %s: %s", dest_rel, exc)
                result.skipped.append(dest_rel)
                continue
            logger.debug("Deployed: %s", dest_rel)

        result.deployed.append(dest_rel)
        (result.overwritten if existed else result.created).append(dest_rel)

    return result


class Deployer:
    """Deploys scratch output into one project against its prior lock record."""

    def __init__(self, project_root: Path, prior_record: Optional[LockRecord] = None) -> None:
        self.project_root = Path(project_root)
        self.prior_record = prior_record

    def deploy(
        self,
        generated_path: Path,
        *,
        targets: Optional[Sequence[str]] = None,
        output_prefix: str = "",
        dry_run: bool = False,
    ) -> DeploymentResult:
        options = DeployOptions(
            targets=tuple(targets) if targets is not None else None,
            output_prefix=output_prefix,
            dry_run=dry_run,
        )
        return deploy(generated_path, self.project_root, self.prior_record, options)

    def check_conflicts(
        self,
        generated_path: Path,
        *,
        targets: Optional[Sequence[str]] = None,
        output_prefix: str = "",
    ) -> List[str]:
        tracked = self.prior_record.files if self.prior_record else ()
        return check_conflicts(generated_path, self.project_root, tracked, targets, output_prefix)


__all__ = [
    "CONFLICT_REASON",
    "Deployer",
    "check_conflicts",
    "deploy",
    "files_to_deploy",
    "generated_target_dirs",
]
