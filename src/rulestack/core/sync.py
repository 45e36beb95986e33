"""Sync orchestration: compose, generate, deploy and track.

A sync run is strictly ordered and leaves the previous lock file in place
if anything fails before deployment completes.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from rulestack.core.composition import (
    GeneratorRunner,
    build_generator_config,
    compose,
    write_generator_config,
)
from rulestack.core.config import (
    GlobalConfig,
    combine_profiles,
    get_config_dir,
    load_project_config,
)
from rulestack.core.deploy import DeploymentResult, DeployOptions, LockLedger, RemoveResult, deploy
from rulestack.core.exceptions import ConfigError, SourceResolutionError
from rulestack.core.profiles import ProfileResolver
from rulestack.core.sources import SourceResolver, merge_sources

logger = logging.getLogger(__name__)


@dataclass
class OutputGroup:
    """Profiles deployed under one output prefix."""

    prefix: str
    profiles: List[str]
    expanded: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.prefix or "(root)"


@dataclass
class SyncReport:
    dry_run: bool = False
    replace: bool = False
    groups: List[OutputGroup] = field(default_factory=list)
    deployment: DeploymentResult = field(default_factory=DeploymentResult)
    replaced: Optional[RemoveResult] = None
    orphans: RemoveResult = field(default_factory=RemoveResult)
    warnings: List[str] = field(default_factory=list)
    lock_written: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dryRun": self.dry_run,
            "replace": self.replace,
            "groups": [
                {"prefix": g.prefix, "profiles": g.profiles, "expanded": g.expanded}
                for g in self.groups
            ],
            **self.deployment.to_dict(),
            "replaced": self.replaced.to_dict() if self.replaced else None,
            "orphans": self.orphans.to_dict(),
            "warnings": list(self.warnings),
            "lockWritten": self.lock_written,
        }


@dataclass
class DetachReport:
    removal: RemoveResult
    lock_deleted: bool = False
    config_dir_removed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.removal.to_dict(),
            "lockDeleted": self.lock_deleted,
            "configDirRemoved": self.config_dir_removed,
        }


class SyncManager:
    """Runs sync, clean and detach for one project.

    Args:
        project_root: Project directory receiving the generated files
        global_config: Per-user config, loaded by the caller
        resolver: Source resolver (defaults to one caching under the global dir)
        runner: Generator runner (defaults to ``npx rulesync generate``)
    """

    def __init__(
        self,
        project_root: Path,
        global_config: Optional[GlobalConfig] = None,
        resolver: Optional[SourceResolver] = None,
        runner: Optional[GeneratorRunner] = None,
    ) -> None:
        self.project_root = Path(project_root).resolve()
        self.global_config = global_config or GlobalConfig()
        self.resolver = resolver or SourceResolver(
            self.global_config.cache_dir, base_dir=self.project_root
        )
        self.runner = runner or GeneratorRunner()
        self.ledger = LockLedger(self.project_root)

    # ------------------------------------------------------------------
    # sync
    # ------------------------------------------------------------------
    def sync(
        self,
        *,
        dry_run: bool = False,
        replace: bool = False,
        config_path: Path | str | None = None,
        skip_fetch: bool = False,
        verbose: bool = False,
    ) -> SyncReport:
        """Compose, generate and deploy every configured profile group.

        Raises:
            ConfigError: If the config is invalid or selects nothing.
            SourceResolutionError: If a source cannot be resolved.
            GenerationError: If the generator fails.
        """
        logger.info("Loading configuration")
        config = load_project_config(self.project_root, config_path)
        targets = config.expanded_targets
        report = SyncReport(dry_run=dry_run, replace=replace)

        sources = merge_sources(
            config.sources, self.global_config.global_sources, config.effective_options
        )
        if not sources:
            raise ConfigError(
                "No sources configured. Add a project source under 'sources' "
                "or a global source under 'globalSources'."
            )
        if not config.profiles:
            raise ConfigError("No profiles configured in the project config.")

        logger.info("Resolving %d source(s)", len(sources))
        try:
            resolved = self.resolver.resolve_all(sources, skip_fetch=skip_fetch)
        except SourceResolutionError as exc:
            raise SourceResolutionError(
                f"Failed to resolve sources: {exc}", context=exc.context
            ) from exc

        profiles = ProfileResolver(combine_profiles(resolved))
        selection = profiles.validate_selection(config.profiles)
        for message in (*selection.errors, *selection.warnings):
            logger.warning("%s", message.strip())
            report.warnings.append(message.strip())

        prior = self.ledger.read()
        tracked = list(prior.files) if prior else []
        logger.debug("Previously tracked files: %d", len(tracked))

        report.groups = [
            OutputGroup(prefix=prefix, profiles=specs, expanded=profiles.expand(specs))
            for prefix, specs in config.output_groups()
        ]

        scratch_root = Path(tempfile.mkdtemp(prefix="rulestack-"))
        logger.debug("Scratch directory: %s", scratch_root)
        try:
            # Every group is generated before anything in the project changes.
            scratches: List[Path] = []
            for index, group in enumerate(report.groups):
                scratch = scratch_root if len(report.groups) == 1 else scratch_root / f"group-{index}"
                logger.info("Composing %s -> %s", " + ".join(group.profiles), group.label)
                compose(resolved, group.expanded, scratch)

                write_generator_config(
                    scratch,
                    build_generator_config(
                        resolved, group.expanded, targets, config.features, config.options
                    ),
                )
                if dry_run:
                    logger.info("Dry run: skipping %s", self.runner.command)
                else:
                    self.runner.run(scratch, verbose=verbose)
                scratches.append(scratch)

            if replace and tracked and not dry_run:
                logger.info("Removing previously tracked files (replace mode)")
                report.replaced = self.ledger.remove(tracked)
                if report.replaced.failed:
                    logger.warning("Failed to remove %d files", len(report.replaced.failed))

            for group, scratch in zip(report.groups, scratches):
                logger.info("Deploying files to %s", group.label)
                report.deployment.extend(
                    deploy(
                        scratch,
                        self.project_root,
                        prior,
                        DeployOptions(
                            targets=tuple(targets),
                            output_prefix=group.prefix,
                            dry_run=dry_run,
                        ),
                    )
                )

            kept = self._kept_files(tracked, report.deployment)
            if report.replaced is not None:
                kept.extend(f.file for f in report.replaced.failed)
            if not replace:
                owned = set(report.deployment.deployed) | set(kept)
                orphans = [f for f in tracked if f not in owned]
                if orphans:
                    logger.info("Removing %d orphaned files", len(orphans))
                    report.orphans = self.ledger.remove(orphans, dry_run=dry_run)
                    kept.extend(f.file for f in report.orphans.failed)

            if not dry_run:
                self.ledger.write([*report.deployment.deployed, *kept])
                report.lock_written = True
        finally:
            shutil.rmtree(scratch_root, ignore_errors=True)

        return report

    @staticmethod
    def _kept_files(tracked: List[str], deployment: DeploymentResult) -> List[str]:
        # Tracked files whose copy failed this run remain owned.
        skipped = set(deployment.skipped)
        return [f for f in tracked if f in skipped]

    # ------------------------------------------------------------------
    # clean / detach
    # ------------------------------------------------------------------
    def clean(self, *, dry_run: bool = False) -> RemoveResult:
        """Remove every tracked file; the lock keeps only failed removals."""
        result = self.ledger.remove_tracked(dry_run=dry_run)
        if not dry_run and self.ledger.exists():
            self.ledger.write([f.file for f in result.failed])
        return result

    def detach(self, *, dry_run: bool = False, purge: bool = False) -> DetachReport:
        """Remove tracked files and the lock file.

        With ``purge`` the whole ``.rulestack/`` directory goes; otherwise
        it is removed only when nothing else is left in it.
        """
        report = DetachReport(removal=self.ledger.remove_tracked(dry_run=dry_run))
        if dry_run:
            return report

        report.lock_deleted = self.ledger.delete()
        config_dir = get_config_dir(self.project_root)
        if config_dir.is_dir():
            if purge:
                shutil.rmtree(config_dir)
                report.config_dir_removed = True
            elif not any(config_dir.iterdir()):
                config_dir.rmdir()
                report.config_dir_removed = True
        return report


__all__ = ["DetachReport", "OutputGroup", "SyncManager", "SyncReport"]
