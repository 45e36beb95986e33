"""Layered composition of content sources into one scratch tree.

For each source, in order:

1. ``shared/<entity>/`` filtered in global scope against every target
2. per target ``parent:sub``: ``parent/_shared/<entity>/`` filtered in the
   parent's scope, then ``parent/sub/.rulesync/`` as-is
3. per flat target ``name``: ``name/.rulesync/`` (or the legacy
   ``use-cases/name/.rulesync/``) as-is

Every copy overwrites the same relative path, so later layers win.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from rulestack.core.constants import (
    ENTITY_TYPES,
    GLOBAL_SCOPE,
    PASSTHROUGH_FILES,
    RULESYNC_DIR,
    SHARED_DIR,
    SHARED_SUBDIR,
    SKILL_MANIFEST,
    USE_CASES_DIR,
)
from rulestack.core.exceptions import CompositionError
from rulestack.core.profiles import parse_specifier, should_include
from rulestack.core.sources import ResolvedSource

logger = logging.getLogger(__name__)


@dataclass
class ComposedTree:
    """The merged tree handed to the generator.

    Attributes:
        output_path: Scratch directory holding ``.rulesync/``
        rulesync_path: ``<output_path>/.rulesync``
        origins: Relative path -> label of the layer that wrote it last
    """

    output_path: Path
    rulesync_path: Path
    origins: Dict[str, str] = field(default_factory=dict)

    @property
    def files(self) -> List[str]:
        return sorted(self.origins)


def detect_profile_type(source_path: Path, name: str) -> str:
    """Return ``"nested"`` or ``"flat"`` from a profile's directory layout."""
    profile_dir = Path(source_path) / name
    if not profile_dir.is_dir() or (profile_dir / RULESYNC_DIR).exists():
        return "flat"
    for entry in profile_dir.iterdir():
        if entry.is_dir() and entry.name not in (SHARED_SUBDIR, RULESYNC_DIR):
            return "nested"
    return "flat"


def available_profiles_on_disk(source_path: Path) -> List[str]:
    """List legacy ``use-cases/<name>/`` directories of a source."""
    use_cases = Path(source_path) / USE_CASES_DIR
    if not use_cases.is_dir():
        return []
    return sorted(p.name for p in use_cases.iterdir() if p.is_dir())


class Composer:
    """Merges resolved sources into a single ``.rulesync`` tree."""

    def __init__(self, output_path: Path) -> None:
        self.output_path = Path(output_path)
        self.rulesync_path = self.output_path / RULESYNC_DIR
        self._tree = ComposedTree(self.output_path, self.rulesync_path)

    # ------------------------------------------------------------------
    # Copy primitives
    # ------------------------------------------------------------------
    def _record(self, dest: Path, label: str) -> None:
        self._tree.origins[dest.relative_to(self.rulesync_path).as_posix()] = label

    def _copy_file(self, src: Path, dest: Path, label: str) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
        self._record(dest, label)

    def _copy_tree(self, src: Path, dest: Path, label: str) -> None:
        for path in sorted(src.rglob("*")):
            if path.is_file():
                self._copy_file(path, dest / path.relative_to(src), label)
            elif path.is_dir():
                (dest / path.relative_to(src)).mkdir(parents=True, exist_ok=True)

    def _copy_filtered(
        self,
        src_dir: Path,
        dest_dir: Path,
        entity: str,
        targets: Sequence[str],
        scope: str,
        label: str,
    ) -> None:
        if not src_dir.is_dir():
            return
        dest_dir.mkdir(parents=True, exist_ok=True)
        for entry in sorted(src_dir.iterdir()):
            dest = dest_dir / entry.name
            if entity == "skills":
                # Only directories are skills; loose files are ignored.
                if not entry.is_dir():
                    continue
                manifest = entry / SKILL_MANIFEST
                if manifest.is_file() and not should_include(manifest, targets, scope):
                    continue
                self._copy_tree(entry, dest, label)
            elif entry.is_dir():
                self._copy_filtered(entry, dest, entity, targets, scope, label)
            elif entry.suffix == ".md":
                if should_include(entry, targets, scope):
                    self._copy_file(entry, dest, label)
            elif entry.is_file():
                self._copy_file(entry, dest, label)

    def _copy_passthrough(self, src_dir: Path, label: str) -> None:
        for name in PASSTHROUGH_FILES:
            src = src_dir / name
            if src.is_file():
                self._copy_file(src, self.rulesync_path / name, label)

    def _copy_shared_area(
        self, area: Path, targets: Sequence[str], scope: str, label: str
    ) -> None:
        if not area.is_dir():
            return
        logger.debug("  copying %s", label)
        for entity in ENTITY_TYPES:
            self._copy_filtered(
                area / entity, self.rulesync_path / entity, entity, targets, scope, label
            )
        self._copy_passthrough(area, label)

    def _merge_rulesync_dir(self, src: Path, label: str) -> bool:
        if not src.is_dir():
            return False
        logger.debug("  copying %s", label)
        for entity in ENTITY_TYPES:
            entity_dir = src / entity
            if entity_dir.is_dir():
                self._copy_tree(entity_dir, self.rulesync_path / entity, label)
        self._copy_passthrough(src, label)
        return True

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------
    def _compose_source(self, source: ResolvedSource, targets: Sequence[str]) -> None:
        root = source.local_path
        name = source.name
        logger.debug("Composing from %s (%s)", name, root)

        self._copy_shared_area(root / SHARED_DIR, targets, GLOBAL_SCOPE, f"{name}/{SHARED_DIR}")

        for spec in targets:
            parsed = parse_specifier(spec)
            if parsed.sub is not None:
                self._copy_shared_area(
                    root / parsed.parent / SHARED_SUBDIR,
                    [spec],
                    parsed.parent,
                    f"{name}/{parsed.parent}/{SHARED_SUBDIR}",
                )
                self._merge_rulesync_dir(
                    root / parsed.parent / parsed.sub / RULESYNC_DIR,
                    f"{name}/{parsed.parent}/{parsed.sub}",
                )
            elif parsed.is_wildcard:
                logger.debug("  unexpanded wildcard %s contributes nothing", spec)
            elif detect_profile_type(root, parsed.parent) == "nested":
                logger.debug(
                    "  profile %s is nested but no sub-profile specified, skipping direct content",
                    parsed.parent,
                )
            elif not self._merge_rulesync_dir(
                root / parsed.parent / RULESYNC_DIR, f"{name}/{parsed.parent}"
            ):
                self._merge_rulesync_dir(
                    root / USE_CASES_DIR / parsed.parent / RULESYNC_DIR,
                    f"{name}/{USE_CASES_DIR}/{parsed.parent}",
                )

    def compose(self, sources: Sequence[ResolvedSource], targets: Sequence[str]) -> ComposedTree:
        """Clear the output directory and compose ``sources`` into it.

        Raises:
            CompositionError: If ``sources`` is empty.
        """
        if not sources:
            raise CompositionError("No sources provided for composition")

        if self.output_path.exists():
            shutil.rmtree(self.output_path)
        self.rulesync_path.mkdir(parents=True)
        self._tree = ComposedTree(self.output_path, self.rulesync_path)

        logger.info("Composing profiles: %s", " + ".join(targets))
        for source in sources:
            self._compose_source(source, targets)
        logger.debug("Composed %d files into %s", len(self._tree.origins), self.rulesync_path)
        return self._tree


def compose(
    sources: Sequence[ResolvedSource], targets: Iterable[str], output_path: Path
) -> ComposedTree:
    """Compose ``sources`` for ``targets`` into ``output_path``."""
    return Composer(output_path).compose(sources, list(targets))


__all__ = [
    "ComposedTree",
    "Composer",
    "available_profiles_on_disk",
    "compose",
    "detect_profile_type",
]
