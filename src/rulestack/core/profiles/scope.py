"""Authoring-time checks for documents in a parent's ``_shared/`` area.

These checks only warn. The visibility filter itself never fails; a
fully-qualified specifier inside a scoped area simply matches nothing.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping

from rulestack.core.constants import (
    ENTITY_TYPES,
    EXCLUDE_PROFILES_KEY,
    GLOBAL_SCOPE,
    PROFILES_KEY,
    SHARED_SUBDIR,
    SKILL_MANIFEST,
)

from .header import get_list, parse_header
from .models import Profile, ScopeValidation

logger = logging.getLogger(__name__)


def validate_scope(path: Path, scope: str, valid_sub_names: Iterable[str]) -> ScopeValidation:
    """Lint the header of a document that lives in ``scope``.

    Global scope always validates.
    """
    if scope == GLOBAL_SCOPE:
        return ScopeValidation(valid=True)

    header = parse_header(path)
    if header is None:
        return ScopeValidation(valid=True)

    valid = set(valid_sub_names)
    warnings: List[str] = []
    for key in (PROFILES_KEY, EXCLUDE_PROFILES_KEY):
        for entry in get_list(header, key) or []:
            if ":" in entry:
                sub = entry.split(":", 1)[1]
                warnings.append(
                    f"'{entry}' in {key} uses a fully-qualified specifier inside "
                    f"'{scope}/{SHARED_SUBDIR}'; use the bare sub-profile name '{sub}'"
                )
            elif entry not in valid:
                allowed = ", ".join(sorted(valid)) or "(none)"
                warnings.append(
                    f"'{entry}' in {key} is not a sub-profile of '{scope}' "
                    f"(valid: {allowed})"
                )
    return ScopeValidation(valid=not warnings, warnings=tuple(warnings))


def _iter_scoped_documents(shared_dir: Path) -> Iterator[Path]:
    for entity in ENTITY_TYPES:
        entity_dir = shared_dir / entity
        if not entity_dir.is_dir():
            continue
        if entity == "skills":
            for skill_dir in sorted(p for p in entity_dir.iterdir() if p.is_dir()):
                manifest = skill_dir / SKILL_MANIFEST
                if manifest.is_file():
                    yield manifest
            continue
        for doc in sorted(entity_dir.rglob("*.md")):
            if doc.is_file():
                yield doc


def lint_source(source_path: Path, profiles: Mapping[str, Profile]) -> Dict[str, List[str]]:
    """Lint every scoped document of a content source.

    Returns a mapping of source-relative path -> warnings; files without
    warnings are omitted.
    """
    source_path = Path(source_path)
    results: Dict[str, List[str]] = {}
    for name, profile in profiles.items():
        if not profile.is_nested:
            continue
        shared_dir = source_path / name / SHARED_SUBDIR
        if not shared_dir.is_dir():
            continue
        for doc in _iter_scoped_documents(shared_dir):
            result = validate_scope(doc, name, profile.sub_profiles.keys())
            if result.warnings:
                rel = doc.relative_to(source_path).as_posix()
                results[rel] = list(result.warnings)
                logger.debug("Scope warnings for %s: %s", rel, result.warnings)
    return results


__all__ = ["validate_scope", "lint_source"]
