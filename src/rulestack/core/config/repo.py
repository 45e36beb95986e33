"""Content repository manifests (``repo.yaml``) and the combined profile catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml

from rulestack.core.constants import REPO_FILE
from rulestack.core.exceptions import ConfigError, ConfigNotFoundError
from rulestack.core.profiles import Profile
from rulestack.core.schemas import validate_payload_safe
from rulestack.core.sources import ResolvedSource

logger = logging.getLogger(__name__)

REPO_SCHEMA = "repo"


@dataclass(frozen=True, slots=True)
class RepoManifest:
    """Parsed ``repo.yaml``.

    Legacy ``use-cases`` entries become flat profiles; an entry under
    ``profiles`` with the same name takes precedence.
    """

    name: str
    description: str = ""
    version: str | None = None
    author: str | None = None
    profiles: Dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: str | None = None) -> RepoManifest:
        profiles: Dict[str, Profile] = {}
        for name, entry in (data.get("use-cases") or {}).items():
            profiles[name] = Profile.from_dict(name, entry or {}, source=source)
        for name, entry in (data.get("profiles") or {}).items():
            profiles[name] = Profile.from_dict(name, entry or {}, source=source)
        return cls(
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            version=data.get("version"),
            author=data.get("author"),
            profiles=profiles,
        )


def validate_repo_manifest(data: Any) -> list[str]:
    return validate_payload_safe(data, REPO_SCHEMA)


def load_repo_manifest(repo_path: Path, *, source: str | None = None) -> RepoManifest:
    """Load and validate ``<repo_path>/repo.yaml``.

    Raises:
        ConfigNotFoundError: If the manifest is missing.
        ConfigError: If it is not valid YAML or fails validation.
    """
    path = Path(repo_path) / REPO_FILE
    if not path.exists():
        raise ConfigNotFoundError(f"No {REPO_FILE} found in {repo_path}", context={"path": str(path)})

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc

    errors = validate_repo_manifest(data)
    if errors:
        raise ConfigError(
            f"Invalid {REPO_FILE} in {repo_path}: {errors[0]}",
            context={"path": str(path), "errors": errors},
        )
    return RepoManifest.from_dict(data, source=source)


def combine_profiles(sources: Iterable[ResolvedSource]) -> Dict[str, Profile]:
    """Combine the profiles of every source, in source order.

    Sources whose manifest cannot be loaded contribute nothing.
    """
    combined: Dict[str, Profile] = {}
    for resolved in sources:
        try:
            manifest = load_repo_manifest(resolved.local_path, source=resolved.name)
        except ConfigError as exc:
            logger.warning("Skipping profiles of %s: %s", resolved.name, exc)
            continue
        for name, profile in manifest.profiles.items():
            existing = combined.get(name)
            combined[name] = profile if existing is None else existing.merged_with(profile)
    return combined


__all__ = ["RepoManifest", "combine_profiles", "load_repo_manifest", "validate_repo_manifest"]
