"""Project configuration (``.rulestack/config.yaml``).

Example::

    sources:
      - ~/rules/team
      - https://github.com/acme/agent-rules.git
    targets: [claudecode, cursor]
    features: [rules, commands, skills]
    profiles: [development:frontend, writing]
    outputDirs:
      writing: docs/
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from rulestack.core.constants import (
    CONFIG_DIR,
    CONFIG_FILE,
    DEFAULT_OPTIONS,
    VALID_TARGETS,
)
from rulestack.core.exceptions import ConfigError, ConfigNotFoundError
from rulestack.core.profiles import validate_specifier
from rulestack.core.schemas import validate_payload_safe
from rulestack.core.sources import Source, parse_source, validate_sources

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "config"


def get_config_dir(project_root: Path) -> Path:
    return Path(project_root) / CONFIG_DIR


def get_config_path(project_root: Path, custom_path: Path | str | None = None) -> Path:
    """Return the config file path, honouring an explicit override."""
    if custom_path:
        path = Path(custom_path).expanduser()
        return path if path.is_absolute() else Path(project_root) / path
    return get_config_dir(project_root) / CONFIG_FILE


def normalize_output_prefix(prefix: str) -> str:
    """Normalize an output directory prefix to ``""`` or ``"<dir>/"``.

    Examples:
        >>> normalize_output_prefix(" docs ")
        'docs/'
        >>> normalize_output_prefix("")
        ''
    """
    trimmed = prefix.strip()
    if not trimmed:
        return ""
    return trimmed if trimmed.endswith("/") else f"{trimmed}/"


def validate_output_dirs(output_dirs: Mapping[str, str] | None, profiles: List[str]) -> List[str]:
    """Check ``outputDirs`` keys against the selection and values for safety."""
    if not output_dirs:
        return []
    errors: List[str] = []
    selected = set(profiles)
    for spec, prefix in output_dirs.items():
        if spec not in selected:
            errors.append(
                f"outputDirs references unknown profile '{spec}'. "
                f"Available profiles: {', '.join(profiles)}"
            )
        if prefix.startswith("/"):
            errors.append(
                f"outputDirs['{spec}'] must be a relative path, not an absolute path: '{prefix}'"
            )
        if ".." in prefix:
            errors.append(f"outputDirs['{spec}'] must not contain '..': '{prefix}'")
    return errors


def _effective_profiles(data: Mapping[str, Any]) -> List[str]:
    profiles = data.get("profiles")
    if profiles is None:
        profiles = data.get("use-cases")
    return [str(p) for p in (profiles or [])]


def validate_project_config(data: Any) -> List[str]:
    """Return every problem with a parsed config (empty when valid)."""
    errors = validate_payload_safe(data, CONFIG_SCHEMA)
    if errors:
        return errors
    for key in ("profiles", "use-cases"):
        for spec in data.get(key) or ():
            problem = validate_specifier(str(spec))
            if problem:
                errors.append(f"{key}: {problem}")
    profiles = _effective_profiles(data)
    if not profiles:
        errors.append("profiles: at least one profile must be selected")
    errors.extend(validate_sources(data.get("sources")))
    errors.extend(validate_output_dirs(data.get("outputDirs"), profiles))
    return errors


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """A validated project configuration."""

    targets: tuple[str, ...]
    features: tuple[str, ...]
    profiles: tuple[str, ...]
    sources: tuple[Source, ...] = ()
    options: Dict[str, Any] = field(default_factory=dict)
    output_dirs: Dict[str, str] = field(default_factory=dict)
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, path: Path | None = None) -> ProjectConfig:
        """Build from already validated data; legacy ``use-cases`` is accepted."""
        return cls(
            targets=tuple(data.get("targets") or ()),
            features=tuple(data.get("features") or ()),
            profiles=tuple(_effective_profiles(data)),
            sources=tuple(parse_source(s) for s in data.get("sources") or ()),
            options=dict(data.get("options") or {}),
            output_dirs={str(k): str(v) for k, v in (data.get("outputDirs") or {}).items()},
            path=path,
        )

    @property
    def effective_options(self) -> Dict[str, Any]:
        """Explicit options layered over the defaults."""
        return {**DEFAULT_OPTIONS, **self.options}

    @property
    def expanded_targets(self) -> List[str]:
        """Targets with ``*`` expanded to every known tool."""
        if "*" in self.targets:
            return list(VALID_TARGETS)
        return [t for t in self.targets if t != "*"]

    def output_groups(self) -> List[tuple[str, List[str]]]:
        """Group the selected profiles by normalized output prefix.

        Groups keep the order in which their first profile was selected.
        """
        groups: Dict[str, List[str]] = {}
        for spec in self.profiles:
            prefix = normalize_output_prefix(self.output_dirs.get(spec, ""))
            groups.setdefault(prefix, []).append(spec)
        return list(groups.items())


def load_project_config(
    project_root: Path, config_path: Path | str | None = None
) -> ProjectConfig:
    """Load and validate the project config.

    Raises:
        ConfigNotFoundError: If the config file does not exist.
        ConfigError: If the file is not valid YAML or fails validation.
    """
    path = get_config_path(project_root, config_path)
    if not path.exists():
        raise ConfigNotFoundError(
            f"No {CONFIG_DIR}/{CONFIG_FILE} found in {project_root}",
            context={"path": str(path)},
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc

    if data is None:
        data = {}
    errors = validate_project_config(data)
    if errors:
        raise ConfigError(
            f"Invalid config {path}: {errors[0]}",
            context={"path": str(path), "errors": errors},
        )

    logger.debug("Loaded project config from %s", path)
    return ProjectConfig.from_dict(data, path=path)


__all__ = [
    "ProjectConfig",
    "get_config_dir",
    "get_config_path",
    "load_project_config",
    "normalize_output_prefix",
    "validate_output_dirs",
    "validate_project_config",
]
