"""Per-user configuration (``~/.rulestack/config.yaml``).

Loaded once by the CLI and passed down explicitly; engine code never reads
the home directory itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from rulestack.core.constants import CACHE_DIR_NAME, GLOBAL_CONFIG_FILE, GLOBAL_DIR_NAME
from rulestack.core.exceptions import ConfigError
from rulestack.core.schemas import validate_payload_safe
from rulestack.core.sources import Source, parse_source, validate_sources

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_SCHEMA = "global-config"


def default_global_dir() -> Path:
    return Path.home() / GLOBAL_DIR_NAME


@dataclass(frozen=True, slots=True)
class GlobalConfig:
    """Global sources shared by every project."""

    global_sources: tuple[Source, ...] = ()
    home: Path | None = None

    @property
    def cache_dir(self) -> Path:
        return (self.home or default_global_dir()) / CACHE_DIR_NAME

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, home: Path | None = None) -> GlobalConfig:
        return cls(
            global_sources=tuple(parse_source(s) for s in data.get("globalSources") or ()),
            home=home,
        )


def load_global_config(home: Path | None = None) -> GlobalConfig:
    """Load ``<home>/config.yaml``; a missing file yields an empty config.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    home = Path(home) if home is not None else default_global_dir()
    path = home / GLOBAL_CONFIG_FILE
    if not path.exists():
        return GlobalConfig(home=home)

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc

    errors = validate_payload_safe(data, GLOBAL_CONFIG_SCHEMA)
    if not errors:
        errors = validate_sources(data.get("globalSources"))
    if errors:
        raise ConfigError(
            f"Invalid global config {path}: {errors[0]}",
            context={"path": str(path), "errors": errors},
        )

    logger.debug("Loaded global config from %s", path)
    return GlobalConfig.from_dict(data, home=home)


__all__ = ["GlobalConfig", "default_global_dir", "load_global_config"]
