"""Configuration: project config, global config and repo manifests."""
from __future__ import annotations

from .global_config import GlobalConfig, default_global_dir, load_global_config
from .project import (
    ProjectConfig,
    get_config_dir,
    get_config_path,
    load_project_config,
    normalize_output_prefix,
    validate_output_dirs,
    validate_project_config,
)
from .repo import RepoManifest, combine_profiles, load_repo_manifest, validate_repo_manifest

__all__ = [
    "GlobalConfig",
    "ProjectConfig",
    "RepoManifest",
    "combine_profiles",
    "default_global_dir",
    "get_config_dir",
    "get_config_path",
    "load_global_config",
    "load_project_config",
    "load_repo_manifest",
    "normalize_output_prefix",
    "validate_output_dirs",
    "validate_project_config",
    "validate_repo_manifest",
]
