"""Shared CLI utilities.

Environment variables are read here and nowhere else; the engine receives
explicit values.
"""
from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional

from rulestack.core.config import GlobalConfig, load_global_config

CONFIG_ENV = "RULESTACK_CONFIG"
HOME_ENV = "RULESTACK_HOME"


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project root from ``--repo-root``, else the current directory."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).expanduser().resolve()
    return Path.cwd().resolve()


def get_config_path(args: argparse.Namespace) -> Optional[str]:
    """Config override from ``--config``, else ``$RULESTACK_CONFIG``."""
    return getattr(args, "config", None) or os.environ.get(CONFIG_ENV) or None


def get_global_home() -> Optional[Path]:
    value = os.environ.get(HOME_ENV)
    return Path(value).expanduser() if value else None


def get_global_config() -> GlobalConfig:
    return load_global_config(get_global_home())


def is_verbose(args: argparse.Namespace) -> bool:
    from rulestack.core.logging import verbose_from_env

    return bool(getattr(args, "verbose", False)) or verbose_from_env()


__all__ = [
    "CONFIG_ENV",
    "HOME_ENV",
    "get_config_path",
    "get_global_config",
    "get_global_home",
    "get_repo_root",
    "is_verbose",
]
