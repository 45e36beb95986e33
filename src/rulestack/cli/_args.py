"""Flags shared by several rulestack commands."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print a JSON report instead of text")


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-root",
        metavar="DIR",
        help="Project directory holding .rulestack/ (default: cwd)",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """``--config``; falls back to ``$RULESTACK_CONFIG`` then ``.rulestack/config.yaml``."""
    parser.add_argument("-c", "--config", metavar="FILE", help="Project config file")


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Report changes without touching the project",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging and per-file listings",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    for add in (add_json_flag, add_repo_root_flag, add_verbose_flag):
        add(parser)


__all__ = [
    "add_config_flag",
    "add_dry_run_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
]
