"""
rulestack detach command.

SUMMARY: Remove deployed files and stop tracking this project
"""
from __future__ import annotations

import argparse

from rulestack.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_standard_flags,
    get_repo_root,
    is_verbose,
)

SUMMARY = "Remove deployed files and stop tracking this project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Also delete the .rulestack/ directory including the config",
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Detach the project."""
    from rulestack.core.sync import SyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = SyncManager(get_repo_root(args))
        report = manager.detach(dry_run=args.dry_run, purge=args.purge)
    except Exception as e:
        formatter.error(e, error_code="detach_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"dryRun": args.dry_run, **report.to_dict()})
        return 0

    removed = report.removal.removed
    if args.dry_run:
        formatter.text(f"Would remove {len(removed)} files and the lock file")
    else:
        formatter.text(f"Removed {len(removed)} files")
        if report.lock_deleted:
            formatter.text("Deleted lock file")
        if report.config_dir_removed:
            formatter.text("Removed .rulestack/")
    for failure in report.removal.failed:
        formatter.warning(f"Failed to remove {failure.file}: {failure.error}")
    if is_verbose(args):
        formatter.text_list("Files:", removed)
    return 0
