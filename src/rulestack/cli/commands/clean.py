"""
rulestack clean command.

SUMMARY: Remove every file rulestack deployed into the project
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

SUMMARY = "Remove every file rulestack deployed into the project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Remove tracked files."""
    from rulestack.core.sync import SyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = SyncManager(get_repo_root(args))
        if not manager.ledger.exists():
            formatter.success({"removed": [], "failed": []}, "No lock file found. Nothing to clean.")
            return 0
        result = manager.clean(dry_run=args.dry_run)
    except Exception as e:
        formatter.error(e, error_code="clean_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"dryRun": args.dry_run, **result.to_dict()})
        return 1 if result.failed else 0

    verb = "Would remove" if args.dry_run else "Removed"
    formatter.text(f"{verb} {len(result.removed)} files")
    for failure in result.failed:
        formatter.warning(f"Failed to remove {failure.file}: {failure.error}")
    if is_verbose(args):
        formatter.text_list("Files:", result.removed)
    return 1 if result.failed else 0
