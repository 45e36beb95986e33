"""
rulestack sync command.

SUMMARY: Compose the selected profiles and deploy the generated files
"""
from __future__ import annotations

import argparse

from rulestack.cli import (
    OutputFormatter,
    add_config_flag,
    add_dry_run_flag,
    add_standard_flags,
    get_config_path,
    get_global_config,
    get_repo_root,
    is_verbose,
)

SUMMARY = "Compose the selected profiles and deploy the generated files"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Remove every tracked file before deploying",
    )
    parser.add_argument(
        "--skip-fetch",
        action="store_true",
        help="Use cached git checkouts without pulling",
    )
    parser.add_argument(
        "--generator",
        type=str,
        help="Generator command (default: npx rulesync generate)",
    )
    add_config_flag(parser)
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Run a sync."""
    from rulestack.core.composition import GeneratorRunner
    from rulestack.core.sync import SyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    verbose = is_verbose(args)

    try:
        runner = GeneratorRunner(args.generator) if args.generator else None
        manager = SyncManager(get_repo_root(args), get_global_config(), runner=runner)
        report = manager.sync(
            dry_run=args.dry_run,
            replace=args.replace,
            config_path=get_config_path(args),
            skip_fetch=args.skip_fetch,
            verbose=verbose and not formatter.json_mode,
        )
    except Exception as e:
        formatter.error(e, error_code="sync_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(report.to_dict())
        return 0

    result = report.deployment
    if report.dry_run:
        formatter.text("Dry run complete. No changes were made.")
        formatter.text(f"Would sync {len(result.deployed)} files")
        created, overwritten, orphans = "Create", "Overwrite", "Remove orphans"
    else:
        formatter.text(f"Synced {len(result.deployed)} files")
        created, overwritten, orphans = "Created", "Overwritten", "Orphans removed"
    if result.created:
        formatter.text(f"  {created}: {len(result.created)}")
    if result.overwritten:
        formatter.text(f"  {overwritten}: {len(result.overwritten)}")
    if report.orphans.removed:
        formatter.text(f"  {orphans}: {len(report.orphans.removed)}")

    if result.skipped:
        formatter.warning(f"Skipped {len(result.skipped)} files")
    if result.conflicts:
        formatter.warning(f"{len(result.conflicts)} conflicts with native files (preserved)")
    if report.orphans.failed:
        formatter.warning(f"Failed to remove {len(report.orphans.failed)} orphaned files")

    if verbose:
        formatter.text_list("Deployed files:", result.deployed)
        formatter.text_list("Conflicts:", (f"{c.file} ({c.reason})" for c in result.conflicts))
        formatter.text_list("Removed orphans:", report.orphans.removed)
    return 0
