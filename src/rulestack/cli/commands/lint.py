"""
rulestack lint command.

SUMMARY: Check profile metadata in parent-scoped shared content
"""
from __future__ import annotations

import argparse
from pathlib import Path

from rulestack.cli import (
    OutputFormatter,
    add_config_flag,
    add_standard_flags,
    get_config_path,
    get_global_config,
    get_repo_root,
)

SUMMARY = "Check profile metadata in parent-scoped shared content"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "path",
        nargs="?",
        help="Content repository to lint (default: every configured source)",
    )
    add_config_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Lint content sources. Warnings never fail the command."""
    from rulestack.core.config import load_project_config, load_repo_manifest
    from rulestack.core.profiles import lint_source
    from rulestack.core.sources import SourceResolver, merge_sources

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        if args.path:
            repo_paths = [(Path(args.path).name, Path(args.path).expanduser().resolve())]
        else:
            repo_root = get_repo_root(args)
            global_config = get_global_config()
            config = load_project_config(repo_root, get_config_path(args))
            sources = merge_sources(config.sources, global_config.global_sources, config.effective_options)
            resolver = SourceResolver(global_config.cache_dir, base_dir=repo_root)
            repo_paths = [(r.name, r.local_path) for r in resolver.resolve_all(sources, skip_fetch=True)]

        results: dict[str, dict[str, list[str]]] = {}
        for name, path in repo_paths:
            manifest = load_repo_manifest(path, source=name)
            results[name] = lint_source(path, manifest.profiles)
    except Exception as e:
        formatter.error(e, error_code="lint_error")
        return 1

    total = sum(len(files) for files in results.values())
    if formatter.json_mode:
        formatter.json_output({"sources": results, "filesWithWarnings": total})
        return 0

    if not total:
        formatter.text("No scope warnings found")
        return 0
    for name, files in results.items():
        for rel, warnings in files.items():
            formatter.text(f"{name}: {rel}")
            for warning in warnings:
                formatter.text(f"  - {warning}")
    formatter.text(f"{total} file(s) with scope warnings")
    return 0
