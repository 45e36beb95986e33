"""
rulestack validate command.

SUMMARY: Validate the project config and its profile selection
"""
from __future__ import annotations

import argparse

from rulestack.cli import (
    OutputFormatter,
    add_config_flag,
    add_standard_flags,
    get_config_path,
    get_global_config,
    get_repo_root,
    is_verbose,
)

SUMMARY = "Validate the project config and its profile selection"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Only check the config file; do not resolve sources to check profiles",
    )
    add_config_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Validate configuration."""
    from rulestack.core.config import combine_profiles, load_project_config
    from rulestack.core.config import get_config_path as resolve_config_path
    from rulestack.core.exceptions import ConfigError, ConfigNotFoundError, SourceResolutionError
    from rulestack.core.profiles import ProfileResolver
    from rulestack.core.sources import SourceResolver, merge_sources

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root = get_repo_root(args)
        config_path = resolve_config_path(repo_root, get_config_path(args))
        errors: list[str] = []
        warnings: list[str] = []

        try:
            config = load_project_config(repo_root, config_path)
        except ConfigNotFoundError as e:
            formatter.error(e, f"No configuration file found at {config_path}", error_code="config_not_found")
            return 1
        except ConfigError as e:
            config = None
            errors.extend(e.context.get("errors") or [str(e)])

        if config is not None and not args.offline:
            global_config = get_global_config()
            sources = merge_sources(config.sources, global_config.global_sources, config.effective_options)
            resolver = SourceResolver(global_config.cache_dir, base_dir=repo_root)
            try:
                resolved = resolver.resolve_all(sources, skip_fetch=True)
            except SourceResolutionError as e:
                warnings.append(f"Profiles not checked: {e}")
            else:
                selection = ProfileResolver(combine_profiles(resolved)).validate_selection(config.profiles)
                errors.extend(selection.errors)
                warnings.extend(selection.warnings)
    except Exception as e:
        formatter.error(e, error_code="validate_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({
            "valid": not errors,
            "path": str(config_path),
            "errors": errors,
            "warnings": warnings,
        })
        return 1 if errors else 0

    for warning in warnings:
        formatter.warning(warning)
    if errors:
        formatter.text(f"Configuration validation failed: {config_path}")
        for error in errors:
            formatter.text(f"  - {error.strip()}")
        return 1

    formatter.text("Configuration is valid")
    if is_verbose(args) and config is not None:
        formatter.text("")
        formatter.text("Configuration summary:")
        formatter.text(f"  Targets: {', '.join(config.targets)}")
        formatter.text(f"  Features: {', '.join(config.features)}")
        formatter.text(f"  Profiles: {', '.join(config.profiles)}")
        if config.options:
            formatter.text(f"  Options: {config.options}")
    return 0
