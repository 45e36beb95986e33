"""
rulestack list command.

SUMMARY: List configured sources and the profiles they provide
"""
from __future__ import annotations

import argparse
from typing import Iterable

from rulestack.cli import (
    OutputFormatter,
    add_config_flag,
    add_standard_flags,
    get_config_path,
    get_global_config,
    get_repo_root,
    is_verbose,
)
from rulestack.core.exceptions import SourceResolutionError
from rulestack.core.sources import ResolvedSource, Source, SourceResolver

SUMMARY = "List configured sources and the profiles they provide"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_config_flag(parser)
    add_standard_flags(parser)


def _resolve_each(
    resolver: SourceResolver,
    sources: Iterable[Source],
    formatter: OutputFormatter,
    label: str,
) -> list[ResolvedSource]:
    resolved: list[ResolvedSource] = []
    for source in sources:
        try:
            resolved.append(resolver.resolve(source, skip_fetch=True))
        except SourceResolutionError as e:
            formatter.warning(f"Could not resolve {label} source {source.display_name}: {e}")
    return resolved


def main(args: argparse.Namespace) -> int:
    """List sources and profiles."""
    from rulestack.core.config import combine_profiles, load_project_config
    from rulestack.core.config import get_config_path as resolve_config_path
    from rulestack.core.constants import (
        FEATURE_DESCRIPTIONS,
        GLOBAL_SOURCES_APPEND,
        TARGET_DESCRIPTIONS,
    )
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        repo_root = get_repo_root(args)
        global_config = get_global_config()
        config = None
        if resolve_config_path(repo_root, get_config_path(args)).exists():
            config = load_project_config(repo_root, get_config_path(args))

        resolver = SourceResolver(global_config.cache_dir, base_dir=repo_root)
        options = config.effective_options if config else {}
        global_sources = [] if options.get("ignoreGlobalSources") else global_config.global_sources
        resolved_global = _resolve_each(resolver, global_sources, formatter, "global")
        resolved_project = _resolve_each(resolver, config.sources if config else (), formatter, "project")
        if options.get("globalSourcesPosition") == GLOBAL_SOURCES_APPEND:
            ordered = [*resolved_project, *resolved_global]
        else:
            ordered = [*resolved_global, *resolved_project]
        profiles = combine_profiles(ordered)
        selected = list(config.profiles) if config else []
    except Exception as e:
        formatter.error(e, error_code="list_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({
            "globalSources": [
                {**r.source.to_dict(), "name": r.name, "path": str(r.local_path)} for r in resolved_global
            ],
            "projectSources": [
                {**r.source.to_dict(), "name": r.name, "path": str(r.local_path)} for r in resolved_project
            ],
            "profiles": [profiles[name].to_dict() for name in sorted(profiles)],
            "selected": selected,
        })
        return 0

    if not ordered:
        formatter.text("No sources configured.")
        return 0

    for title, group in (("Global sources:", resolved_global), ("Project sources:", resolved_project)):
        formatter.text_list(title, (f"{r.source.kind}: {r.name}" for r in group))

    formatter.text("")
    formatter.text("Available profiles:")
    if not profiles:
        formatter.text("  (none)")
    for name in sorted(profiles):
        profile = profiles[name]
        formatter.text(f"  {name:<20} - {profile.description} ({', '.join(profile.sources)})")
        subs = sorted(profile.sub_profiles)
        for index, sub in enumerate(subs):
            branch = "└─" if index == len(subs) - 1 else "├─"
            formatter.text(f"    {branch} {sub:<17} - {profile.sub_profiles[sub]}")

    if selected:
        formatter.text("")
        formatter.text(f"Currently selected: {', '.join(selected)}")

    if is_verbose(args):
        formatter.text("")
        formatter.text_list("Targets:", (f"{t:<12} {d}" for t, d in TARGET_DESCRIPTIONS.items()))
        formatter.text_list("Features:", (f"{f:<12} {d}" for f, d in FEATURE_DESCRIPTIONS.items()))
    return 0
