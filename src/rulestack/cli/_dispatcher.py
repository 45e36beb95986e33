"""
rulestack command-line entry point.

Subcommands are the public modules of ``rulestack.cli.commands``. Each
one provides ``SUMMARY``, ``register_args(parser)`` and ``main(args)``.
"""

from __future__ import annotations

import argparse
import importlib
import pkgutil
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from rulestack import __version__
from rulestack.cli import commands as commands_pkg


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Map command name to its module, summary and hooks."""
    found: dict[str, dict[str, Any]] = {}
    for info in sorted(pkgutil.iter_modules(commands_pkg.__path__), key=lambda i: i.name):
        if info.name.startswith("_") or info.ispkg:
            continue
        module = importlib.import_module(f"{commands_pkg.__name__}.{info.name}")
        found[info.name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", info.name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return found


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rulestack",
        description=(
            "Compose profile-scoped rules, commands, skills and subagents "
            "and deploy the generated tool files into a project."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-file", metavar="FILE", help="Append debug logs to FILE")

    sub = parser.add_subparsers(dest="command", title="commands", metavar="<command>")
    for name, entry in discover_commands().items():
        cmd = sub.add_parser(name, help=entry["summary"], description=entry["summary"])
        if entry["register_args"] is not None:
            entry["register_args"](cmd)
        if entry["main"] is not None:
            cmd.set_defaults(_func=entry["main"])
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse ``argv`` and run the chosen command; returns its exit code."""
    from rulestack.core.logging import configure_logging

    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    handler = getattr(args, "_func", None)
    if handler is None:
        parser.print_help()
        return 0

    configure_logging(
        verbose=bool(getattr(args, "verbose", False)),
        log_path=Path(args.log_file) if args.log_file else None,
    )
    return int(handler(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
