"""
rulestack CLI package.

Commands live in ``rulestack.cli.commands``; each module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int`` and is
discovered automatically by the dispatcher.
"""
from ._output import OutputFormatter
from ._args import (
    add_config_flag,
    add_dry_run_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._utils import (
    get_config_path,
    get_global_config,
    get_global_home,
    get_repo_root,
    is_verbose,
)

__all__ = [
    "OutputFormatter",
    "add_config_flag",
    "add_dry_run_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
    "get_config_path",
    "get_global_config",
    "get_global_home",
    "get_repo_root",
    "is_verbose",
]
