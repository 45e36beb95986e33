"""Generator descriptor and invocation.

The external generator reads ``rulesync.jsonc`` next to the composed
``.rulesync/`` tree and writes one directory per target tool
(``.claude/``, ``.cursor/``, ...) into the same scratch directory.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import yaml

from rulestack.core.constants import (
    DEFAULT_GENERATOR_COMMAND,
    GENERATOR_CONFIG_FILE,
    GENERATOR_OPTION_KEYS,
    GENERATOR_SCHEMA_URL,
    PROFILE_GENERATOR_FILE,
    USE_CASES_DIR,
)
from rulestack.core.exceptions import GenerationError
from rulestack.core.profiles import parse_specifier
from rulestack.core.sources import ResolvedSource
from rulestack.core.utils.io import write_json_atomic

logger = logging.getLogger(__name__)


def _profile_override_files(source_path: Path, spec: str) -> list[Path]:
    parsed = parse_specifier(spec)
    if parsed.sub is not None:
        return [
            source_path / parsed.parent / PROFILE_GENERATOR_FILE,
            source_path / parsed.parent / parsed.sub / PROFILE_GENERATOR_FILE,
        ]
    return [
        source_path / USE_CASES_DIR / parsed.parent / PROFILE_GENERATOR_FILE,
        source_path / parsed.parent / PROFILE_GENERATOR_FILE,
    ]


def _read_overrides(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable generator overrides %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: data[k] for k in GENERATOR_OPTION_KEYS if isinstance(data.get(k), bool)}


def build_generator_config(
    sources: Sequence[ResolvedSource],
    profiles: Sequence[str],
    targets: Sequence[str],
    features: Sequence[str],
    options: Mapping[str, Any] | None = None,
) -> Dict[str, Any]:
    """Build the generator descriptor.

    ``options`` holds only the options set explicitly in the project
    config; those win over per-profile ``generator.yaml`` files, which in
    turn apply in source and profile order.
    """
    explicit = {k: v for k, v in dict(options or {}).items() if k in GENERATOR_OPTION_KEYS}

    config: Dict[str, Any] = {
        "$schema": GENERATOR_SCHEMA_URL,
        "targets": list(targets),
        "features": list(features),
        "baseDirs": ["."],
        "delete": True,
    }
    config.update(explicit)

    for source in sources:
        for spec in profiles:
            for path in _profile_override_files(source.local_path, spec):
                if not path.is_file():
                    continue
                for key, value in _read_overrides(path).items():
                    if key not in explicit:
                        config[key] = value
                        logger.debug("Generator option %s=%s from %s", key, value, path)
    return config


def write_generator_config(scratch: Path, config: Mapping[str, Any]) -> Path:
    """Write ``rulesync.jsonc`` into ``scratch`` and return its path."""
    path = Path(scratch) / GENERATOR_CONFIG_FILE
    write_json_atomic(path, dict(config))
    return path


class GeneratorRunner:
    """Runs the external generator in a scratch directory."""

    def __init__(self, command: str | Sequence[str] = DEFAULT_GENERATOR_COMMAND) -> None:
        self.args = shlex.split(command) if isinstance(command, str) else list(command)

    @property
    def command(self) -> str:
        return " ".join(self.args)

    def run(self, scratch: Path, *, verbose: bool = False) -> None:
        """Run the generator synchronously.

        Raises:
            GenerationError: If the executable is missing or exits non-zero.
        """
        logger.info("Running %s in %s", self.command, scratch)
        try:
            result = subprocess.run(
                self.args,
                cwd=scratch,
                capture_output=not verbose,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GenerationError(
                f"Failed to run {self.command}: executable not found. Make sure rulesync is installed.",
                command=self.command,
            ) from exc

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip() if not verbose else ""
            message = f"Failed to run {self.command} (exit code {result.returncode})"
            if detail:
                message = f"{message}\n{detail}"
            raise GenerationError(message, command=self.command, returncode=result.returncode)


__all__ = [
    "GeneratorRunner",
    "build_generator_config",
    "write_generator_config",
]
