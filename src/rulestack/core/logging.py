from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from rulestack.core.utils.io import ensure_directory

VERBOSE_ENV = "RULESTACK_VERBOSE"

_STDERR_HANDLER: logging.Handler | None = None
_FILE_HANDLER: logging.Handler | None = None


def verbose_from_env() -> bool:
    """Return True when ``RULESTACK_VERBOSE`` is set to a truthy value."""
    return os.environ.get(VERBOSE_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(*, verbose: bool = False, log_path: Path | None = None) -> None:
    """Configure stdlib logging for a CLI run.

    Installs a single stderr handler (WARNING, or DEBUG when verbose) and,
    when ``log_path`` is given, a file handler at DEBUG. Calling it again
    replaces the handlers installed by the previous call.
    """
    global _STDERR_HANDLER, _FILE_HANDLER

    verbose = verbose or verbose_from_env()
    level = logging.DEBUG if verbose else logging.WARNING

    root = logging.getLogger()
    for handler in (_STDERR_HANDLER, _FILE_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    _STDERR_HANDLER = None
    _FILE_HANDLER = None

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(sh)
    _STDERR_HANDLER = sh

    root_level = level
    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(fh)
        _FILE_HANDLER = fh
        root_level = logging.DEBUG

    root.setLevel(root_level)


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by :func:`configure_logging`."""
    global _STDERR_HANDLER, _FILE_HANDLER
    root = logging.getLogger()
    for handler in (_STDERR_HANDLER, _FILE_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    _STDERR_HANDLER = None
    _FILE_HANDLER = None


__all__ = ["configure_logging", "reset_logging_for_tests", "verbose_from_env", "VERBOSE_ENV"]
