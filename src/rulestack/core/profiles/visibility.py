"""Per-document visibility rules.

Documents in the global ``shared/`` area match profiles by name, and a
parent name covers all of its sub-profiles. Documents in a parent's
``_shared/`` area are scoped to that parent and name siblings by bare
sub-profile name only.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from rulestack.core.constants import EXCLUDE_PROFILES_KEY, GLOBAL_SCOPE, PROFILES_KEY

from .header import Header, get_list, parse_header

logger = logging.getLogger(__name__)


def profile_matches(declared: str, target: str, scope: str = GLOBAL_SCOPE) -> bool:
    """Return True if a declared profile entry selects ``target`` in ``scope``.

    Examples:
        >>> profile_matches("dev", "dev:frontend")
        True
        >>> profile_matches("frontend", "dev:frontend", scope="dev")
        True
        >>> profile_matches("dev:frontend", "dev:frontend", scope="dev")
        False
    """
    if scope == GLOBAL_SCOPE:
        if declared == target:
            return True
        parent, sep, _ = target.partition(":")
        return bool(sep) and declared == parent

    parent, sep, sub = target.partition(":")
    if not sep or parent != scope:
        return False
    return ":" not in declared and declared == sub


def _any_match(declared: Iterable[str], targets: Sequence[str], scope: str) -> bool:
    return any(profile_matches(d, t, scope) for d in declared for t in targets)


def header_allows(header: Optional[Header], targets: Sequence[str], scope: str = GLOBAL_SCOPE) -> bool:
    """Apply the visibility rules to already parsed header metadata."""
    if header is None:
        return True

    excluded = get_list(header, EXCLUDE_PROFILES_KEY) or []
    if excluded and _any_match(excluded, targets, scope):
        return False

    declared = get_list(header, PROFILES_KEY)
    if declared is None:
        return True
    return _any_match(declared, targets, scope)


def should_include(path: Path, targets: Sequence[str], scope: str = GLOBAL_SCOPE) -> bool:
    """Decide whether the document at ``path`` is visible to ``targets``.

    Never raises: unreadable documents and headers without usable profile
    keys are unrestricted.
    """
    included = header_allows(parse_header(path), targets, scope)
    if not included:
        logger.debug("Filtered out %s (scope=%s, targets=%s)", path, scope, list(targets))
    return included


__all__ = ["profile_matches", "header_allows", "should_include"]
