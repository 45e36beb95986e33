"""Profile specifier parsing and expansion.

Specifiers take three forms:

- ``name``: a flat profile, or every sub-profile of a nested one
- ``name:sub``: one sub-profile
- ``name:*``: every sub-profile, same as a bare nested name

The resolver works on an explicit catalog of :class:`Profile` objects
(usually combined from the manifests of all configured sources).
"""
from __future__ import annotations

import difflib
import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rulestack.core.constants import RESERVED_PROFILE_NAMES

from .models import Profile, ProfileSpec, SelectionResult

logger = logging.getLogger(__name__)

PROFILE_SPEC_PATTERN = re.compile(r"^[a-z][a-z0-9-]*(:([a-z][a-z0-9-]*|\*))?$")
WILDCARD = "*"


def parse_specifier(spec: str) -> ProfileSpec:
    """Split a specifier on its first colon.

    Examples:
        >>> parse_specifier("dev")
        ProfileSpec(parent='dev', sub=None, is_wildcard=False)
        >>> parse_specifier("dev:*")
        ProfileSpec(parent='dev', sub=None, is_wildcard=True)
    """
    parent, sep, sub = spec.partition(":")
    if not sep:
        return ProfileSpec(parent=parent)
    if sub == WILDCARD:
        return ProfileSpec(parent=parent, is_wildcard=True)
    return ProfileSpec(parent=parent, sub=sub)


def validate_specifier(spec: str) -> Optional[str]:
    """Return an error message for an invalid specifier, or None."""
    parsed = parse_specifier(spec)
    if parsed.parent in RESERVED_PROFILE_NAMES:
        return f'"{parsed.parent}" is a reserved name and cannot be used as a profile name'
    if parsed.sub is not None and parsed.sub in RESERVED_PROFILE_NAMES:
        return f'"{parsed.sub}" is a reserved name and cannot be used as a sub-profile name'
    if not PROFILE_SPEC_PATTERN.match(spec):
        return (
            f'Invalid profile spec "{spec}". Must match pattern: lowercase letters, '
            "numbers, hyphens, optionally followed by :subprofile or :*"
        )
    return None


class ProfileResolver:
    """Resolves profile specifiers against a profile catalog."""

    def __init__(self, profiles: Mapping[str, Profile] | Iterable[Profile] = ()) -> None:
        if isinstance(profiles, Mapping):
            self._profiles: Dict[str, Profile] = dict(profiles)
        else:
            self._profiles = {p.name: p for p in profiles}

    @property
    def profiles(self) -> Dict[str, Profile]:
        return dict(self._profiles)

    def get(self, name: str) -> Optional[Profile]:
        return self._profiles.get(name)

    def is_nested(self, name: str) -> bool:
        profile = self._profiles.get(name)
        return profile is not None and profile.is_nested

    def sub_profiles(self, name: str) -> List[str]:
        profile = self._profiles.get(name)
        if profile is None:
            return []
        return list(profile.sub_profiles)

    def expand(self, specifiers: Sequence[str]) -> List[str]:
        """Expand specifiers into leaf specifiers.

        Nested references (bare or ``:*``) become one ``parent:sub`` per
        sub-profile in declaration order. Explicit sub-profiles, flat and
        unknown names pass through. ``flat:*`` collapses to ``flat``.
        Duplicates keep their first position.

        Examples:
            >>> r = ProfileResolver([Profile("dev", sub_profiles={"a": "", "b": ""})])
            >>> r.expand(["dev"]) == r.expand(["dev:*"]) == ["dev:a", "dev:b"]
            True
        """
        expanded: List[str] = []
        seen = set()

        def _add(item: str) -> None:
            if item not in seen:
                seen.add(item)
                expanded.append(item)

        for spec in specifiers:
            parsed = parse_specifier(spec)
            if parsed.sub is not None:
                _add(spec)
            elif self.is_nested(parsed.parent):
                for sub in self.sub_profiles(parsed.parent):
                    _add(f"{parsed.parent}:{sub}")
            elif parsed.is_wildcard and parsed.parent in self._profiles:
                _add(parsed.parent)
            else:
                _add(spec)

        logger.debug("Expanded profiles %s -> %s", list(specifiers), expanded)
        return expanded

    def _suggest(self, name: str) -> List[str]:
        return difflib.get_close_matches(name, list(self._profiles), n=3, cutoff=0.6)

    def validate_selection(self, specifiers: Sequence[str]) -> SelectionResult:
        """Check a selection against the catalog.

        Syntax errors, unknown profiles and unknown sub-profiles are errors;
        ``flat:*`` is a warning.
        """
        errors: List[str] = []
        warnings: List[str] = []

        for spec in specifiers:
            error = validate_specifier(spec)
            if error:
                errors.append(error)
                continue

            parsed = parse_specifier(spec)
            profile = self._profiles.get(parsed.parent)

            if parsed.is_wildcard:
                if profile is None:
                    errors.append(f'Profile "{parsed.parent}" not found in configured sources')
                    errors.extend(self._did_you_mean(self._suggest(parsed.parent)))
                elif not profile.is_nested:
                    warnings.append(
                        f'Profile "{parsed.parent}" has no sub-profiles. '
                        f'"{spec}" is equivalent to "{parsed.parent}".'
                    )
                continue

            if parsed.sub is not None:
                if profile is None:
                    errors.append(f'Parent profile "{parsed.parent}" not found in configured sources')
                elif not profile.is_nested:
                    errors.append(
                        f'Profile "{parsed.parent}" has no sub-profiles. '
                        f'Use "{parsed.parent}" instead of "{spec}".'
                    )
                elif parsed.sub not in profile.sub_profiles:
                    errors.append(
                        f'Sub-profile "{parsed.sub}" not found under "{parsed.parent}". '
                        f"Available: {', '.join(profile.sub_profiles)}"
                    )
                continue

            if profile is None:
                errors.append(f'Profile "{parsed.parent}" not found in configured sources')
                owners = [
                    f"{p.name}:{parsed.parent}"
                    for p in self._profiles.values()
                    if parsed.parent in p.sub_profiles
                ]
                errors.extend(self._did_you_mean(owners or self._suggest(parsed.parent)))

        return SelectionResult(errors=tuple(errors), warnings=tuple(warnings))

    @staticmethod
    def _did_you_mean(candidates: List[str]) -> List[str]:
        if not candidates:
            return []
        return [f"  Did you mean: {', '.join(candidates)}?"]


__all__ = [
    "PROFILE_SPEC_PATTERN",
    "ProfileResolver",
    "parse_specifier",
    "validate_specifier",
]
