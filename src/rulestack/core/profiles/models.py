"""Profile data models.

Provides immutable dataclasses for profiles, parsed specifiers and scope
lint results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Profile:
    """A selectable content bundle declared in a repo manifest.

    Attributes:
        name: Profile name (``[a-z][a-z0-9-]*``)
        description: Human readable description
        sub_profiles: Sub-profile name -> description, in declaration order
        sources: Names of the sources declaring this profile
    """

    name: str
    description: str = ""
    sub_profiles: dict[str, str] = field(default_factory=dict)
    sources: tuple[str, ...] = ()

    @property
    def is_nested(self) -> bool:
        return bool(self.sub_profiles)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any], *, source: str | None = None) -> Profile:
        """Create a Profile from a ``repo.yaml`` ``profiles`` entry."""
        raw_subs = data.get("sub-profiles") or {}
        subs: dict[str, str] = {}
        for sub_name, sub_data in raw_subs.items():
            desc = sub_data.get("description", "") if isinstance(sub_data, dict) else ""
            subs[str(sub_name)] = str(desc or "")
        return cls(
            name=name,
            description=str(data.get("description") or ""),
            sub_profiles=subs,
            sources=(source,) if source else (),
        )

    def merged_with(self, other: Profile) -> Profile:
        """Combine with a later declaration of the same profile.

        The later description wins, sub-profiles are unioned in first-seen
        order and contributing sources accumulate.
        """
        subs = dict(self.sub_profiles)
        for sub_name, desc in other.sub_profiles.items():
            subs[sub_name] = desc
        sources = self.sources + tuple(s for s in other.sources if s not in self.sources)
        return Profile(
            name=self.name,
            description=other.description or self.description,
            sub_profiles=subs,
            sources=sources,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.sub_profiles:
            result["sub-profiles"] = {
                sub: {"description": desc} for sub, desc in self.sub_profiles.items()
            }
        if self.sources:
            result["sources"] = list(self.sources)
        return result


@dataclass(frozen=True, slots=True)
class ProfileSpec:
    """A parsed profile specifier.

    Attributes:
        parent: Profile name before the first colon
        sub: Sub-profile name, or None for bare names and wildcards
        is_wildcard: True for ``parent:*``
    """

    parent: str
    sub: str | None = None
    is_wildcard: bool = False

    @property
    def is_sub_profile(self) -> bool:
        return self.sub is not None

    def __str__(self) -> str:
        if self.is_wildcard:
            return f"{self.parent}:*"
        if self.sub is not None:
            return f"{self.parent}:{self.sub}"
        return self.parent


@dataclass(frozen=True, slots=True)
class ScopeValidation:
    """Result of linting one scoped document."""

    valid: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Result of validating a profile selection against a catalog."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors


__all__ = ["Profile", "ProfileSpec", "ScopeValidation", "SelectionResult"]
