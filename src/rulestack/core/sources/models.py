"""Content source data models."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

GIT = "git"
LOCAL = "local"


@dataclass(frozen=True, slots=True)
class Source:
    """A configured content source.

    Attributes:
        kind: ``git`` or ``local``
        location: Clone URL for git sources, filesystem path for local ones
        name: Optional display name
    """

    kind: str
    location: str
    name: str | None = None

    @property
    def is_git(self) -> bool:
        return self.kind == GIT

    @property
    def display_name(self) -> str:
        """Explicit name, else last URL segment without ``.git``, else path basename."""
        if self.name:
            return self.name
        if self.is_git:
            trimmed = self.location.rstrip("/")
            if trimmed.endswith(".git"):
                trimmed = trimmed[: -len(".git")]
            return trimmed.replace(":", "/").split("/")[-1] or self.location
        return PurePosixPath(self.location.rstrip("/")).name or self.location

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the object form accepted in config files."""
        key = "url" if self.is_git else "path"
        result: dict[str, Any] = {"type": self.kind, key: self.location}
        if self.name:
            result["name"] = self.name
        return result


@dataclass(frozen=True, slots=True)
class ResolvedSource:
    """A source together with the local directory holding its content."""

    source: Source
    local_path: Path

    @property
    def name(self) -> str:
        if self.source.name:
            return self.source.name
        if self.source.is_git:
            return self.source.display_name
        return self.local_path.name or self.source.display_name


__all__ = ["GIT", "LOCAL", "Source", "ResolvedSource"]
