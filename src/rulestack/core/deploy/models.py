"""Deployment and lock data models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rulestack.core.constants import LOCK_VERSION


@dataclass(frozen=True, slots=True)
class LockRecord:
    """Files rulestack currently owns in a project.

    Attributes:
        version: Lock format version
        created: Timestamp of the first write, never changed afterwards
        last_synced: Timestamp of the latest write
        files: Project-relative, forward-slash paths; sorted and unique
    """

    created: str
    last_synced: str
    files: tuple[str, ...] = ()
    version: str = LOCK_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "created": self.created,
            "lastSynced": self.last_synced,
            "files": list(self.files),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockRecord:
        return cls(
            version=data["version"],
            created=data["created"],
            last_synced=data["lastSynced"],
            files=tuple(sorted(set(data["files"]))),
        )


@dataclass(frozen=True, slots=True)
class RemovalFailure:
    file: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "error": self.error}


@dataclass
class RemoveResult:
    """Outcome of removing tracked files."""

    removed: list[str] = field(default_factory=list)
    failed: list[RemovalFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "removed": list(self.removed),
            "failed": [f.to_dict() for f in self.failed],
        }


@dataclass(frozen=True, slots=True)
class Conflict:
    """A destination that exists but is not owned by rulestack."""

    file: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class DeployOptions:
    """Options for :func:`deploy`.

    Attributes:
        targets: Restrict deployment to these tools' directories (None = all)
        output_prefix: Project sub-path prepended to every destination
        dry_run: Report what would be deployed without copying
    """

    targets: tuple[str, ...] | None = None
    output_prefix: str = ""
    dry_run: bool = False


@dataclass
class DeploymentResult:
    """Outcome of one deployment.

    ``created`` and ``overwritten`` partition ``deployed``; every conflict
    is also listed in ``skipped``.
    """

    deployed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    overwritten: list[str] = field(default_factory=list)

    def extend(self, other: DeploymentResult) -> None:
        self.deployed.extend(other.deployed)
        self.skipped.extend(other.skipped)
        self.conflicts.extend(other.conflicts)
        self.created.extend(other.created)
        self.overwritten.extend(other.overwritten)

    def to_dict(self) -> dict[str, Any]:
        return {
            "deployed": list(self.deployed),
            "skipped": list(self.skipped),
            "conflicts": [c.to_dict() for c in self.conflicts],
            "created": list(self.created),
            "overwritten": list(self.overwritten),
        }


__all__ = [
    "Conflict",
    "DeployOptions",
    "DeploymentResult",
    "LockRecord",
    "RemovalFailure",
    "RemoveResult",
]
