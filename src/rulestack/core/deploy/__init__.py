"""Deployment of generated files and tracking of owned files."""
from __future__ import annotations

from .deployer import (
    CONFLICT_REASON,
    Deployer,
    check_conflicts,
    deploy,
    files_to_deploy,
    generated_target_dirs,
)
from .lock import LockLedger
from .models import (
    Conflict,
    DeployOptions,
    DeploymentResult,
    LockRecord,
    RemovalFailure,
    RemoveResult,
)

__all__ = [
    "CONFLICT_REASON",
    "Conflict",
    "DeployOptions",
    "Deployer",
    "DeploymentResult",
    "LockLedger",
    "LockRecord",
    "RemovalFailure",
    "RemoveResult",
    "check_conflicts",
    "deploy",
    "files_to_deploy",
    "generated_target_dirs",
]
