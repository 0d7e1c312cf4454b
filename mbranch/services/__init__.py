"""Application services.

Services implement the maintenance workflow, coordinating between the
domain layer (core/) and infrastructure (git/, platform/).
"""

from mbranch.services.maintenance import (
    MaintenanceBranch,
    MaintenanceOutcome,
    MaintenanceService,
)
from mbranch.services.maintenance_errors import (
    BranchCreationFailed,
    CommitFailed,
    ConfigStepFailed,
    DirtyWorkingTree,
    MaintenanceError,
    NoReleaseFound,
)
from mbranch.services.release_lookup import GitTagReleaseLookup, LatestReleaseLookup
from mbranch.services.versioning import SetDeclaredVersion, build_version_setter

__all__ = [
    # Workflow
    "MaintenanceBranch",
    "MaintenanceOutcome",
    "MaintenanceService",
    # Errors
    "BranchCreationFailed",
    "CommitFailed",
    "ConfigStepFailed",
    "DirtyWorkingTree",
    "MaintenanceError",
    "NoReleaseFound",
    # Collaborators
    "GitTagReleaseLookup",
    "LatestReleaseLookup",
    "SetDeclaredVersion",
    "build_version_setter",
]
