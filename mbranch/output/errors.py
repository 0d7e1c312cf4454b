"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mbranch.core.errors import ErrorCode
from mbranch.core.version import InvalidVersion
from mbranch.output.console import Style
from mbranch.services.maintenance_errors import (
    BranchCreationFailed,
    CommitFailed,
    ConfigStepFailed,
    DirtyWorkingTree,
    MaintenanceError,
    NoReleaseFound,
)

if TYPE_CHECKING:
    from mbranch.output.console import ConsoleProtocol

__all__ = ["maintenance_error_exit_code", "print_maintenance_error"]


def print_maintenance_error(error: MaintenanceError, console: ConsoleProtocol) -> None:
    """Print a maintenance workflow error with the step that failed."""
    match error:
        case InvalidVersion(text=text, reason=reason):
            console.error(f"invalid version: {text} ({reason})")
        case NoReleaseFound(project_id=project_id):
            console.error(
                f"no release found for {project_id}, cannot create maintenance branch"
            )
            console.print("hint: pass --base-version MAJOR.MINOR[.INCREMENTAL]", Style.DIM)
        case DirtyWorkingTree(staged=staged):
            where = "staged changes" if staged else "local modifications"
            console.error(
                f"there are {where}, please commit them before creating the maintenance branch"
            )
        case BranchCreationFailed(
            branch=branch, tag=tag, fallback_tag=fallback_tag, returncode=rc
        ):
            console.error(f"could not create branch {branch} from tag (exit {rc})")
            console.print(f"tried: {tag}, {fallback_tag}", Style.DIM)
        case ConfigStepFailed(new_version=new_version, message=message):
            console.error(f"could not set project version to {new_version}")
            console.print(message, Style.DIM)
            console.print(
                "hint: the branch was created; fix the version and commit manually", Style.DIM
            )
        case CommitFailed(returncode=rc):
            console.error(f"could not commit version change (exit {rc})")


def maintenance_error_exit_code(error: MaintenanceError) -> int:
    """Get exit code for a maintenance workflow error."""
    match error:
        case InvalidVersion():
            return int(ErrorCode.USER_ERROR)
        case NoReleaseFound() | DirtyWorkingTree():
            return int(ErrorCode.ENV_ERROR)
        case BranchCreationFailed() | CommitFailed():
            return int(ErrorCode.VCS_ERROR)
        case ConfigStepFailed():
            return int(ErrorCode.BUILD_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
