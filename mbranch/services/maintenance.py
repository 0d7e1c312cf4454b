"""Maintenance branch provisioning.

Creates `<project>-MAJOR.MINOR.x` from the release tag of a published
version and commits the next development version on it:

1. resolve the release (explicit base version or latest release lookup)
2. derive tag, branch and version names
3. refuse to run with unstaged or staged changes
4. `git checkout -b <branch> <tag>`, retried once from the tag without its
   last segment (releases tagged without their incremental part)
5. set the declared version to the next snapshot
6. commit every modified tracked file

The first failure is terminal. Nothing is rolled back: if step 5 or 6 fails
the branch stays checked out for the operator to fix. Command output is
only logged; decisions are made on exit status.
"""

from __future__ import annotations

from dataclasses import dataclass

from mbranch.core.cancel import Cancelled
from mbranch.core.config import DEFAULT_COMMIT_MESSAGE
from mbranch.core.result import Err, Ok, Result
from mbranch.core.version import (
    MaintenancePlan,
    ReleaseVersion,
    parse_release_version,
    plan_maintenance,
    release_from_components,
)
from mbranch.git.repository import Repository
from mbranch.output.console import ConsoleProtocol, Style
from mbranch.platform.process import CommandResult
from mbranch.services.maintenance_errors import (
    BranchCreationFailed,
    CommitFailed,
    ConfigStepFailed,
    DirtyWorkingTree,
    MaintenanceError,
    NoReleaseFound,
)
from mbranch.services.release_lookup import LatestReleaseLookup
from mbranch.services.versioning import SetDeclaredVersion

__all__ = [
    "MaintenanceBranch",
    "MaintenanceOutcome",
    "MaintenanceService",
]


@dataclass(frozen=True, slots=True)
class MaintenanceBranch:
    """A provisioned (or, in dry-run mode, planned) maintenance branch.

    Attributes:
        plan: Derived names.
        tag: Tag the branch was created from (plan.tag or plan.fallback_tag).
        dry_run: True if nothing was executed.
    """

    plan: MaintenancePlan
    tag: str
    dry_run: bool = False

    @property
    def branch(self) -> str:
        return self.plan.branch

    @property
    def version(self) -> str:
        return self.plan.branch_version

    @property
    def used_fallback(self) -> bool:
        return self.tag != self.plan.tag


type MaintenanceOutcome = Result[MaintenanceBranch, MaintenanceError] | Cancelled


class MaintenanceService:
    def __init__(
        self,
        *,
        project_id: str,
        repository: Repository,
        lookup: LatestReleaseLookup,
        version_setter: SetDeclaredVersion,
        console: ConsoleProtocol,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        keep_backups: bool = False,
    ) -> None:
        self._project_id = project_id
        self._repository = repository
        self._lookup = lookup
        self._version_setter = version_setter
        self._console = console
        self._commit_message = commit_message
        self._keep_backups = keep_backups

    def resolve_release(
        self, base_version: str | None
    ) -> Result[ReleaseVersion, MaintenanceError] | Cancelled:
        if base_version is not None:
            return parse_release_version(base_version)

        components = self._lookup.latest_release(self._project_id)
        if isinstance(components, Cancelled):
            return components
        if not components.found:
            return Err(NoReleaseFound(project_id=self._project_id))
        return release_from_components(components)

    def plan(self, base_version: str | None) -> Result[MaintenancePlan, MaintenanceError] | Cancelled:
        release = self.resolve_release(base_version)
        if isinstance(release, Cancelled | Err):
            return release
        return plan_maintenance(self._project_id, release.value)

    def run(self, base_version: str | None = None, *, dry_run: bool = False) -> MaintenanceOutcome:
        planned = self.plan(base_version)
        if isinstance(planned, Cancelled | Err):
            return planned
        plan = planned.value

        self._console.info(f"Release version is [{plan.release_version}]")
        self._console.info(f"Creating branch from tag [{plan.tag}]")
        self._console.info(
            f"Branch [{plan.branch}] will be created with version [{plan.branch_version}]"
        )

        if dry_run:
            self._print_commands(plan)
            return Ok(MaintenanceBranch(plan=plan, tag=plan.tag, dry_run=True))

        clean = self._ensure_clean()
        if isinstance(clean, Cancelled | Err):
            return clean

        created = self._create_branch(plan)
        if isinstance(created, Cancelled | Err):
            return created
        self._console.success(f"Branch [{plan.branch}] created from [{created.value}]")

        self._console.info("Updating project version")
        bumped = self._bump_version(plan)
        if isinstance(bumped, Cancelled | Err):
            return bumped

        committed = self._commit()
        if isinstance(committed, Cancelled | Err):
            return committed

        return Ok(MaintenanceBranch(plan=plan, tag=created.value))

    def _ensure_clean(self) -> Result[None, MaintenanceError] | Cancelled:
        worktree = self._repository.diff_worktree()
        if isinstance(worktree, Cancelled):
            return worktree
        self._log(worktree)
        if not worktree.ok:
            return Err(DirtyWorkingTree(staged=False))

        index = self._repository.diff_index()
        if isinstance(index, Cancelled):
            return index
        self._log(index)
        if not index.ok:
            return Err(DirtyWorkingTree(staged=True))

        return Ok(None)

    def _create_branch(self, plan: MaintenancePlan) -> Result[str, MaintenanceError] | Cancelled:
        """Create the branch; returns the tag it was created from."""
        first = self._repository.checkout_new_branch(plan.branch, plan.tag)
        if isinstance(first, Cancelled):
            return first
        self._log(first)
        if first.ok:
            return Ok(plan.tag)

        self._console.warning(
            f"could not create branch from [{plan.tag}], retrying from [{plan.fallback_tag}]"
        )
        retry = self._repository.checkout_new_branch(plan.branch, plan.fallback_tag)
        if isinstance(retry, Cancelled):
            return retry
        self._log(retry)
        if retry.ok:
            return Ok(plan.fallback_tag)

        return Err(
            BranchCreationFailed(
                branch=plan.branch,
                tag=plan.tag,
                fallback_tag=plan.fallback_tag,
                returncode=retry.returncode,
            )
        )

    def _bump_version(self, plan: MaintenancePlan) -> Result[None, MaintenanceError] | Cancelled:
        result = self._version_setter.set_version(
            plan.branch_version, keep_backups=self._keep_backups
        )
        if isinstance(result, Cancelled):
            return result
        if isinstance(result, Err):
            return Err(ConfigStepFailed(new_version=plan.branch_version, message=result.error))
        return Ok(None)

    def _commit(self) -> Result[None, MaintenanceError] | Cancelled:
        result = self._repository.commit_all(self._commit_message)
        if isinstance(result, Cancelled):
            return result
        self._log(result)
        if not result.ok:
            return Err(CommitFailed(returncode=result.returncode))
        return Ok(None)

    def _log(self, result: CommandResult) -> None:
        output = result.output.strip()
        self._console.debug(f"{result.command} (exit {result.returncode})")
        if output:
            self._console.debug(output)

    def _print_commands(self, plan: MaintenancePlan) -> None:
        self._console.print("git diff --exit-code", Style.DIM)
        self._console.print("git diff --cached --exit-code", Style.DIM)
        self._console.print(
            f"git checkout -b {plan.branch} {plan.tag}"
            f"  (fallback: {plan.fallback_tag})",
            Style.DIM,
        )
        self._console.print(
            f"set version {plan.branch_version} ({self._version_setter.name})", Style.DIM
        )
        self._console.print(f'git commit -am "{self._commit_message}"', Style.DIM)
