"""Maintenance commands - create a maintenance branch from a release tag."""

from __future__ import annotations

from pathlib import Path
from typing import cast

import typer

from mbranch.cli.context import CLIContext, build_context
from mbranch.core.cancel import Cancelled
from mbranch.core.config import BACKENDS, Backend
from mbranch.core.errors import ErrorCode
from mbranch.core.project import detect_backend, resolve_project_id
from mbranch.core.result import Err, Ok
from mbranch.git.repository import Repository
from mbranch.output.console import ConsoleProtocol, Style
from mbranch.output.errors import maintenance_error_exit_code, print_maintenance_error
from mbranch.services.maintenance import MaintenanceOutcome, MaintenanceService
from mbranch.services.release_lookup import GitTagReleaseLookup
from mbranch.services.versioning import build_version_setter


def _build_service(
    ctx: CLIContext,
    *,
    project_id: str | None,
    backend: str | None,
    keep_backups: bool | None,
) -> MaintenanceService:
    requested = backend or ctx.config.backend
    if requested not in BACKENDS:
        ctx.console.error(f"unknown backend: {requested} (expected one of {', '.join(BACKENDS)})")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    resolved = detect_backend(ctx.project, cast(Backend, requested))
    if isinstance(resolved, Err):
        ctx.console.error(resolved.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    setter = build_version_setter(
        resolved.value,
        root=ctx.project.root,
        runner=ctx.runner,
        config=ctx.config,
    )
    if isinstance(setter, Err):
        ctx.console.error(setter.error)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    repository = Repository(ctx.runner)
    return MaintenanceService(
        project_id=resolve_project_id(ctx.project, override=project_id, config=ctx.config),
        repository=repository,
        lookup=GitTagReleaseLookup(repository),
        version_setter=setter.value,
        console=ctx.console,
        commit_message=ctx.config.commit_message,
        keep_backups=ctx.config.keep_backups if keep_backups is None else keep_backups,
    )


def _exit_on_failure(outcome: MaintenanceOutcome, console: ConsoleProtocol) -> None:
    match outcome:
        case Cancelled(step=step):
            console.warning(f"cancelled: {step}")
            raise typer.Exit(code=int(ErrorCode.CANCELLED))
        case Err(error=error):
            print_maintenance_error(error, console)
            raise typer.Exit(code=maintenance_error_exit_code(error))
        case Ok():
            pass


def maintenance(
    base_version: str | None = typer.Option(
        None,
        "--base-version",
        help="Version to base the branch on (MAJOR.MINOR[.INCREMENTAL]); defaults to latest release",
    ),
    project_id: str | None = typer.Option(
        None, "--project-id", help="Prefix of tag and branch names (default: detected)"
    ),
    project_dir: Path | None = typer.Option(
        None, "--project-dir", help="Directory inside the project (default: cwd)"
    ),
    backend: str | None = typer.Option(
        None, "--backend", help="How to set the version: auto, maven, pyproject, command"
    ),
    keep_backups: bool | None = typer.Option(
        None,
        "--keep-backups/--no-keep-backups",
        help="Keep backup copies of rewritten version files (default: from config)",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show command output"),
) -> None:
    """Create a maintenance branch for a previously released version."""
    ctx = build_context(project_dir=project_dir, verbose=verbose)
    service = _build_service(
        ctx, project_id=project_id, backend=backend, keep_backups=keep_backups
    )

    outcome: MaintenanceOutcome
    try:
        outcome = service.run(base_version, dry_run=dry_run)
    except KeyboardInterrupt:
        outcome = Cancelled(step="maintenance")
    _exit_on_failure(outcome, ctx.console)
    assert isinstance(outcome, Ok)

    created = outcome.value
    if created.dry_run:
        ctx.console.print("dry run: nothing was changed", Style.DIM)
        return
    if created.used_fallback:
        ctx.console.warning(f"tag {created.plan.tag} not usable, branched from {created.tag}")
    ctx.console.success(f"{created.branch} ready for development at {created.version}")


def plan(
    base_version: str | None = typer.Option(
        None,
        "--base-version",
        help="Version to base the branch on (MAJOR.MINOR[.INCREMENTAL]); defaults to latest release",
    ),
    project_id: str | None = typer.Option(
        None, "--project-id", help="Prefix of tag and branch names (default: detected)"
    ),
    project_dir: Path | None = typer.Option(
        None, "--project-dir", help="Directory inside the project (default: cwd)"
    ),
) -> None:
    """Print the names a maintenance branch would get, without changing anything."""
    ctx = build_context(project_dir=project_dir)
    repository = Repository(ctx.runner)
    service = MaintenanceService(
        project_id=resolve_project_id(ctx.project, override=project_id, config=ctx.config),
        repository=repository,
        lookup=GitTagReleaseLookup(repository),
        version_setter=_NoVersionSetter(),
        console=ctx.console,
    )

    planned = service.plan(base_version)
    _exit_on_failure(planned, ctx.console)
    assert isinstance(planned, Ok)

    p = planned.value
    ctx.console.header(f"{p.project_id} {p.release_version}")
    ctx.console.print(f"tag:      {p.tag} (fallback {p.fallback_tag})")
    ctx.console.print(f"branch:   {p.branch}")
    ctx.console.print(f"version:  {p.branch_version}")


class _NoVersionSetter:
    """Placeholder for commands that never reach the version step."""

    name = "none"

    def set_version(self, new_version: str, *, keep_backups: bool) -> Err[str]:
        del keep_backups
        return Err(f"cannot set version {new_version} from a read-only command")
