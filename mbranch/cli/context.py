from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from mbranch.core.cancel import CancelToken
from mbranch.core.config import Config, load_project_config
from mbranch.core.errors import ErrorCode
from mbranch.core.project import Project, detect_project
from mbranch.core.result import Err
from mbranch.output.console import ConsoleProtocol, RichConsole
from mbranch.platform.detection import Platform, detect_platform
from mbranch.platform.process import ShellRunner


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    platform: Platform
    config: Config
    console: ConsoleProtocol
    runner: ShellRunner


def build_context(*, project_dir: Path | None = None, verbose: bool = False) -> CLIContext:
    project_result = detect_project(project_dir)
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    project = project_result.value

    config_result = load_project_config(project.root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    platform = detect_platform()
    return CLIContext(
        project=project,
        platform=platform,
        config=config_result.value,
        console=RichConsole(verbose=verbose),
        runner=ShellRunner(cwd=project.root, platform=platform, cancel=CancelToken()),
    )
