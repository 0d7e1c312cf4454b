"""Subprocess execution for version control and build commands.

Commands run to completion one at a time. Combined stdout/stderr is fully
drained and the child is always reaped, including when the invocation is
cancelled (Ctrl+C or a cancelled CancelToken), in which case the child is
killed and `Cancelled` is returned instead of a CommandResult.

Usage:
    runner = ShellRunner(cwd=project.root)
    match runner.run(["git", "diff", "--exit-code"]):
        case Cancelled():
            return
        case CommandResult(returncode=0):
            print("clean")
        case CommandResult(output=output):
            print(output)
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from mbranch.core.cancel import CancelToken, Cancelled
from mbranch.platform.detection import Platform, detect_platform
from mbranch.platform.shell import join_args, wrap_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ShellRunner",
    "run_shell",
]

# How often a waiting step re-checks its cancel token. This is not a timeout:
# commands may run for as long as they need.
_POLL_INTERVAL_SECONDS = 0.2


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one finished command.

    Attributes:
        command: The command line that was executed.
        returncode: Exit status (-1 if the interpreter could not be started).
        output: Combined standard output and standard error.
    """

    command: str
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def __str__(self) -> str:
        return f"{self.command} (exit {self.returncode})"


class CommandRunner(Protocol):
    """Executes one command in the project root."""

    def run(self, args: Sequence[str]) -> CommandResult | Cancelled:
        """Run `args` to completion.

        Args:
            args: Program and arguments.

        Returns:
            CommandResult for a finished command (any exit status),
            Cancelled if the invocation was cancelled.
        """
        ...


def run_shell(
    command: str,
    cwd: Path,
    *,
    platform: Platform | None = None,
    cancel: CancelToken | None = None,
) -> CommandResult | Cancelled:
    """Run a command line through the platform interpreter.

    Args:
        command: Complete command line.
        cwd: Working directory.
        platform: Target platform (detected if None).
        cancel: Token checked before starting and while waiting.

    Returns:
        CommandResult once the process exited, or Cancelled.
    """
    if cancel is not None and cancel.is_cancelled:
        return Cancelled(step=command)

    launch = wrap_command(command, platform or detect_platform())
    try:
        proc = subprocess.Popen(
            launch,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        return CommandResult(command=command, returncode=-1, output=str(e))

    output = ""
    try:
        while True:
            if cancel is not None and cancel.is_cancelled:
                return _abandon(proc, command)
            try:
                output, _ = proc.communicate(timeout=_POLL_INTERVAL_SECONDS)
                break
            except subprocess.TimeoutExpired:
                continue
    except KeyboardInterrupt:
        if cancel is not None:
            cancel.cancel()
        return _abandon(proc, command)

    return CommandResult(command=command, returncode=proc.returncode, output=output or "")


def _abandon(proc: subprocess.Popen[str], command: str) -> Cancelled:
    """Kill and reap a child whose result is no longer wanted."""
    proc.kill()
    proc.communicate()
    return Cancelled(step=command)


class ShellRunner:
    """CommandRunner executing through the host shell in a fixed directory."""

    def __init__(
        self,
        *,
        cwd: Path,
        platform: Platform | None = None,
        cancel: CancelToken | None = None,
    ) -> None:
        self._cwd = cwd
        self._platform = platform or detect_platform()
        self._cancel = cancel

    @property
    def platform(self) -> Platform:
        return self._platform

    def command_line(self, args: Sequence[str]) -> str:
        """The command line `run(args)` would execute."""
        return join_args(args, self._platform)

    def run(self, args: Sequence[str]) -> CommandResult | Cancelled:
        return run_shell(
            self.command_line(args),
            self._cwd,
            platform=self._platform,
            cancel=self._cancel,
        )
