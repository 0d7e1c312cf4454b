"""The "set declared version" step.

After the maintenance branch is created, the project's declared version is
rewritten to the next development version. How that happens depends on the
build system:

- maven: `mvn versions:set` rewrites every pom.xml of the reactor.
- pyproject: `[project].version` (or `[tool.poetry].version`) is edited in
  place, keeping the rest of the file untouched.
- command: a user-supplied command line with a `{version}` placeholder.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from mbranch.core.cancel import Cancelled
from mbranch.core.config import Backend, Config
from mbranch.core.result import Err, Ok, Result
from mbranch.core.version import SNAPSHOT_SUFFIX
from mbranch.platform.files import atomic_write_text, backup_file
from mbranch.platform.process import CommandRunner

__all__ = [
    "CommandVersionSetter",
    "MavenVersionSetter",
    "PyprojectVersionSetter",
    "SetDeclaredVersion",
    "build_version_setter",
    "pep440_version",
    "replace_declared_version",
]

_VERSION_LINE_RE = re.compile(r"^(version\s*=\s*)([\"'])[^\"']*\2", re.MULTILINE)
_OUTPUT_TAIL_LINES = 5


class SetDeclaredVersion(Protocol):
    name: str

    def set_version(self, new_version: str, *, keep_backups: bool) -> Result[None, str] | Cancelled:
        """Rewrite the project's declared version in place.

        Returns:
            Ok(None) on success, Err(message) on failure, Cancelled if the
            invocation was cancelled while the step was running.
        """
        ...


def _tail(output: str) -> str:
    lines = [ln for ln in output.strip().splitlines() if ln.strip()]
    return "\n".join(lines[-_OUTPUT_TAIL_LINES:])


def _run_step(runner: CommandRunner, args: Sequence[str]) -> Result[None, str] | Cancelled:
    result = runner.run(args)
    if isinstance(result, Cancelled):
        return result
    if not result.ok:
        message = f"{result.command} failed (exit {result.returncode})"
        tail = _tail(result.output)
        return Err(f"{message}\n{tail}" if tail else message)
    return Ok(None)


class MavenVersionSetter:
    """Runs the versions-maven-plugin `set` goal."""

    name = "maven"

    def __init__(self, runner: CommandRunner, *, executable: str = "mvn") -> None:
        self._runner = runner
        self._executable = executable

    def command(self, new_version: str, *, keep_backups: bool) -> list[str]:
        return [
            self._executable,
            "--batch-mode",
            "versions:set",
            f"-DnewVersion={new_version}",
            f"-DgenerateBackupPoms={'true' if keep_backups else 'false'}",
        ]

    def set_version(self, new_version: str, *, keep_backups: bool) -> Result[None, str] | Cancelled:
        return _run_step(self._runner, self.command(new_version, keep_backups=keep_backups))


def replace_declared_version(content: str, new_version: str) -> str | None:
    """Replace the version in a pyproject.toml document.

    Tries `[project]` first, then `[tool.poetry]`. Only the first
    `version = "..."` line of the section changes; quoting style is kept.

    Returns:
        The new content, or None if no version declaration was found.
    """
    for section in ("project", "tool.poetry"):
        pattern = re.compile(
            rf"^\[{re.escape(section)}\][^\S\n]*$.*?(?=^\[|\Z)",
            re.MULTILINE | re.DOTALL,
        )
        match = pattern.search(content)
        if match is None:
            continue

        body = match.group(0)
        new_body, count = _VERSION_LINE_RE.subn(
            lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(2)}",
            body,
            count=1,
        )
        if count:
            return content[: match.start()] + new_body + content[match.end() :]
    return None


def pep440_version(version: str) -> str:
    """Map a `-SNAPSHOT` development version to its PEP 440 form.

    `2.3.6-SNAPSHOT` becomes `2.3.6.dev0`; other versions are returned as is.
    """
    if version.endswith(SNAPSHOT_SUFFIX):
        return f"{version.removesuffix(SNAPSHOT_SUFFIX)}.dev0"
    return version


class PyprojectVersionSetter:
    """Edits the version declared in pyproject.toml.

    Build backends only accept PEP 440 versions, so snapshot versions are
    written in their `.devN` form.
    """

    name = "pyproject"

    def __init__(self, path: Path) -> None:
        self._path = path

    def set_version(self, new_version: str, *, keep_backups: bool) -> Result[None, str] | Cancelled:
        try:
            content = self._path.read_text(encoding="utf-8")
        except OSError as e:
            return Err(f"failed to read {self._path.name}: {e}")

        updated = replace_declared_version(content, pep440_version(new_version))
        if updated is None:
            return Err(
                f"no version declaration in {self._path.name} "
                "(expected [project].version or [tool.poetry].version)"
            )

        try:
            if keep_backups:
                backup_file(self._path)
            atomic_write_text(self._path, updated)
        except OSError as e:
            return Err(f"failed to write {self._path.name}: {e}")
        return Ok(None)


class CommandVersionSetter:
    """Runs a configured command; `{version}` is replaced in each argument.

    The command decides on its own whether to keep backups.
    """

    name = "command"

    def __init__(self, runner: CommandRunner, template: str) -> None:
        self._runner = runner
        self._template = template

    def command(self, new_version: str) -> list[str]:
        return [part.replace("{version}", new_version) for part in shlex.split(self._template)]

    def set_version(self, new_version: str, *, keep_backups: bool) -> Result[None, str] | Cancelled:
        del keep_backups
        return _run_step(self._runner, self.command(new_version))


def build_version_setter(
    backend: Backend,
    *,
    root: Path,
    runner: CommandRunner,
    config: Config,
) -> Result[SetDeclaredVersion, str]:
    """Instantiate the setter for a resolved (non-auto) backend."""
    match backend:
        case "maven":
            return Ok(MavenVersionSetter(runner, executable=config.maven.executable))
        case "pyproject":
            return Ok(PyprojectVersionSetter(root / "pyproject.toml"))
        case "command":
            if not config.command.set_version:
                return Err("backend 'command' requires [command] set_version in the config")
            return Ok(CommandVersionSetter(runner, config.command.set_version))
        case _:
            return Err(f"backend must be resolved before use: {backend}")
