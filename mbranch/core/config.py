"""Typed configuration loading.

Configuration is optional. It is read from `.mbranch.toml` at the project
root, or from the `[tool.mbranch]` table of `pyproject.toml`:

    project_id = "foo"
    backend = "maven"          # auto | maven | pyproject | command
    commit_message = "preparing maintenance branch for development"
    keep_backups = false

    [maven]
    executable = "mvn"

    [command]
    set_version = "npm version {version} --no-git-tag-version"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "BACKENDS",
    "Backend",
    "CONFIG_FILE_NAME",
    "CommandConfig",
    "Config",
    "ConfigError",
    "DEFAULT_COMMIT_MESSAGE",
    "MavenConfig",
    "find_config",
    "load_config",
    "load_project_config",
]

CONFIG_FILE_NAME = ".mbranch.toml"
DEFAULT_COMMIT_MESSAGE = "preparing maintenance branch for development"

Backend = Literal["auto", "maven", "pyproject", "command"]
BACKENDS: tuple[Backend, ...] = ("auto", "maven", "pyproject", "command")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class MavenConfig:
    executable: str = "mvn"


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """Custom "set version" command; `{version}` is substituted."""

    set_version: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project_id: str | None = None
    backend: Backend = "auto"
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    keep_backups: bool = False
    maven: MavenConfig = field(default_factory=MavenConfig)
    command: CommandConfig = field(default_factory=CommandConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If `backend` names an unknown backend.
        """
        maven: StrDict = get_table(data, "maven") or {}
        command: StrDict = get_table(data, "command") or {}

        backend = get_str(data, "backend") or "auto"
        if backend not in BACKENDS:
            raise ValueError(f"unknown backend {backend!r} (expected one of {', '.join(BACKENDS)})")

        keep_backups = get_bool(data, "keep_backups")
        return cls(
            project_id=get_str(data, "project_id"),
            backend=cast(Backend, backend),
            commit_message=get_str(data, "commit_message") or DEFAULT_COMMIT_MESSAGE,
            keep_backups=False if keep_backups is None else keep_backups,
            maven=MavenConfig(executable=get_str(maven, "executable") or "mvn"),
            command=CommandConfig(set_version=get_str(command, "set_version")),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from `.mbranch.toml` or `pyproject.toml`.

    For `pyproject.toml` only the `[tool.mbranch]` table is read; a missing
    table yields the default config.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    data = result.value
    if path.name == "pyproject.toml":
        tool = get_table(data, "tool") or {}
        data = get_table(tool, "mbranch") or {}

    try:
        return Ok(Config.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def find_config(root: Path) -> Path | None:
    """Return the config file to use for a project root, if any."""
    dedicated = root / CONFIG_FILE_NAME
    if dedicated.is_file():
        return dedicated

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        parsed = _parse_toml(pyproject)
        if isinstance(parsed, Ok):
            tool = get_table(parsed.value, "tool") or {}
            if get_table(tool, "mbranch") is not None:
                return pyproject
    return None


def load_project_config(root: Path) -> Result[Config, ConfigError]:
    """Load the project's config, or the default config when there is none."""
    path = find_config(root)
    if path is None:
        return Ok(Config())
    return load_config(path)
