"""Project detection.

The project is the git working tree the maintenance branch is created in.
Its root is the nearest directory (cwd or a parent) containing `.git`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from .config import Backend, Config
from .result import Err, Ok, Result
from .structured import as_str_dict, get_str, get_table

__all__ = [
    "Project",
    "ProjectError",
    "detect_backend",
    "detect_project",
    "find_project_root",
    "read_pom_artifact_id",
    "read_pyproject_name",
    "resolve_project_id",
]


@dataclass(frozen=True)
class ProjectError:
    """Error when the project cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected project working tree."""

    root: Path

    @property
    def pom_path(self) -> Path:
        return self.root / "pom.xml"

    @property
    def pyproject_path(self) -> Path:
        return self.root / "pyproject.toml"

    def __str__(self) -> str:
        return str(self.root)


def find_project_root(start: Path) -> Path | None:
    """Find the nearest directory containing `.git` (file or directory)."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def detect_project(start: Path | None = None) -> Result[Project, ProjectError]:
    """Detect the project from `start` (defaults to cwd)."""
    origin = start if start is not None else Path.cwd()
    if not origin.is_dir():
        return Err(ProjectError(f"not a directory: {origin}", searched_from=origin))

    root = find_project_root(origin)
    if root is None:
        return Err(
            ProjectError(
                "not inside a git working tree (no .git found)",
                searched_from=origin,
            )
        )
    return Ok(Project(root=root))


def read_pom_artifact_id(path: Path) -> str | None:
    """Read the project's own artifactId from a pom.xml.

    The parent's artifactId is ignored: only direct children of <project>
    are considered.
    """
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError):
        return None

    for child in root:
        if isinstance(child.tag, str) and child.tag.rsplit("}", 1)[-1] == "artifactId":
            text = (child.text or "").strip()
            return text or None
    return None


def read_pyproject_name(path: Path) -> str | None:
    """Read `[project].name` (or `[tool.poetry].name`) from pyproject.toml."""
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None
    if data is None:
        return None

    project = get_table(data, "project") or {}
    name = get_str(project, "name")
    if name:
        return name
    tool = get_table(data, "tool") or {}
    poetry = get_table(tool, "poetry") or {}
    return get_str(poetry, "name")


def resolve_project_id(project: Project, *, override: str | None, config: Config) -> str:
    """Pick the project id used in tag and branch names.

    Precedence: explicit override, config, pom.xml artifactId,
    pyproject.toml name, root directory name.
    """
    if override:
        return override
    if config.project_id:
        return config.project_id
    if project.pom_path.is_file():
        artifact_id = read_pom_artifact_id(project.pom_path)
        if artifact_id:
            return artifact_id
    if project.pyproject_path.is_file():
        name = read_pyproject_name(project.pyproject_path)
        if name:
            return name
    return project.root.name


def detect_backend(project: Project, requested: Backend) -> Result[Backend, ProjectError]:
    """Resolve `auto` to a concrete version backend."""
    if requested != "auto":
        return Ok(requested)
    if project.pom_path.is_file():
        return Ok("maven")
    if project.pyproject_path.is_file():
        return Ok("pyproject")
    return Err(
        ProjectError(
            "cannot detect how to set the project version (no pom.xml or pyproject.toml)",
            searched_from=project.root,
        )
    )
