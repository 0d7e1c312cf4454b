"""Release version arithmetic.

Derives every name the maintenance workflow needs from a released version
and a project id. All functions are pure: same inputs, same strings.

Example (project id "foo"):

    2.3    -> tag foo-2.3,   branch foo-2.3.x, version 2.3.1-SNAPSHOT
    2.3.5  -> tag foo-2.3.5, branch foo-2.3.x, version 2.3.6-SNAPSHOT
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .result import Err, Ok, Result

__all__ = [
    "InvalidVersion",
    "MaintenancePlan",
    "ReleaseComponents",
    "ReleaseVersion",
    "SNAPSHOT_SUFFIX",
    "branch_name",
    "branch_version",
    "fallback_tag_name",
    "parse_release_version",
    "plan_maintenance",
    "release_from_components",
    "release_version",
    "tag_name",
]

SNAPSHOT_SUFFIX = "-SNAPSHOT"

_INTEGER_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    """A version string or component that cannot be used."""

    text: str
    reason: str


@dataclass(frozen=True, slots=True)
class ReleaseComponents:
    """Raw answer of a release lookup.

    All fields are None when no release exists.
    """

    major: str | None = None
    minor: str | None = None
    incremental: str | None = None

    @property
    def found(self) -> bool:
        return self.major is not None


@dataclass(frozen=True, slots=True)
class ReleaseVersion:
    """A previously published major.minor[.incremental] version."""

    major: str
    minor: str
    incremental: str | None = None

    def __str__(self) -> str:
        return release_version(self)


@dataclass(frozen=True, slots=True)
class MaintenancePlan:
    """Names derived for one maintenance branch."""

    project_id: str
    release: ReleaseVersion
    release_version: str
    tag: str
    fallback_tag: str
    branch: str
    branch_version: str


def parse_release_version(text: str) -> Result[ReleaseVersion, InvalidVersion]:
    """Parse an explicit dotted version.

    Parts beyond the third are ignored ("1.2.3.4" is release 1.2.3). The
    incremental part is not checked here: "1.2.x" parses and only fails when
    the next branch version is computed.
    """
    parts = text.strip().split(".")
    if len(parts) < 2:
        return Err(InvalidVersion(text, "expected major.minor[.incremental]"))
    major, minor = parts[0], parts[1]
    incremental = parts[2] if len(parts) > 2 and parts[2] else None
    if not major or not minor:
        return Err(InvalidVersion(text, "major and minor must not be empty"))
    return Ok(ReleaseVersion(major=major, minor=minor, incremental=incremental))


def release_from_components(
    components: ReleaseComponents,
) -> Result[ReleaseVersion, InvalidVersion]:
    """Build a ReleaseVersion from lookup components.

    Callers check `components.found` first; a missing major here is treated
    like any other malformed answer.
    """
    major = (components.major or "").strip()
    minor = (components.minor or "").strip()
    incremental = (components.incremental or "").strip() or None
    if not major or not minor:
        shown = ".".join(p for p in (major, minor) if p) or "<empty>"
        return Err(InvalidVersion(shown, "release lookup returned no major/minor version"))
    return Ok(ReleaseVersion(major=major, minor=minor, incremental=incremental))


def release_version(release: ReleaseVersion) -> str:
    base = f"{release.major}.{release.minor}"
    if release.incremental is None:
        return base
    return f"{base}.{release.incremental}"


def tag_name(release: ReleaseVersion, project_id: str) -> str:
    return f"{project_id}-{release_version(release)}"


def branch_name(release: ReleaseVersion, project_id: str) -> str:
    return f"{project_id}-{release.major}.{release.minor}.x"


def branch_version(release: ReleaseVersion) -> Result[str, InvalidVersion]:
    """Next development version on the maintenance branch."""
    if release.incremental is None:
        next_incremental = 1
    elif _INTEGER_RE.match(release.incremental):
        next_incremental = int(release.incremental) + 1
    else:
        return Err(
            InvalidVersion(
                release_version(release),
                f"incremental version is not an integer: {release.incremental}",
            )
        )
    return Ok(f"{release.major}.{release.minor}.{next_incremental}{SNAPSHOT_SUFFIX}")


def fallback_tag_name(tag: str) -> str:
    """Tag name with the trailing ".<segment>" removed.

    Some releases are tagged without their incremental segment. The result
    is not checked against existing tags.
    """
    dot = tag.rfind(".")
    if dot < 0:
        return tag
    return tag[:dot]


def plan_maintenance(
    project_id: str, release: ReleaseVersion
) -> Result[MaintenancePlan, InvalidVersion]:
    next_version = branch_version(release)
    if isinstance(next_version, Err):
        return next_version

    tag = tag_name(release, project_id)
    return Ok(
        MaintenancePlan(
            project_id=project_id,
            release=release,
            release_version=release_version(release),
            tag=tag,
            fallback_tag=fallback_tag_name(tag),
            branch=branch_name(release, project_id),
            branch_version=next_version.value,
        )
    )
