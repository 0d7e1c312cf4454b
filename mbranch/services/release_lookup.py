"""Discovery of the latest released version.

The default lookup reads release tags from git. A release tag has the form
`<project_id>-MAJOR.MINOR[.INCREMENTAL]` with numeric parts; anything else
(release candidates, maintenance branches, other projects) is ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Protocol

from mbranch.core.cancel import Cancelled
from mbranch.core.version import ReleaseComponents
from mbranch.git.repository import Repository

__all__ = [
    "GitTagReleaseLookup",
    "LatestReleaseLookup",
    "latest_from_tags",
]


class LatestReleaseLookup(Protocol):
    def latest_release(self, project_id: str) -> ReleaseComponents | Cancelled:
        """Return the latest release, or empty components if there is none."""
        ...


def latest_from_tags(tags: Iterable[str], project_id: str) -> ReleaseComponents:
    """Pick the highest release among tag names.

    Versions compare numerically; "2.3" sorts just below "2.3.0".
    """
    pattern = re.compile(rf"^{re.escape(project_id)}-(\d+)\.(\d+)(?:\.(\d+))?$")

    best: tuple[int, int, int, int] | None = None
    found = ReleaseComponents()
    for raw in tags:
        m = pattern.match(raw.strip())
        if m is None:
            continue
        major, minor, incremental = m.group(1), m.group(2), m.group(3)
        key = (
            int(major),
            int(minor),
            int(incremental) if incremental is not None else 0,
            0 if incremental is None else 1,
        )
        if best is None or key > best:
            best = key
            found = ReleaseComponents(major=major, minor=minor, incremental=incremental)
    return found


class GitTagReleaseLookup:
    """LatestReleaseLookup backed by `git tag --list`."""

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def latest_release(self, project_id: str) -> ReleaseComponents | Cancelled:
        result = self._repository.list_tags(f"{project_id}-*")
        if isinstance(result, Cancelled):
            return result
        if not result.ok:
            return ReleaseComponents()
        return latest_from_tags(result.output.splitlines(), project_id)
