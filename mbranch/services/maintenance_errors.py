from __future__ import annotations

from dataclasses import dataclass

from mbranch.core.version import InvalidVersion


@dataclass(frozen=True, slots=True)
class NoReleaseFound:
    project_id: str


@dataclass(frozen=True, slots=True)
class DirtyWorkingTree:
    staged: bool


@dataclass(frozen=True, slots=True)
class BranchCreationFailed:
    branch: str
    tag: str
    fallback_tag: str
    returncode: int


@dataclass(frozen=True, slots=True)
class ConfigStepFailed:
    new_version: str
    message: str


@dataclass(frozen=True, slots=True)
class CommitFailed:
    returncode: int


MaintenanceError = (
    InvalidVersion
    | NoReleaseFound
    | DirtyWorkingTree
    | BranchCreationFailed
    | ConfigStepFailed
    | CommitFailed
)
