"""Core domain types and logic."""

from .cancel import CancelToken, Cancelled
from .config import Config, ConfigError, load_config, load_project_config
from .errors import ErrorCode
from .project import Project, ProjectError, detect_project
from .result import Err, Ok, Result
from .version import (
    InvalidVersion,
    MaintenancePlan,
    ReleaseComponents,
    ReleaseVersion,
    parse_release_version,
    plan_maintenance,
)

__all__ = [
    # cancel
    "CancelToken",
    "Cancelled",
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_project_config",
    # errors
    "ErrorCode",
    # project
    "Project",
    "ProjectError",
    "detect_project",
    # result
    "Err",
    "Ok",
    "Result",
    # version
    "InvalidVersion",
    "MaintenancePlan",
    "ReleaseComponents",
    "ReleaseVersion",
    "parse_release_version",
    "plan_maintenance",
]
