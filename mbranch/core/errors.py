"""Exit codes for the mbranch CLI.

Each terminal failure of the maintenance workflow maps to one of these codes.
The numeric values are part of the command-line contract and must stay stable:
- 0: Success
- 1: User error (malformed version, bad option)
- 2: Environment error (no release found, dirty working tree, no project)
- 3: Version control error (branch creation or commit failed)
- 4: Build error (the "set declared version" step failed)
- 5: I/O error (config unreadable)
- 130: Cancelled by the user (SIGINT convention)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VCS_ERROR = 3
    BUILD_ERROR = 4
    IO_ERROR = 5
    CANCELLED = 130
