"""Platform abstraction layer."""

from .detection import (
    Platform,
    detect_platform,
)
from .files import (
    atomic_write_text,
    backup_file,
)
from .process import (
    CommandResult,
    CommandRunner,
    ShellRunner,
    run_shell,
)
from .shell import (
    join_args,
    wrap_command,
)

__all__ = [
    # detection
    "Platform",
    "detect_platform",
    # files
    "atomic_write_text",
    "backup_file",
    # process
    "CommandResult",
    "CommandRunner",
    "ShellRunner",
    "run_shell",
    # shell
    "join_args",
    "wrap_command",
]
