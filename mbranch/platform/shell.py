"""Command-line construction for the host shell.

Every external command is issued as a single command line executed by the
platform's command interpreter:

    Windows:  cmd.exe /D /S /C "<command>"   (/D skips AutoRun, /S strips
              exactly the outer quotes, /C runs and exits)
    others:   sh -c <command>

On Windows the interpreter line is handed to CreateProcess as one string.
Passing it as a list would make subprocess quote the command a second time,
and cmd.exe does not understand backslash-escaped quotes.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence

from mbranch.platform.detection import Platform

__all__ = [
    "join_args",
    "wrap_command",
]


def join_args(args: Sequence[str], platform: Platform) -> str:
    """Quote arguments into one command line for the target interpreter."""
    if platform == Platform.WINDOWS:
        return subprocess.list2cmdline(list(args))
    return shlex.join(args)


def wrap_command(command: str, platform: Platform) -> str | list[str]:
    """Build what Popen runs to execute `command` through the interpreter.

    Returns:
        The verbatim CreateProcess line on Windows, an argv list elsewhere.
    """
    if platform == Platform.WINDOWS:
        return f'cmd.exe /D /S /C "{command}"'
    return ["sh", "-c", command]
