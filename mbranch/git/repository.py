"""Git repository abstraction.

Thin wrapper issuing the git commands of the maintenance workflow through a
CommandRunner. Methods return the raw CommandResult: callers decide on the
exit status alone and never parse output for control decisions.

Usage:
    repo = Repository(ShellRunner(cwd=project.root))

    match repo.diff_worktree():
        case CommandResult(ok=True):
            print("no unstaged changes")
        case CommandResult(returncode=rc):
            print(f"dirty (exit {rc})")
        case Cancelled():
            pass
"""

from __future__ import annotations

from mbranch.core.cancel import Cancelled
from mbranch.platform.process import CommandResult, CommandRunner

__all__ = ["Repository"]


class Repository:
    """Git operations on the project working tree.

    Attributes:
        runner: Executes commands in the repository root.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def diff_worktree(self) -> CommandResult | Cancelled:
        """`git diff --exit-code`: non-zero when tracked files are modified."""
        return self._run(["diff", "--exit-code"])

    def diff_index(self) -> CommandResult | Cancelled:
        """`git diff --cached --exit-code`: non-zero when changes are staged."""
        return self._run(["diff", "--cached", "--exit-code"])

    def checkout_new_branch(self, branch: str, start_point: str) -> CommandResult | Cancelled:
        """Create and switch to `branch` starting at `start_point`."""
        return self._run(["checkout", "-b", branch, start_point])

    def commit_all(self, message: str) -> CommandResult | Cancelled:
        """Commit every modified tracked file."""
        return self._run(["commit", "-am", message])

    def list_tags(self, pattern: str) -> CommandResult | Cancelled:
        """List tags matching a glob pattern, one per line."""
        return self._run(["tag", "--list", pattern])

    def _run(self, args: list[str]) -> CommandResult | Cancelled:
        return self.runner.run(["git", *args])
