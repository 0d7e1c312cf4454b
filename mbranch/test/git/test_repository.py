"""Tests for git/repository.py."""

from __future__ import annotations

from collections.abc import Sequence

from mbranch.core.cancel import Cancelled
from mbranch.git.repository import Repository
from mbranch.platform.process import CommandResult


class RecordingRunner:
    def __init__(self, returncode: int = 0, output: str = "") -> None:
        self.calls: list[list[str]] = []
        self._returncode = returncode
        self._output = output

    def run(self, args: Sequence[str]) -> CommandResult | Cancelled:
        self.calls.append(list(args))
        return CommandResult(" ".join(args), self._returncode, self._output)


class TestRepositoryCommands:
    def test_diff_worktree(self) -> None:
        runner = RecordingRunner()
        Repository(runner).diff_worktree()
        assert runner.calls == [["git", "diff", "--exit-code"]]

    def test_diff_index(self) -> None:
        runner = RecordingRunner()
        Repository(runner).diff_index()
        assert runner.calls == [["git", "diff", "--cached", "--exit-code"]]

    def test_checkout_new_branch(self) -> None:
        runner = RecordingRunner()
        Repository(runner).checkout_new_branch("foo-2.3.x", "foo-2.3.5")
        assert runner.calls == [["git", "checkout", "-b", "foo-2.3.x", "foo-2.3.5"]]

    def test_commit_all(self) -> None:
        runner = RecordingRunner()
        Repository(runner).commit_all("preparing maintenance branch for development")
        assert runner.calls == [
            ["git", "commit", "-am", "preparing maintenance branch for development"]
        ]

    def test_list_tags(self) -> None:
        runner = RecordingRunner(output="foo-1.0\nfoo-1.1\n")
        result = Repository(runner).list_tags("foo-*")
        assert runner.calls == [["git", "tag", "--list", "foo-*"]]
        assert isinstance(result, CommandResult)
        assert result.output == "foo-1.0\nfoo-1.1\n"


class TestRepositoryResults:
    def test_non_zero_exit_is_returned_not_raised(self) -> None:
        result = Repository(RecordingRunner(returncode=1)).diff_worktree()
        assert isinstance(result, CommandResult)
        assert result.ok is False

    def test_cancelled_passes_through(self) -> None:
        class CancelledRunner:
            def run(self, args: Sequence[str]) -> CommandResult | Cancelled:
                return Cancelled(step=" ".join(args))

        result = Repository(CancelledRunner()).commit_all("msg")
        assert result == Cancelled(step="git commit -am msg")
