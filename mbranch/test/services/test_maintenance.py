from __future__ import annotations

from collections.abc import Sequence

import pytest

from mbranch.core.cancel import Cancelled
from mbranch.core.result import Err, Ok, Result
from mbranch.core.version import InvalidVersion, ReleaseComponents
from mbranch.git.repository import Repository
from mbranch.output.console import MockConsole, Style
from mbranch.platform.process import CommandResult
from mbranch.services.maintenance import MaintenanceService
from mbranch.services.maintenance_errors import (
    BranchCreationFailed,
    CommitFailed,
    ConfigStepFailed,
    DirtyWorkingTree,
    NoReleaseFound,
)

DIFF = ("git", "diff", "--exit-code")
DIFF_CACHED = ("git", "diff", "--cached", "--exit-code")
COMMIT = ("git", "commit", "-am", "preparing maintenance branch for development")


def checkout(branch: str, tag: str) -> tuple[str, ...]:
    return ("git", "checkout", "-b", branch, tag)


class ScriptedRunner:
    """Returns scripted exit codes per command (0 when not scripted)."""

    def __init__(
        self,
        returncodes: dict[tuple[str, ...], int] | None = None,
        *,
        cancel_on: tuple[str, ...] | None = None,
    ) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._returncodes = returncodes or {}
        self._cancel_on = cancel_on

    def run(self, args: Sequence[str]) -> CommandResult | Cancelled:
        key = tuple(args)
        self.calls.append(key)
        if key == self._cancel_on:
            return Cancelled(step=" ".join(key))
        return CommandResult(" ".join(key), self._returncodes.get(key, 0), f"output of {key[1]}")


class FakeLookup:
    def __init__(self, components: ReleaseComponents | Cancelled) -> None:
        self.components = components
        self.asked: list[str] = []

    def latest_release(self, project_id: str) -> ReleaseComponents | Cancelled:
        self.asked.append(project_id)
        return self.components


class FakeSetter:
    name = "fake"

    def __init__(self, result: Result[None, str] | Cancelled | None = None) -> None:
        self.calls: list[tuple[str, bool]] = []
        self._result: Result[None, str] | Cancelled = result if result is not None else Ok(None)

    def set_version(self, new_version: str, *, keep_backups: bool) -> Result[None, str] | Cancelled:
        self.calls.append((new_version, keep_backups))
        return self._result


def _service(
    runner: ScriptedRunner,
    *,
    lookup: FakeLookup | None = None,
    setter: FakeSetter | None = None,
    console: MockConsole | None = None,
) -> MaintenanceService:
    return MaintenanceService(
        project_id="foo",
        repository=Repository(runner),
        lookup=lookup or FakeLookup(ReleaseComponents()),
        version_setter=setter or FakeSetter(),
        console=console or MockConsole(),
    )


def test_creates_branch_from_explicit_version() -> None:
    runner = ScriptedRunner()
    setter = FakeSetter()

    outcome = _service(runner, setter=setter).run("2.3.5")

    assert isinstance(outcome, Ok)
    assert outcome.value.branch == "foo-2.3.x"
    assert outcome.value.tag == "foo-2.3.5"
    assert outcome.value.version == "2.3.6-SNAPSHOT"
    assert outcome.value.used_fallback is False
    assert runner.calls == [DIFF, DIFF_CACHED, checkout("foo-2.3.x", "foo-2.3.5"), COMMIT]
    assert setter.calls == [("2.3.6-SNAPSHOT", False)]


def test_version_without_incremental() -> None:
    runner = ScriptedRunner()
    setter = FakeSetter()

    outcome = _service(runner, setter=setter).run("2.3")

    assert isinstance(outcome, Ok)
    assert runner.calls[2] == checkout("foo-2.3.x", "foo-2.3")
    assert setter.calls == [("2.3.1-SNAPSHOT", False)]


def test_uses_latest_release_when_no_base_version() -> None:
    runner = ScriptedRunner()
    lookup = FakeLookup(ReleaseComponents("4", "1", "0"))

    outcome = _service(runner, lookup=lookup).run()

    assert isinstance(outcome, Ok)
    assert lookup.asked == ["foo"]
    assert outcome.value.plan.tag == "foo-4.1.0"
    assert outcome.value.version == "4.1.1-SNAPSHOT"


def test_explicit_version_skips_lookup() -> None:
    lookup = FakeLookup(ReleaseComponents("9", "9"))
    _service(ScriptedRunner(), lookup=lookup).run("1.0")
    assert lookup.asked == []


def test_no_release_found() -> None:
    runner = ScriptedRunner()

    outcome = _service(runner, lookup=FakeLookup(ReleaseComponents())).run()

    assert outcome == Err(NoReleaseFound(project_id="foo"))
    assert runner.calls == []


@pytest.mark.parametrize("base_version", ["1", "1.2.x"])
def test_invalid_version_does_no_git_work(base_version: str) -> None:
    runner = ScriptedRunner()

    outcome = _service(runner).run(base_version)

    assert isinstance(outcome, Err)
    assert isinstance(outcome.error, InvalidVersion)
    assert runner.calls == []


def test_dirty_working_tree_aborts_before_branching() -> None:
    runner = ScriptedRunner({DIFF: 1})
    setter = FakeSetter()

    outcome = _service(runner, setter=setter).run("2.3.5")

    assert outcome == Err(DirtyWorkingTree(staged=False))
    assert runner.calls == [DIFF]
    assert setter.calls == []


def test_staged_changes_abort_before_branching() -> None:
    runner = ScriptedRunner({DIFF_CACHED: 1})

    outcome = _service(runner).run("2.3.5")

    assert outcome == Err(DirtyWorkingTree(staged=True))
    assert runner.calls == [DIFF, DIFF_CACHED]


def test_falls_back_to_tag_without_incremental() -> None:
    runner = ScriptedRunner({checkout("foo-2.3.x", "foo-2.3.5"): 128})
    console = MockConsole()

    outcome = _service(runner, console=console).run("2.3.5")

    assert isinstance(outcome, Ok)
    assert outcome.value.tag == "foo-2.3"
    assert outcome.value.used_fallback is True
    assert runner.calls == [
        DIFF,
        DIFF_CACHED,
        checkout("foo-2.3.x", "foo-2.3.5"),
        checkout("foo-2.3.x", "foo-2.3"),
        COMMIT,
    ]
    assert console.has_warning()


def test_both_checkouts_fail() -> None:
    runner = ScriptedRunner(
        {
            checkout("foo-2.3.x", "foo-2.3.5"): 128,
            checkout("foo-2.3.x", "foo-2.3"): 129,
        }
    )
    setter = FakeSetter()

    outcome = _service(runner, setter=setter).run("2.3.5")

    assert outcome == Err(
        BranchCreationFailed(
            branch="foo-2.3.x", tag="foo-2.3.5", fallback_tag="foo-2.3", returncode=129
        )
    )
    assert COMMIT not in runner.calls
    assert setter.calls == []


def test_fallback_is_tried_even_without_incremental() -> None:
    runner = ScriptedRunner({checkout("foo-2.3.x", "foo-2.3"): 128})

    outcome = _service(runner).run("2.3")

    assert isinstance(outcome, Ok)
    assert outcome.value.tag == "foo-2"


def test_version_step_failure_stops_before_commit() -> None:
    runner = ScriptedRunner()
    setter = FakeSetter(Err("mvn versions:set failed (exit 1)"))

    outcome = _service(runner, setter=setter).run("2.3.5")

    assert outcome == Err(
        ConfigStepFailed(new_version="2.3.6-SNAPSHOT", message="mvn versions:set failed (exit 1)")
    )
    assert COMMIT not in runner.calls


def test_commit_failure() -> None:
    runner = ScriptedRunner({COMMIT: 1})

    outcome = _service(runner).run("2.3.5")

    assert outcome == Err(CommitFailed(returncode=1))


def test_cancelled_during_checkout_stops_workflow() -> None:
    runner = ScriptedRunner(cancel_on=checkout("foo-2.3.x", "foo-2.3.5"))
    setter = FakeSetter()

    outcome = _service(runner, setter=setter).run("2.3.5")

    assert outcome == Cancelled(step="git checkout -b foo-2.3.x foo-2.3.5")
    assert setter.calls == []
    assert len(runner.calls) == 3


def test_cancelled_lookup() -> None:
    outcome = _service(ScriptedRunner(), lookup=FakeLookup(Cancelled(step="git tag"))).run()
    assert outcome == Cancelled(step="git tag")


def test_cancelled_version_step() -> None:
    runner = ScriptedRunner()
    outcome = _service(runner, setter=FakeSetter(Cancelled(step="mvn"))).run("2.3.5")

    assert outcome == Cancelled(step="mvn")
    assert COMMIT not in runner.calls


def test_dry_run_executes_nothing() -> None:
    runner = ScriptedRunner()
    setter = FakeSetter()
    console = MockConsole()

    outcome = _service(runner, setter=setter, console=console).run("2.3.5", dry_run=True)

    assert isinstance(outcome, Ok)
    assert outcome.value.dry_run is True
    assert runner.calls == []
    assert setter.calls == []
    assert console.find("git checkout -b foo-2.3.x foo-2.3.5")


def test_logs_names_and_command_output() -> None:
    console = MockConsole()

    _service(ScriptedRunner(), console=console).run("2.3.5")

    assert console.find("Release version is [2.3.5]")
    assert console.find("Creating branch from tag [foo-2.3.5]")
    assert console.find("Branch [foo-2.3.x] will be created with version [2.3.6-SNAPSHOT]")
    assert console.count(Style.DEBUG) > 0
    assert console.find("output of checkout")


def test_custom_commit_message_and_backups() -> None:
    runner = ScriptedRunner()
    setter = FakeSetter()
    service = MaintenanceService(
        project_id="foo",
        repository=Repository(runner),
        lookup=FakeLookup(ReleaseComponents()),
        version_setter=setter,
        console=MockConsole(),
        commit_message="start 2.3.x",
        keep_backups=True,
    )

    service.run("2.3.5")

    assert runner.calls[-1] == ("git", "commit", "-am", "start 2.3.x")
    assert setter.calls == [("2.3.6-SNAPSHOT", True)]


def test_plan_is_repeatable() -> None:
    service = _service(ScriptedRunner())
    assert service.plan("2.3.5") == service.plan("2.3.5")
