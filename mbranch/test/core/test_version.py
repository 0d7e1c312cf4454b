"""Tests for mbranch.core.version module."""

from __future__ import annotations

import pytest

from mbranch.core.result import Err, Ok
from mbranch.core.version import (
    InvalidVersion,
    MaintenancePlan,
    ReleaseComponents,
    ReleaseVersion,
    branch_name,
    branch_version,
    fallback_tag_name,
    parse_release_version,
    plan_maintenance,
    release_from_components,
    release_version,
    tag_name,
)


class TestParseReleaseVersion:
    def test_major_minor(self) -> None:
        assert parse_release_version("1.2") == Ok(ReleaseVersion("1", "2", None))

    def test_major_minor_incremental(self) -> None:
        assert parse_release_version("1.2.3") == Ok(ReleaseVersion("1", "2", "3"))

    def test_extra_parts_are_ignored(self) -> None:
        assert parse_release_version("1.2.3.4") == Ok(ReleaseVersion("1", "2", "3"))

    def test_single_part_is_invalid(self) -> None:
        result = parse_release_version("1")
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidVersion)
        assert result.error.text == "1"

    @pytest.mark.parametrize("text", ["", ".2", "1.", "1..3"])
    def test_empty_major_or_minor_is_invalid(self, text: str) -> None:
        assert isinstance(parse_release_version(text), Err)

    def test_trailing_dot_after_minor_means_no_incremental(self) -> None:
        assert parse_release_version("1.2.") == Ok(ReleaseVersion("1", "2", None))

    def test_non_numeric_incremental_parses(self) -> None:
        assert parse_release_version("1.2.x") == Ok(ReleaseVersion("1", "2", "x"))


class TestReleaseFromComponents:
    def test_full_components(self) -> None:
        result = release_from_components(ReleaseComponents("4", "0", "7"))
        assert result == Ok(ReleaseVersion("4", "0", "7"))

    def test_blank_incremental_is_absent(self) -> None:
        result = release_from_components(ReleaseComponents("4", "0", " "))
        assert result == Ok(ReleaseVersion("4", "0", None))

    def test_missing_minor_is_invalid(self) -> None:
        assert isinstance(release_from_components(ReleaseComponents("4", None, None)), Err)

    def test_found(self) -> None:
        assert ReleaseComponents("1", "0").found is True
        assert ReleaseComponents().found is False


class TestNames:
    """Derived names for project "foo"."""

    def test_without_incremental(self) -> None:
        release = ReleaseVersion("2", "3")
        assert release_version(release) == "2.3"
        assert tag_name(release, "foo") == "foo-2.3"
        assert branch_name(release, "foo") == "foo-2.3.x"
        assert branch_version(release) == Ok("2.3.1-SNAPSHOT")

    def test_with_incremental(self) -> None:
        release = ReleaseVersion("2", "3", "5")
        assert release_version(release) == "2.3.5"
        assert tag_name(release, "foo") == "foo-2.3.5"
        assert branch_name(release, "foo") == "foo-2.3.x"
        assert branch_version(release) == Ok("2.3.6-SNAPSHOT")

    @pytest.mark.parametrize(
        ("incremental", "expected"),
        [("0", "1.0.1-SNAPSHOT"), ("9", "1.0.10-SNAPSHOT"), ("41", "1.0.42-SNAPSHOT")],
    )
    def test_branch_version_increments(self, incremental: str, expected: str) -> None:
        assert branch_version(ReleaseVersion("1", "0", incremental)) == Ok(expected)

    @pytest.mark.parametrize("incremental", ["x", "1a", "-1", " 3"])
    def test_branch_version_rejects_non_integer(self, incremental: str) -> None:
        result = branch_version(ReleaseVersion("1", "2", incremental))
        assert isinstance(result, Err)
        assert incremental in result.error.reason

    def test_str_is_release_version(self) -> None:
        assert str(ReleaseVersion("3", "1", "4")) == "3.1.4"


class TestFallbackTagName:
    def test_strips_incremental(self) -> None:
        assert fallback_tag_name("foo-2.3.5") == "foo-2.3"

    def test_strips_minor_when_no_incremental(self) -> None:
        assert fallback_tag_name("foo-2.3") == "foo-2"

    def test_without_dot(self) -> None:
        assert fallback_tag_name("foo") == "foo"


class TestPlanMaintenance:
    def test_plan_from_base_version(self) -> None:
        release = ReleaseVersion("2", "3", "5")
        assert plan_maintenance("foo", release) == Ok(
            MaintenancePlan(
                project_id="foo",
                release=release,
                release_version="2.3.5",
                tag="foo-2.3.5",
                fallback_tag="foo-2.3",
                branch="foo-2.3.x",
                branch_version="2.3.6-SNAPSHOT",
            )
        )

    def test_plan_fails_for_non_numeric_incremental(self) -> None:
        parsed = parse_release_version("1.2.x")
        assert isinstance(parsed, Ok)
        assert isinstance(plan_maintenance("foo", parsed.value), Err)

    def test_derivation_is_deterministic(self) -> None:
        release = ReleaseVersion("7", "1")
        assert plan_maintenance("bar", release) == plan_maintenance("bar", release)
