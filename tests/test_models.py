"""Tests for version_gate.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from version_gate.models import (
    CheckResult,
    CheckStatus,
    CommitRecord,
    DependencyChangeVerdict,
    PullRequestContext,
)


class TestDependencyChangeVerdict:
    def test_none(self) -> None:
        verdict = DependencyChangeVerdict.none()
        assert not verdict.has_changes and not verdict.only_dev_dependencies

    def test_conservative(self) -> None:
        verdict = DependencyChangeVerdict.conservative()
        assert verdict.has_changes and not verdict.only_dev_dependencies


def test_commit_record_is_frozen() -> None:
    commit = CommitRecord(sha="abc1234", message="fix")
    with pytest.raises(ValidationError):
        commit.sha = "def5678"


def test_is_pull_request() -> None:
    assert PullRequestContext(event_name="pull_request").is_pull_request
    assert not PullRequestContext(event_name="pull_request_target").is_pull_request


def test_check_result_defaults() -> None:
    result = CheckResult(status=CheckStatus.SKIPPED)
    assert result.version_changed is False
    assert result.current_version == ""
    assert result.status.value == "skipped"
