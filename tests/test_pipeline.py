"""Tests for version_gate.pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import BASE_SHA, HEAD_SHA, FakeRevisionSource, RecordingLogger, dumps

from version_gate.config import CheckConfig
from version_gate.errors import CollaboratorUnavailable, ManifestError, UnparsableDocument
from version_gate.models import CheckStatus, CommitRecord, PullRequestContext
from version_gate.pipeline import (
    collect_changed_files,
    default_pull_request_source,
    read_package_json,
    run_check,
)
from version_gate.sources import GitHubPullRequestSource


class FakePullRequestSource:
    def __init__(
        self,
        commits: list[CommitRecord] | None = None,
        files: dict[str, list[str]] | None = None,
        fail: bool = False,
    ) -> None:
        self.commits = commits or []
        self.files = files or {}
        self.fail = fail

    def list_commits(self) -> list[CommitRecord]:
        if self.fail:
            raise CollaboratorUnavailable("gh api failed: HTTP 403")
        return list(self.commits)

    def files_for_commit(self, sha: str) -> list[str]:
        return self.files.get(sha, [])


PR_CONTEXT = PullRequestContext(
    event_name="pull_request",
    base_sha=BASE_SHA,
    head_sha=HEAD_SHA,
    number=7,
    repository="octo/app",
)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_manifest(root: Path, version: str, **extra: object) -> dict:
    manifest = {"name": "my-app", "version": version, **extra}
    (root / "package.json").write_text(json.dumps(manifest))
    return manifest


class TestReadPackageJson:
    def test_reads_version(self, workdir: Path) -> None:
        _write_manifest(workdir, "1.2.3")
        assert read_package_json(Path("package.json"))["version"] == "1.2.3"

    def test_missing(self, workdir: Path) -> None:
        with pytest.raises(ManifestError, match="not found"):
            read_package_json(Path("package.json"))

    def test_no_version(self, workdir: Path) -> None:
        (workdir / "package.json").write_text('{"name": "x"}')
        with pytest.raises(ManifestError, match="Could not extract version"):
            read_package_json(Path("package.json"))

    def test_invalid_json(self, workdir: Path) -> None:
        (workdir / "package.json").write_text("{")
        with pytest.raises(UnparsableDocument):
            read_package_json(Path("package.json"))


class TestDefaultPullRequestSource:
    def test_requires_token(self) -> None:
        assert default_pull_request_source(CheckConfig(), PR_CONTEXT) is None

    def test_builds_github_source(self) -> None:
        source = default_pull_request_source(CheckConfig(token="t"), PR_CONTEXT)
        assert isinstance(source, GitHubPullRequestSource)
        assert source.repository == "octo/app"
        assert source.number == 7


class TestCollectChangedFiles:
    def test_skips_marked_commits(self, logger: RecordingLogger) -> None:
        pr_source = FakePullRequestSource(
            commits=[
                CommitRecord(sha="1" * 40, message="feat: add thing"),
                CommitRecord(sha="2" * 40, message="docs: tweak [skip version]"),
            ],
            files={"1" * 40: ["src/b.ts", "src/a.js"], "2" * 40: ["src/c.js"]},
        )
        git_source = FakeRevisionSource(diff=["src/a.js", "src/b.ts", "src/c.js"])

        files = collect_changed_files(CheckConfig(), PR_CONTEXT, git_source, pr_source, logger)

        assert files == ["src/a.js", "src/b.ts"]
        assert any("Skipped 1 of 2" in m for m in logger.messages["notice"])

    def test_falls_back_to_diff_when_listing_fails(self, logger: RecordingLogger) -> None:
        git_source = FakeRevisionSource(diff=["src/index.js"])

        files = collect_changed_files(
            CheckConfig(), PR_CONTEXT, git_source, FakePullRequestSource(fail=True), logger
        )

        assert files == ["src/index.js"]
        assert any("HTTP 403" in m for m in logger.messages["warning"])

    def test_without_commit_access(self, logger: RecordingLogger) -> None:
        git_source = FakeRevisionSource(diff=["src/index.js"])

        files = collect_changed_files(CheckConfig(), PR_CONTEXT, git_source, None, logger)

        assert files == ["src/index.js"]
        assert any("requires a token" in m for m in logger.messages["warning"])

    def test_keyword_disabled(self, logger: RecordingLogger) -> None:
        git_source = FakeRevisionSource(diff=["src/index.js"])
        config = CheckConfig(skip_version_keyword="")

        files = collect_changed_files(
            config, PR_CONTEXT, git_source, FakePullRequestSource(), logger
        )

        assert files == ["src/index.js"]
        assert logger.messages["warning"] == []


class TestRunCheck:
    def test_non_pull_request_event(self, logger: RecordingLogger) -> None:
        context = PullRequestContext(event_name="push")

        result = run_check(CheckConfig(), context, git_source=FakeRevisionSource(), logger=logger)

        assert result.status is CheckStatus.SKIPPED
        assert "Current event: push" in result.message

    def test_no_relevant_changes(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "1.0.0")
        git_source = FakeRevisionSource(diff=["README.md", "src/app.test.ts"], tags=["v1.0.0"])

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.SKIPPED
        assert result.message.startswith("No JavaScript/TypeScript files")

    def test_only_dev_dependency_changes(self, workdir: Path, logger: RecordingLogger) -> None:
        base = _write_manifest(workdir, "1.0.0", devDependencies={"jest": "^29.0.0"})
        head = {**base, "devDependencies": {"jest": "^29.7.0"}}
        git_source = FakeRevisionSource(
            files={
                ("package.json", BASE_SHA): dumps(base),
                ("package.json", HEAD_SHA): dumps(head),
            },
            diff=["package.json"],
            tags=["v1.0.0"],
        )

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.SKIPPED
        assert result.message == "Only devDependency changes detected, skipping version check"

    def test_production_dependency_change_requires_bump(
        self, workdir: Path, logger: RecordingLogger
    ) -> None:
        base = _write_manifest(workdir, "1.0.0", dependencies={"express": "^4.18.0"})
        head = {**base, "dependencies": {"express": "^4.19.0"}}
        git_source = FakeRevisionSource(
            files={
                ("package.json", BASE_SHA): dumps(base),
                ("package.json", HEAD_SHA): dumps(head),
            },
            diff=["package.json"],
            tags=["v1.0.0"],
        )

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.FAILED
        assert "is the same as the latest release" in result.message
        assert result.previous_version == "1.0.0"
        assert any("npm version patch" in m for m in logger.messages["notice"])

    def test_version_bumped(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "1.10.0")
        git_source = FakeRevisionSource(diff=["src/index.ts"], tags=["v1.2.0", "v1.9.0"])

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.PASSED
        assert result.version_changed is True
        assert result.current_version == "1.10.0"
        assert result.previous_version == "1.9.0"

    def test_version_lower(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "1.0.0")
        git_source = FakeRevisionSource(diff=["src/index.ts"], tags=["v1.1.0"])

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.FAILED
        assert "lower than the latest release (1.1.0)" in result.message

    def test_first_release(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "0.1.0")
        git_source = FakeRevisionSource(diff=["index.js"], tags=[])

        result = run_check(
            CheckConfig(skip_version_keyword=""), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.PASSED
        assert result.version_changed is True
        assert result.previous_version == ""

    def test_skip_files_check(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "1.0.0")
        git_source = FakeRevisionSource(diff=[], tags=["v1.0.0"])

        result = run_check(
            CheckConfig(skip_files_check=True), PR_CONTEXT, git_source=git_source, logger=logger
        )

        assert result.status is CheckStatus.FAILED

    def test_skipped_commit_is_ignored(self, workdir: Path, logger: RecordingLogger) -> None:
        _write_manifest(workdir, "1.0.0")
        pr_source = FakePullRequestSource(
            commits=[CommitRecord(sha="1" * 40, message="refactor [skip version]")],
            files={"1" * 40: ["src/index.ts"]},
        )
        git_source = FakeRevisionSource(diff=["src/index.ts"], tags=["v1.0.0"])

        result = run_check(
            CheckConfig(), PR_CONTEXT, git_source=git_source, pr_source=pr_source, logger=logger
        )

        assert result.status is CheckStatus.SKIPPED
