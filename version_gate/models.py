"""Data models for version-gate.

These Pydantic models represent the records passed between the
change resolver, the dependency classifiers and the check pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CommitRecord(BaseModel):
    """A commit in the pull request, as listed by the GitHub API.

    Attributes:
        sha: Full commit SHA.
        message: Full commit message (subject and body), used for
                 skip-keyword matching.
    """

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str


class ChangedFiles(BaseModel):
    """Files touched by the non-skipped commits of a pull request.

    Attributes:
        files: Union of paths from every included commit, deduplicated.
        skipped_count: Number of commits excluded by the skip keyword.
        total_count: Number of commits in the pull request.
    """

    files: set[str] = Field(default_factory=set)
    skipped_count: int = 0
    total_count: int = 0


class DependencyChangeVerdict(BaseModel):
    """Whether dependency changes require a version bump.

    Attributes:
        has_changes: A version bump is mandatory.
        only_dev_dependencies: No bump is required, and the only changes
                               found were developer dependencies.
    """

    has_changes: bool
    only_dev_dependencies: bool = False

    @classmethod
    def none(cls) -> DependencyChangeVerdict:
        return cls(has_changes=False, only_dev_dependencies=False)

    @classmethod
    def conservative(cls) -> DependencyChangeVerdict:
        """Verdict used when the classifier cannot prove nothing changed."""
        return cls(has_changes=True, only_dev_dependencies=False)


class ManifestChange(BaseModel):
    """Classification of a package.json diff.

    Attributes:
        production_changed: A production dependency section changed, or
                            devDependencies changed and dev changes are
                            included.
        dev_changed: devDependencies differ between the two snapshots.
    """

    production_changed: bool = False
    dev_changed: bool = False


class LockfileChange(BaseModel):
    """Classification of a package-lock.json diff.

    Attributes:
        production_changed: A change that obligates a version bump (includes
                            dev changes when the caller folds them in).
        dev_changed: At least one real change, all of them dev-marked.
        all_metadata_only: The documents differ, but only in flags such as
                           ``dev``/``peer``; nothing is counted as changed.
    """

    production_changed: bool = False
    dev_changed: bool = False
    all_metadata_only: bool = False


class ManifestDocument(BaseModel):
    """A parsed package.json. Only the dependency sections are ever read."""

    data: dict[str, Any]

    def section(self, name: str) -> Any:
        return self.data.get(name)


class LockfilePackages(BaseModel):
    """npm v7+ lockfile: flat ``packages`` map keyed by install path."""

    kind: Literal["packages"] = "packages"
    entries: dict[str, Any] = Field(default_factory=dict)


class LockfileLegacy(BaseModel):
    """npm v6 lockfile: nested ``dependencies`` map keyed by package name."""

    kind: Literal["dependencies"] = "dependencies"
    entries: dict[str, Any] = Field(default_factory=dict)


LockfileDocument = LockfilePackages | LockfileLegacy


class PullRequestContext(BaseModel):
    """The slice of the GitHub Actions event context a check needs.

    Attributes:
        event_name: ``GITHUB_EVENT_NAME`` (only "pull_request" is checked).
        base_sha: ``pull_request.base.sha`` from the event payload.
        head_sha: ``GITHUB_SHA``.
        number: Pull request number, needed to list its commits.
        repository: "owner/name".
    """

    event_name: str
    base_sha: str | None = None
    head_sha: str | None = None
    number: int | None = None
    repository: str | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == "pull_request"


class VersionComparison(str, Enum):
    HIGHER = "higher"
    SAME = "same"
    LOWER = "lower"


class CheckStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class CheckResult(BaseModel):
    """Outcome of a version check, mirrored into the step outputs."""

    status: CheckStatus
    message: str = ""
    version_changed: bool = False
    current_version: str = ""
    previous_version: str = ""
