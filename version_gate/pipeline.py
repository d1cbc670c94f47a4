"""Version check pipeline: changed files → relevance → dependencies → compare.

This module orchestrates a version check for a pull request:
1. Collect the files changed by the PR, ignoring skip-marked commits
2. Decide whether any changed source file is relevant
3. Decide whether dependency changes require a version bump
4. Read the current version from package.json
5. Find the latest release tag and compare versions

If neither relevant files nor dependency changes are found, the check is
skipped. Otherwise the package.json version must be strictly higher than
the latest tagged release.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .commits import resolve_changed_files
from .config import CheckConfig
from .dependencies import has_package_dependency_changes
from .errors import CollaboratorUnavailable, ManifestError, UnparsableDocument
from .models import CheckResult, CheckStatus, PullRequestContext, VersionComparison
from .relevance import has_relevant_changes, relevant_files
from .shell import ConsoleLogger, Logger, step
from .sources import GitHubPullRequestSource, GitRevisionSource, PullRequestSource, RevisionSource
from .versions import compare_versions, latest_version_tag, version_from_tag


def read_package_json(path: Path) -> dict[str, Any]:
    """Read and parse the working-tree package.json.

    Raises:
        ManifestError: If the file is missing or has no version field.
        UnparsableDocument: If the file is not valid JSON.
    """
    if not path.exists():
        raise ManifestError(f"package.json not found at path: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise UnparsableDocument(str(path), str(exc)) from exc
    if not isinstance(data, dict) or not data.get("version"):
        raise ManifestError(f"Could not extract version from {path}")
    return data


def default_pull_request_source(
    config: CheckConfig, context: PullRequestContext
) -> PullRequestSource | None:
    """Build a GitHub-backed commit source when a token and PR are known."""
    if not config.token or not context.repository or context.number is None:
        return None
    return GitHubPullRequestSource(context.repository, context.number, config.token)


def collect_changed_files(
    config: CheckConfig,
    context: PullRequestContext,
    git_source: RevisionSource,
    pr_source: PullRequestSource | None,
    logger: Logger,
) -> list[str]:
    """Return the files changed by the pull request.

    With a skip keyword and commit access, files are gathered per commit so
    that skip-marked commits can be left out. When the commit list cannot be
    obtained, falls back to a plain diff of base against head.
    """
    keyword = config.skip_version_keyword
    if keyword and pr_source is not None:
        logger.info(f'Analyzing commits for skip keyword: "{keyword}"')
        try:
            commits = pr_source.list_commits()
        except CollaboratorUnavailable as exc:
            logger.warning(f"Could not fetch PR commits: {exc}")
            commits = []

        if commits:
            result = resolve_changed_files(
                commits, keyword, pr_source.files_for_commit, logger
            )
            logger.info(f"Found {result.total_count} commits in PR")
            if result.skipped_count:
                logger.notice(
                    f"Skipped {result.skipped_count} of {result.total_count} "
                    f'commits containing "{keyword}"'
                )
            else:
                logger.info(
                    f"No commits contained skip keyword, "
                    f"all {result.total_count} commits included"
                )
            return sorted(result.files)
        logger.info("Could not analyze individual commits, using standard file diff")
    elif keyword:
        logger.warning(
            "skip-version-keyword requires a token for API access, using standard file diff"
        )

    return git_source.changed_files(context.base_sha or "", context.head_sha or "")


def run_check(
    config: CheckConfig,
    context: PullRequestContext,
    *,
    git_source: RevisionSource | None = None,
    pr_source: PullRequestSource | None = None,
    logger: Logger | None = None,
) -> CheckResult:
    """Execute a full version check for one pull request.

    Args:
        config: Check settings.
        context: Event context; only pull_request events are checked.
        git_source: Local git access. Defaults to GitRevisionSource.
        pr_source: PR commit access. Defaults to the GitHub CLI when a token
                   is configured.
        logger: Output sink. Defaults to ConsoleLogger.

    Returns:
        CheckResult; ``failed`` when the version was not incremented.

    Raises:
        VersionGateError: On invalid refs, a missing or malformed
            package.json, or an invalid version string.
    """
    log = logger or ConsoleLogger()
    git_source = git_source or GitRevisionSource()
    if pr_source is None:
        pr_source = default_pull_request_source(config, context)

    if not context.is_pull_request:
        message = (
            f"This check is designed for pull_request events. "
            f"Current event: {context.event_name}. Skipping version check."
        )
        log.info(message)
        return CheckResult(status=CheckStatus.SKIPPED, message=message)

    if not config.skip_files_check:
        step("Checking files changed in PR")
        changed_files = collect_changed_files(config, context, git_source, pr_source, log)
        log.info(f"Files changed: {', '.join(changed_files)}")

        has_regular_changes = has_relevant_changes(changed_files)
        verdict = has_package_dependency_changes(
            context.base_sha or "",
            context.head_sha or "",
            git_source,
            changed_files=changed_files,
            include_dev=config.include_dev_dependencies,
            manifest_path=config.package_path,
            logger=log,
        )

        if not has_regular_changes and not verdict.has_changes:
            if verdict.only_dev_dependencies:
                message = "Only devDependency changes detected, skipping version check"
            else:
                message = (
                    "No JavaScript/TypeScript files or dependency changes detected, "
                    "skipping version check"
                )
            log.warning(message)
            return CheckResult(status=CheckStatus.SKIPPED, message=message)

        if verdict.has_changes:
            log.info("Package dependency changes detected, proceeding with version check")
        if has_regular_changes:
            log.info("JavaScript/TypeScript file changes detected, proceeding with version check")
            log.info(f"Changed files: {', '.join(relevant_files(changed_files))}")

    step("Comparing versions")
    current_version = str(read_package_json(Path(config.package_path))["version"])
    log.info(f"Current version: {current_version}")

    latest_tag = latest_version_tag(git_source.list_tags(), config.tag_prefix)
    if latest_tag is None:
        log.notice("No previous version tag found, this appears to be the first release.")
        return CheckResult(
            status=CheckStatus.PASSED,
            message="Version check passed - first release",
            version_changed=True,
            current_version=current_version,
        )

    previous_version = version_from_tag(latest_tag, config.tag_prefix) or ""
    log.info(f"Latest released version: {previous_version} (tag: {latest_tag})")

    comparison = compare_versions(current_version, previous_version)
    if comparison is VersionComparison.SAME:
        log.notice(
            "HINT: Run 'npm version patch', 'npm version minor', or "
            "'npm version major' to increment the version"
        )
        return CheckResult(
            status=CheckStatus.FAILED,
            message=(
                f"Package version ({current_version}) is the same as the latest "
                f"release. You need to increment it."
            ),
            current_version=current_version,
            previous_version=previous_version,
        )
    if comparison is VersionComparison.LOWER:
        log.notice(
            "HINT: Version should be higher than the previous release. "
            "Consider using semantic versioning."
        )
        return CheckResult(
            status=CheckStatus.FAILED,
            message=(
                f"Package version ({current_version}) is lower than the latest "
                f"release ({previous_version})"
            ),
            current_version=current_version,
            previous_version=previous_version,
        )

    return CheckResult(
        status=CheckStatus.PASSED,
        message=(
            f"Version has been properly incremented from {previous_version} "
            f"to {current_version}"
        ),
        version_changed=True,
        current_version=current_version,
        previous_version=previous_version,
    )
