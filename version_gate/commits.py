"""Commit-scoped changed-file resolution.

Commits whose message carries the skip keyword contribute nothing to the
set of changed files. A path touched by both a skipped and an included
commit is still reported, because the included commit touched it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from .models import ChangedFiles, CommitRecord
from .refs import sanitize_reference
from .shell import Logger, NullLogger

DEFAULT_SKIP_KEYWORD = "[skip version]"

FileFetcher = Callable[[str], Iterable[str]]


def is_skipped(commit: CommitRecord, skip_keyword: str) -> bool:
    """Return True if the commit message contains skip_keyword (case-insensitive).

    An empty keyword never matches.
    """
    if not skip_keyword:
        return False
    return skip_keyword.lower() in commit.message.lower()


def partition_commits(
    commits: Sequence[CommitRecord], skip_keyword: str
) -> tuple[list[CommitRecord], list[CommitRecord]]:
    """Split commits into (included, skipped), preserving order."""
    included: list[CommitRecord] = []
    skipped: list[CommitRecord] = []
    for commit in commits:
        (skipped if is_skipped(commit, skip_keyword) else included).append(commit)
    return included, skipped


def _fetch_one(commit: CommitRecord, fetch_files: FileFetcher, log: Logger) -> list[str]:
    try:
        sha = sanitize_reference(commit.sha, "commitSha")
        return list(fetch_files(sha))
    except Exception as exc:
        log.warning(f"Could not fetch files for commit {commit.sha[:7]}: {exc}")
        return []


def resolve_changed_files(
    commits: Sequence[CommitRecord],
    skip_keyword: str,
    fetch_files: FileFetcher,
    logger: Logger | None = None,
    max_workers: int | None = None,
) -> ChangedFiles:
    """Collect the files changed by every commit not marked with skip_keyword.

    File lists for included commits are fetched concurrently, then merged
    once all fetches have finished. A commit whose fetch fails contributes
    no files; the rest of the aggregation carries on.

    Args:
        commits: Commits in the pull request.
        skip_keyword: Opt-out marker; empty string disables skipping.
        fetch_files: Returns the paths changed by a commit SHA.
        logger: Receives per-commit skip and failure messages.
        max_workers: Thread pool size; defaults to the executor's default.

    Returns:
        ChangedFiles with the deduplicated union of paths.
    """
    log = logger or NullLogger()
    included, skipped = partition_commits(commits, skip_keyword)
    for commit in skipped:
        subject = commit.message.splitlines()[0] if commit.message else ""
        log.debug(f'Skipping commit {commit.sha[:7]}: "{subject}"')

    files: set[str] = set()
    if included:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda c: _fetch_one(c, fetch_files, log), included))
        for paths in results:
            files.update(paths)

    return ChangedFiles(
        files=files, skipped_count=len(skipped), total_count=len(commits)
    )
