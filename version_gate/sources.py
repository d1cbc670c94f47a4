"""Version-control collaborators backed by git and the GitHub CLI.

Every SHA and path is validated before it reaches a command line. Failures
surface as CollaboratorUnavailable; a file that simply does not exist at a
revision is reported as None.
"""

from __future__ import annotations

import json
import subprocess
from typing import Protocol

from .errors import CollaboratorUnavailable
from .models import CommitRecord
from .refs import sanitize_file_path, sanitize_reference
from .shell import gh, git

# Phrases git uses when a path is absent at a revision
_MISSING_PATH_MARKERS = ("does not exist in", "exists on disk, but not in")


class RevisionSource(Protocol):
    def get_file_at_revision(self, path: str, ref: str) -> str | None: ...

    def changed_files(self, base: str, head: str) -> list[str]: ...

    def list_tags(self) -> list[str]: ...


class PullRequestSource(Protocol):
    def list_commits(self) -> list[CommitRecord]: ...

    def files_for_commit(self, sha: str) -> list[str]: ...


class GitRevisionSource:
    """Reads file content, diffs and tags from the local git checkout."""

    def get_file_at_revision(self, path: str, ref: str) -> str | None:
        """Return the content of path at ref, or None if it is absent there.

        Raises:
            InvalidReferenceFormat, InvalidPath: If ref or path are unsafe.
            CollaboratorUnavailable: If git fails for any other reason.
        """
        clean_ref = sanitize_reference(ref, "ref")
        clean_path = sanitize_file_path(path, "filePath")
        try:
            output = git("show", f"{clean_ref}:{clean_path}")
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr or ""
            if any(marker in stderr for marker in _MISSING_PATH_MARKERS):
                return None
            raise CollaboratorUnavailable(
                f"git show {clean_ref}:{clean_path} failed: {stderr.strip()}"
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise CollaboratorUnavailable(
                f"git show {clean_ref}:{clean_path} failed: {exc}"
            ) from exc
        return output or None

    def changed_files(self, base: str, head: str) -> list[str]:
        """List paths that differ between two revisions."""
        clean_base = sanitize_reference(base, "baseRef")
        clean_head = sanitize_reference(head, "headRef")
        try:
            output = git("diff", "--name-only", clean_base, clean_head)
        except subprocess.CalledProcessError as exc:
            raise CollaboratorUnavailable(
                f"git diff failed: {(exc.stderr or '').strip()}"
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise CollaboratorUnavailable(f"git diff failed: {exc}") from exc
        return output.splitlines() if output else []

    def list_tags(self) -> list[str]:
        """List local tags. Tags are not fetched; check out with full history."""
        output = git("tag", "--list", check=False)
        return [t for t in output.splitlines() if t.strip()]


class GitHubPullRequestSource:
    """Lists a pull request's commits and per-commit files through ``gh api``.

    Works with shallow clones, since nothing is read from local history.

    Args:
        repository: "owner/name".
        number: Pull request number.
        token: Token passed to gh as GH_TOKEN.
    """

    def __init__(self, repository: str, number: int, token: str | None = None) -> None:
        self.repository = repository
        self.number = number
        self.token = token

    def _api(self, *args: str) -> str:
        try:
            return gh("api", *args, token=self.token)
        except (subprocess.CalledProcessError, OSError, UnicodeDecodeError) as exc:
            detail = getattr(exc, "stderr", None) or str(exc)
            raise CollaboratorUnavailable(f"gh api {args[0]} failed: {detail.strip()}") from exc

    def list_commits(self) -> list[CommitRecord]:
        """Return every commit in the pull request, oldest first."""
        output = self._api(
            f"repos/{self.repository}/pulls/{self.number}/commits",
            "--paginate",
            "--jq",
            ".[] | {sha: .sha, message: .commit.message} | @json",
        )
        commits: list[CommitRecord] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            try:
                commits.append(CommitRecord.model_validate(json.loads(line)))
            except ValueError as exc:
                raise CollaboratorUnavailable(f"Unexpected commit listing: {exc}") from exc
        return commits

    def files_for_commit(self, sha: str) -> list[str]:
        """Return the paths changed by a single commit."""
        clean_sha = sanitize_reference(sha, "commitSha")
        output = self._api(
            f"repos/{self.repository}/commits/{clean_sha}",
            "--jq",
            ".files[].filename",
        )
        return [line for line in output.splitlines() if line.strip()]
