"""Changed-file relevance filtering.

Decides whether a changed path should trigger a version check on its own.
Exclusions are plain data tables matched with string operations only, so
matching is linear in the path length whatever the filename looks like.

package.json and package-lock.json are never relevant here: a bare
extension match would flag every metadata-only manifest edit. They are
routed to the dependency classifiers instead.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from enum import Enum

RELEVANT_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx"})

ROUTED_FILENAMES = frozenset({"package.json", "package-lock.json"})


class MatchKind(str, Enum):
    DIRECTORY = "directory"  # any directory segment equals the needle
    INFIX = "infix"  # filename contains the needle
    PREFIX = "prefix"  # filename starts with the needle


EXCLUSION_RULES: tuple[tuple[MatchKind, tuple[str, ...]], ...] = (
    (
        MatchKind.DIRECTORY,
        (
            "test",
            "tests",
            "__tests__",
            "doc",
            "docs",
            "example",
            "examples",
            "script",
            "scripts",
            ".github",
            ".vscode",
            "coverage",
            "dist",
            "build",
            "node_modules",
        ),
    ),
    (MatchKind.INFIX, (".test.", ".spec.", ".config.")),
    (MatchKind.PREFIX, ("test.", "spec.")),
)


def _matches(kind: MatchKind, needles: tuple[str, ...], directories: list[str], filename: str) -> bool:
    if kind is MatchKind.DIRECTORY:
        return any(segment in needles for segment in directories)
    if kind is MatchKind.INFIX:
        return any(needle in filename for needle in needles)
    return filename.startswith(needles)


def is_excluded(path: str) -> bool:
    """Return True if path sits in a non-production location or is a test/config file."""
    *directories, filename = path.split("/")
    return any(
        _matches(kind, needles, directories, filename) for kind, needles in EXCLUSION_RULES
    )


def is_relevant(path: str) -> bool:
    """Return True if a change to path should require a version check.

    Examples:
        is_relevant("src/index.js") → True
        is_relevant("scripts.js") → True
        is_relevant("scripts/deploy.js") → False
        is_relevant("src/index.test.ts") → False
        is_relevant("package.json") → False
    """
    filename = posixpath.basename(path)
    if posixpath.splitext(filename)[1] not in RELEVANT_EXTENSIONS:
        return False
    if filename in ROUTED_FILENAMES:
        return False
    return not is_excluded(path)


def has_relevant_changes(paths: Iterable[str]) -> bool:
    return any(is_relevant(p) for p in paths)


def relevant_files(paths: Iterable[str]) -> list[str]:
    """Return the relevant paths, sorted for stable output."""
    return sorted(p for p in paths if is_relevant(p))
