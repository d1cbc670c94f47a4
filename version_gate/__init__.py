"""Pull-request version gate for npm packages.

Decides whether a pull request must bump the package.json version and, if
so, checks that it did.
"""

from __future__ import annotations

from version_gate.commits import resolve_changed_files
from version_gate.dependencies import has_package_dependency_changes
from version_gate.lockfile import classify_lockfile_change
from version_gate.manifest import classify_manifest_change
from version_gate.refs import sanitize_file_path, sanitize_reference
from version_gate.relevance import is_relevant
from version_gate.structural import deep_equal

__all__ = [
    "classify_lockfile_change",
    "classify_manifest_change",
    "deep_equal",
    "has_package_dependency_changes",
    "is_relevant",
    "resolve_changed_files",
    "sanitize_file_path",
    "sanitize_reference",
]
