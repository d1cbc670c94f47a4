"""Exception types for version-gate.

Validation errors (bad refs, bad paths) always abort the operation that hit
them. Parse and collaborator errors are caught at the dependency-check
boundary and turned into a conservative "version bump required" verdict.
"""

from __future__ import annotations


class VersionGateError(Exception):
    """Base class for all errors raised by version-gate."""


class InvalidReferenceFormat(VersionGateError, ValueError):
    """A revision identifier is not a 7-40 character hex SHA."""


class InvalidPath(VersionGateError, ValueError):
    """A repository-relative path is empty, absolute, or otherwise unsafe."""


class UnparsableDocument(VersionGateError):
    """A manifest or lockfile was fetched but is not valid JSON."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"Could not parse {name}: {detail}")
        self.name = name


class CollaboratorUnavailable(VersionGateError):
    """git or the GitHub API could not answer a query."""


class InvalidVersion(VersionGateError, ValueError):
    """A version string is not valid semver."""


class ManifestError(VersionGateError):
    """The working-tree package.json is missing or has no version."""


class ConfigError(VersionGateError):
    """Configuration could not be loaded or failed validation."""
