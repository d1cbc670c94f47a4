"""Version parsing, comparison and release-tag lookup.

Uses the semver library for ordering, with allowance for incomplete
version strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import semver

from .errors import InvalidVersion
from .models import VersionComparison

# MAJOR.MINOR.PATCH at the start of a tag, after the prefix
_TAG_VERSION = re.compile(r"\d+\.\d+\.\d+")


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-beta.1" → "1.2.3-beta.1"

    Raises:
        InvalidVersion: If the string is not a semantic version.
    """
    try:
        return semver.Version.parse(version_str.strip(), optional_minor_and_patch=True)
    except (ValueError, TypeError) as exc:
        raise InvalidVersion(f"Invalid version: {version_str!r}") from exc


def compare_versions(current: str, previous: str) -> VersionComparison:
    """Compare two versions by semver precedence.

    Examples:
        compare_versions("1.1.0", "1.0.0") → VersionComparison.HIGHER
        compare_versions("1.0.0", "1.0.0") → VersionComparison.SAME
        compare_versions("1.0.0-rc.1", "1.0.0") → VersionComparison.LOWER
    """
    result = parse_version(current).compare(parse_version(previous))
    if result > 0:
        return VersionComparison.HIGHER
    if result < 0:
        return VersionComparison.LOWER
    return VersionComparison.SAME


def version_from_tag(tag: str, prefix: str) -> str | None:
    """Return the version part of a release tag, or None if tag is not one.

    Examples:
        version_from_tag("v1.2.3", "v") → "1.2.3"
        version_from_tag("release-2.0.0", "release-") → "2.0.0"
        version_from_tag("v1.2", "v") → None
    """
    if not tag.startswith(prefix):
        return None
    rest = tag[len(prefix) :]
    if not _TAG_VERSION.match(rest):
        return None
    return rest


def latest_version_tag(tags: Iterable[str], prefix: str) -> str | None:
    """Find the highest release tag with the given prefix.

    Tags are ordered by the semver precedence of their version part.
    Tags whose version part does not parse are ignored.

    Returns:
        The tag itself (prefix included), or None if no tag matches.
    """
    best: tuple[semver.Version, str] | None = None
    for tag in tags:
        tag = tag.strip()
        version_str = version_from_tag(tag, prefix)
        if version_str is None:
            continue
        try:
            version = parse_version(version_str)
        except InvalidVersion:
            continue
        if best is None or version > best[0]:
            best = (version, tag)
    return best[1] if best else None
