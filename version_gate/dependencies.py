"""Dependency change determination across a pull request.

Fetches package.json and package-lock.json at the base and head revisions,
classifies each pair, and folds the results into one verdict. When the
documents cannot be read or parsed, the verdict is conservative: a
version bump is required.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable

from .errors import (
    CollaboratorUnavailable,
    InvalidPath,
    InvalidReferenceFormat,
    UnparsableDocument,
)
from .lockfile import PACKAGE_LOCK_JSON_FILENAME, classify_lockfile_change, parse_lockfile
from .manifest import PACKAGE_JSON_FILENAME, classify_manifest_change, parse_manifest
from .models import DependencyChangeVerdict
from .refs import sanitize_reference
from .shell import Logger, NullLogger
from .sources import RevisionSource


def lockfile_path_for(manifest_path: str) -> str:
    """Return the package-lock.json path that sits next to manifest_path.

    Examples:
        lockfile_path_for("package.json") → "package-lock.json"
        lockfile_path_for("packages/core/package.json") → "packages/core/package-lock.json"
    """
    directory = posixpath.dirname(manifest_path)
    return posixpath.join(directory, PACKAGE_LOCK_JSON_FILENAME) if directory else PACKAGE_LOCK_JSON_FILENAME


def _touches(changed_files: Iterable[str] | None, filename: str) -> bool:
    if changed_files is None:
        return True
    return any(posixpath.basename(f) == filename for f in changed_files)


def fold_verdict(production_changed: bool, dev_changed: bool) -> DependencyChangeVerdict:
    """Combine classifier flags into the verdict reported to the pipeline."""
    if production_changed:
        return DependencyChangeVerdict(has_changes=True, only_dev_dependencies=False)
    if dev_changed:
        return DependencyChangeVerdict(has_changes=False, only_dev_dependencies=True)
    return DependencyChangeVerdict.none()


def has_package_dependency_changes(
    base_ref: str,
    head_ref: str,
    source: RevisionSource,
    *,
    changed_files: Iterable[str] | None = None,
    include_dev: bool = False,
    manifest_path: str = PACKAGE_JSON_FILENAME,
    logger: Logger | None = None,
) -> DependencyChangeVerdict:
    """Decide whether dependency changes between two revisions require a bump.

    A document is only inspected when ``changed_files`` is None or lists a
    file with its name. If exactly one revision has the document, it was
    added or removed, which counts as a change.

    Args:
        base_ref: PR base SHA.
        head_ref: PR head SHA.
        source: Provides file content at a revision.
        changed_files: Optional filter; see above.
        include_dev: Treat devDependencies changes as requiring a bump.
        manifest_path: Repository-relative path to package.json.
        logger: Receives debug lines and warnings for conservative verdicts.

    Returns:
        DependencyChangeVerdict. Any failure while reading, parsing or
        comparing the documents yields the conservative verdict.

    Raises:
        InvalidReferenceFormat: If either ref is not a valid SHA.
        InvalidPath: If manifest_path is unsafe.
    """
    log = logger or NullLogger()
    base = sanitize_reference(base_ref, "baseRef")
    head = sanitize_reference(head_ref, "headRef")

    files = list(changed_files) if changed_files is not None else None
    check_manifest = _touches(files, PACKAGE_JSON_FILENAME)
    check_lockfile = _touches(files, PACKAGE_LOCK_JSON_FILENAME)
    if not check_manifest and not check_lockfile:
        log.debug("No package files in changed files list, skipping dependency check")
        return DependencyChangeVerdict.none()

    log.debug(f"include-dev-dependencies: {include_dev}")
    production_changed = False
    dev_changed = False

    try:
        if check_manifest:
            base_raw = source.get_file_at_revision(manifest_path, base)
            head_raw = source.get_file_at_revision(manifest_path, head)
            if base_raw and head_raw:
                change = classify_manifest_change(
                    parse_manifest(base_raw), parse_manifest(head_raw), include_dev, log
                )
                production_changed |= change.production_changed
                dev_changed |= change.dev_changed
            elif base_raw != head_raw:
                log.debug(f"{manifest_path} was added or removed")
                return DependencyChangeVerdict.conservative()

        if check_lockfile:
            lock_path = lockfile_path_for(manifest_path)
            base_raw = source.get_file_at_revision(lock_path, base)
            head_raw = source.get_file_at_revision(lock_path, head)
            if base_raw and head_raw:
                lock_change = classify_lockfile_change(
                    parse_lockfile(base_raw), parse_lockfile(head_raw), include_dev, log
                )
                production_changed |= lock_change.production_changed
                dev_changed |= lock_change.dev_changed
            elif base_raw != head_raw:
                log.debug(f"{lock_path} was added or removed")
                return DependencyChangeVerdict.conservative()
    except UnparsableDocument as exc:
        log.warning(f"{exc}; assuming dependencies changed")
        return DependencyChangeVerdict.conservative()
    except (InvalidReferenceFormat, InvalidPath):
        raise
    except CollaboratorUnavailable as exc:
        log.warning(f"Could not check package dependency changes: {exc}")
        return DependencyChangeVerdict.conservative()
    except Exception as exc:
        log.warning(f"Unexpected error checking package dependency changes: {exc}")
        return DependencyChangeVerdict.conservative()

    return fold_verdict(production_changed, dev_changed)
