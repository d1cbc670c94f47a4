"""package-lock.json dependency classification.

Lockfiles churn on nearly every install: flags get normalised and entries
reordered even when no dependency moved. Entries whose version, source,
integrity and sub-dependencies are unchanged are therefore treated as
unchanged, whatever else differs.

Two shapes are supported:
- npm v7+ (``packages``): flat map keyed by install path, ``""`` is the
  project itself. Entries may carry ``dev: true``.
- npm v6 (``dependencies``): nested map keyed by package name. Dev-ness
  cannot be attributed reliably, so any real change counts as production.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .errors import UnparsableDocument
from .models import LockfileChange, LockfileDocument, LockfileLegacy, LockfilePackages
from .shell import Logger, NullLogger
from .structural import deep_equal

PACKAGE_LOCK_JSON_FILENAME = "package-lock.json"

# Fields that identify what is actually installed for an entry
SIGNIFICANT_FIELDS = ("version", "resolved", "integrity", "dependencies", "requires")
ROOT_KEY = ""


def parse_lockfile(raw: str, name: str = PACKAGE_LOCK_JSON_FILENAME) -> dict[str, Any]:
    """Parse lockfile text into a dict.

    Raises:
        UnparsableDocument: If raw is not JSON, is nested too deeply to
            decode, or is not a JSON object.
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise UnparsableDocument(name, str(exc)) from exc
    if not isinstance(data, dict):
        raise UnparsableDocument(name, f"expected a JSON object, got {type(data).__name__}")
    return data


def _entries(lock: Mapping[str, Any], section: str) -> dict[str, Any]:
    value = lock.get(section)
    return dict(value) if isinstance(value, Mapping) else {}


def lockfile_pair(
    base: Mapping[str, Any], head: Mapping[str, Any]
) -> tuple[LockfileDocument, LockfileDocument]:
    """Pick the shape both snapshots are compared in.

    ``packages`` wins if either snapshot has it; otherwise both are read as
    legacy ``dependencies`` lockfiles.
    """
    if "packages" in base or "packages" in head:
        return (
            LockfilePackages(entries=_entries(base, "packages")),
            LockfilePackages(entries=_entries(head, "packages")),
        )
    return (
        LockfileLegacy(entries=_entries(base, "dependencies")),
        LockfileLegacy(entries=_entries(head, "dependencies")),
    )


def is_only_metadata_change(base_entry: Any, head_entry: Any) -> bool:
    """Return True if two versions of an entry differ only in auxiliary flags.

    An entry that was added or removed is never metadata-only.
    """
    if base_entry is None or head_entry is None:
        return False
    if not isinstance(base_entry, Mapping) or not isinstance(head_entry, Mapping):
        return False
    return all(
        deep_equal(base_entry.get(field), head_entry.get(field))
        for field in SIGNIFICANT_FIELDS
    )


def changed_package_keys(
    base_entries: Mapping[str, Any],
    head_entries: Mapping[str, Any],
    logger: Logger | None = None,
) -> set[str]:
    """Return the keys whose entries really changed between two snapshots.

    The root entry (``""``) and metadata-only changes are left out.
    """
    log = logger or NullLogger()
    changed: set[str] = set()

    for key in set(base_entries) | set(head_entries):
        if key == ROOT_KEY:
            continue
        base_entry = base_entries.get(key)
        head_entry = head_entries.get(key)
        if deep_equal(base_entry, head_entry):
            continue
        if is_only_metadata_change(base_entry, head_entry):
            log.debug(f"Skipping metadata-only change for package: {key}")
            continue
        changed.add(key)

    return changed


def _is_dev(entry: Any) -> bool:
    return isinstance(entry, Mapping) and bool(entry.get("dev"))


def all_changes_dev_only(
    base: LockfileDocument, head: LockfileDocument, changed_keys: set[str]
) -> bool:
    """Return True if every changed key is a dev dependency.

    A key is a production change if it exists in head without a ``dev``
    marker, or was removed from head while its base entry had none. Legacy
    lockfiles always return False.
    """
    if not isinstance(base, LockfilePackages) or not isinstance(head, LockfilePackages):
        return False

    for key in changed_keys:
        base_entry = base.entries.get(key)
        head_entry = head.entries.get(key)
        if head_entry is not None and not _is_dev(head_entry):
            return False
        if head_entry is None and base_entry is not None and not _is_dev(base_entry):
            return False
    return True


def classify_lockfile_change(
    base: Mapping[str, Any],
    head: Mapping[str, Any],
    include_dev: bool,
    logger: Logger | None = None,
) -> LockfileChange:
    """Classify the difference between two package-lock.json snapshots.

    Args:
        base: Parsed lockfile at the PR base.
        head: Parsed lockfile at the PR head.
        include_dev: Treat dev-only changes as requiring a bump.
        logger: Receives debug lines describing what was detected.

    Returns:
        LockfileChange. All fields are False when the documents are
        equivalent for versioning purposes.
    """
    log = logger or NullLogger()
    base_doc, head_doc = lockfile_pair(base, head)

    if deep_equal(base_doc.entries, head_doc.entries):
        return LockfileChange()

    log.debug(f"package-lock.json has changes in '{base_doc.kind}'")
    changed = changed_package_keys(base_doc.entries, head_doc.entries, log)
    if not changed:
        log.debug("package-lock.json changes were metadata-only, skipping")
        return LockfileChange(all_metadata_only=True)

    if not all_changes_dev_only(base_doc, head_doc, changed):
        log.debug(
            "package-lock.json has production dependency changes: "
            + ", ".join(sorted(changed))
        )
        return LockfileChange(production_changed=True)

    if include_dev:
        log.debug("package-lock.json devDependencies changed (dev dependencies included)")
    else:
        log.debug("Only devDependencies changed in package-lock.json")
    return LockfileChange(production_changed=include_dev, dev_changed=True)
