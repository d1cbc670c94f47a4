"""package.json dependency classification.

Whether a version bump is owed depends only on the dependency sections of
the manifest. ``version``, ``description``, ``scripts`` and every other
field are never inspected.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .errors import UnparsableDocument
from .models import ManifestChange, ManifestDocument
from .shell import Logger, NullLogger
from .structural import deep_equal

PACKAGE_JSON_FILENAME = "package.json"

PRODUCTION_SECTIONS = (
    "dependencies",
    "peerDependencies",
    "optionalDependencies",
    "bundleDependencies",
    "bundledDependencies",
)
DEV_SECTION = "devDependencies"


def parse_manifest(raw: str, name: str = PACKAGE_JSON_FILENAME) -> ManifestDocument:
    """Parse manifest text into a ManifestDocument.

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
    return ManifestDocument(data=data)


def _as_document(doc: ManifestDocument | Mapping[str, Any]) -> ManifestDocument:
    if isinstance(doc, ManifestDocument):
        return doc
    return ManifestDocument(data=dict(doc))


def classify_manifest_change(
    base: ManifestDocument | Mapping[str, Any],
    head: ManifestDocument | Mapping[str, Any],
    include_dev: bool,
    logger: Logger | None = None,
) -> ManifestChange:
    """Compare the dependency sections of two package.json snapshots.

    Any difference in a production section (dependencies, peer, optional,
    bundled) marks a production change; the first hit is enough. A
    difference in devDependencies marks a dev change, and is folded into
    the production verdict when ``include_dev`` is set.

    Args:
        base: Manifest at the PR base.
        head: Manifest at the PR head.
        include_dev: Treat devDependencies changes as requiring a bump.
        logger: Receives debug lines describing what was detected.
    """
    log = logger or NullLogger()
    base_doc = _as_document(base)
    head_doc = _as_document(head)
    result = ManifestChange()

    for section in PRODUCTION_SECTIONS:
        if not deep_equal(base_doc.section(section), head_doc.section(section)):
            log.debug(f"package.json production dependency change in section: {section}")
            result.production_changed = True
            break

    if not deep_equal(base_doc.section(DEV_SECTION), head_doc.section(DEV_SECTION)):
        result.dev_changed = True
        if include_dev:
            log.debug("package.json devDependencies changed (dev dependencies included)")
            result.production_changed = True
        else:
            log.debug("package.json devDependencies changed")

    return result
