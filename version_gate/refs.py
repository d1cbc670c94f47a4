"""Validation for revision identifiers and file paths.

Every value checked here ends up on a git or gh command line. Anything
ambiguous is rejected outright rather than escaped.
"""

from __future__ import annotations

import re

from .errors import InvalidPath, InvalidReferenceFormat

SHA_PATTERN = re.compile(r"[a-f0-9]{7,40}", re.IGNORECASE)
DANGEROUS_CHARACTERS = frozenset(";&|`$()'\"<>")


def _has_dangerous_characters(value: str) -> bool:
    return any(ch in DANGEROUS_CHARACTERS for ch in value)


def sanitize_reference(raw: object, label: str) -> str:
    """Validate a commit SHA and return it with surrounding whitespace removed.

    Case is preserved; both "abc123d" and "ABC123D" are accepted.

    Args:
        raw: The value to validate.
        label: Name used in error messages (e.g., "baseRef").

    Raises:
        InvalidReferenceFormat: If raw is not a non-empty string, is not 7-40
            hex characters, or contains shell metacharacters.
    """
    if not isinstance(raw, str) or not raw:
        raise InvalidReferenceFormat(f"Invalid {label}: must be a non-empty string")

    clean = raw.strip()
    if not SHA_PATTERN.fullmatch(clean):
        raise InvalidReferenceFormat(
            f"Invalid {label} format: {clean}. "
            "Must be a valid git SHA (7-40 hex characters)"
        )
    if _has_dangerous_characters(clean):
        raise InvalidReferenceFormat(f"Invalid {label}: contains dangerous characters")
    return clean


def sanitize_file_path(raw: object, label: str) -> str:
    """Validate a repository-relative path for use in ``git show REF:PATH``.

    Raises:
        InvalidPath: If raw is empty, contains shell metacharacters, contains
            "..", is absolute, or starts with "-".
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidPath(f"Invalid {label}: must be a non-empty string")

    clean = raw.strip()
    if _has_dangerous_characters(clean):
        raise InvalidPath(f"Invalid {label}: contains dangerous characters")
    if ".." in clean:
        raise InvalidPath(f"Invalid {label}: path traversal not allowed")
    if clean.startswith("/"):
        raise InvalidPath(f"Invalid {label}: absolute paths not allowed")
    if clean.startswith("-"):
        raise InvalidPath(f"Invalid {label}: paths starting with '-' not allowed")
    return clean
