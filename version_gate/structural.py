"""Structural equality over parsed JSON values.

All dependency comparison is built on ``deep_equal`` applied to specific
sub-trees of a manifest or lockfile.
"""

from __future__ import annotations

from typing import Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def deep_equal(a: Any, b: Any, _visited: set[tuple[int, int]] | None = None) -> bool:
    """Return True if two JSON-like values are structurally equal.

    Dicts compare by key set then per-key values, lists by length then
    element-wise. ``True`` never equals ``1`` (they are different JSON
    types), but ``1`` equals ``1.0``.

    A dict/list pair that is already being compared further up the stack
    is assumed equal, so self-referencing structures terminate instead of
    recursing forever. This does not make cyclic-but-different structures
    compare correctly; it only guarantees termination.

    Examples:
        deep_equal({"a": [1, 2]}, {"a": [1, 2]}) → True
        deep_equal({"a": 1}, {"a": 1, "b": None}) → False
        deep_equal(None, {}) → False
    """
    if a is b:
        return True
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if not isinstance(a, (dict, list)):
        return a == b

    if _visited is None:
        _visited = set()
    pair = (id(a), id(b))
    if pair in _visited:
        return True
    _visited.add(pair)

    if len(a) != len(b):
        return False

    if isinstance(a, dict):
        for key, value in a.items():
            if key not in b:
                return False
            if not deep_equal(value, b[key], _visited):
                return False
        return True

    return all(deep_equal(x, y, _visited) for x, y in zip(a, b))
