"""Immutable updates of nested form state.

Each change returns a new mapping; the input is never mutated.
"""

from collections.abc import Mapping
from typing import Any


def apply_change(state: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a copy of `state` with the dotted `path` set to `value`.

    Only the mappings along the path are copied; untouched branches are
    shared with the input. Missing intermediate keys are created.

    Raises:
        ValueError: If the path is empty or crosses a non-mapping value.
    """
    if not path:
        raise ValueError("path must not be empty")

    head, _, rest = path.partition(".")
    if not head:
        raise ValueError(f"Invalid path: {path!r}")

    updated = dict(state)
    if not rest:
        updated[head] = value
        return updated

    child = state.get(head, {})
    if not isinstance(child, Mapping):
        raise ValueError(f"Cannot set {path!r}: {head!r} holds a {type(child).__name__}")

    updated[head] = apply_change(child, rest, value)
    return updated


def apply_changes(state: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Apply several dotted-path changes in order."""
    updated = dict(state)
    for path, value in changes.items():
        updated = apply_change(updated, path, value)
    return updated


def get_path(state: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read a dotted path, returning `default` when any step is missing."""
    current: Any = state
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current
