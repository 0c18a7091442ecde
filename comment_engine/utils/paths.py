"""Path access into nested mappings.

A path is either a dotted string (``"author.name"``) or a sequence of
segments (``["labels", "api::page.page"]``) for keys that contain dots.
"""

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any


_MISSING = object()

Path = str | Sequence[str] | None


def path_segments(path: Path) -> list[str]:
    """Split a path into its segments."""
    if path is None:
        return []
    if isinstance(path, str):
        return [part for part in path.split(".") if part] if path else []
    return [str(part) for part in path]


def join_path(path: Path) -> str:
    """Render a path as a dotted string (for logging and display)."""
    return ".".join(path_segments(path))


def get_path(document: Any, path: Path, default: Any = None) -> Any:
    """Resolve ``path`` inside ``document``.

    An empty path returns the document itself. Any missing segment, or a
    segment that resolves to ``None``, yields ``default``.
    """
    current = document
    for part in path_segments(path):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, str) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else _MISSING
        else:
            return default
        if current is _MISSING:
            return default
    return default if current is None else current


def set_path(document: MutableMapping[str, Any], path: Path, value: Any) -> MutableMapping[str, Any]:
    """Assign ``value`` at ``path``, creating intermediate mappings.

    An empty path leaves ``document`` unchanged.
    """
    parts = path_segments(path)
    if not parts:
        return document
    current = document
    for part in parts[:-1]:
        nested = current.get(part)
        if not isinstance(nested, MutableMapping):
            nested = {}
            current[part] = nested
        current = nested
    current[parts[-1]] = value
    return document
