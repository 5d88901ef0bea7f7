"""
Paths - Helpers for slash-delimited property paths.

The root is '/', every other path is '/seg1/seg2/...' with no empty
segments. The '*' segment matches any child of its parent.
"""

from typing import List, Optional

from .errors import RegistrationError

ROOT = '/'
WILDCARD = '*'


def normalize_path(path: str) -> str:
    """
    Normalize a property path.

    Adds a missing leading slash and strips trailing slashes. Empty inner
    segments ('/a//b') are rejected.
    """
    if path is None:
        raise RegistrationError("Property path must not be None")
    stripped = path.strip().rstrip('/')
    if not stripped:
        return ROOT
    if not stripped.startswith('/'):
        stripped = '/' + stripped
    if '' in stripped[1:].split('/'):
        raise RegistrationError(f"Property path {path!r} contains an empty segment")
    return stripped


def segments(path: str) -> List[str]:
    """Return the segments of a normalized path; the root has none."""
    if path == ROOT:
        return []
    return path[1:].split('/')


def join_path(parent_path: str, name: Optional[object]) -> str:
    """
    Append a field name or array index to a parent path.

    A None name (the document root) leaves the parent unchanged, with an
    empty parent mapping to the root.
    """
    result = parent_path or ''
    if name is not None:
        if not result.endswith('/'):
            result += '/'
        result += str(name)
    return result or ROOT


def parent_path(path: str) -> Optional[str]:
    """Return the parent of a path, or None for the root."""
    if path == ROOT:
        return None
    head, _, _ = path.rpartition('/')
    return head or ROOT


def wildcard_path(path: str) -> Optional[str]:
    """Return the one-level wildcard alternative for a path."""
    parent = parent_path(path)
    if parent is None:
        return None
    return join_path(parent, WILDCARD)


def path_prefixes(path: str) -> List[str]:
    """
    Return every prefix of a path, root first, the path itself last.

    >>> path_prefixes('/runs/*/results')
    ['/', '/runs', '/runs/*', '/runs/*/results']
    """
    result = [ROOT]
    current = ROOT
    for segment in segments(path):
        current = join_path(current, segment)
        result.append(current)
    return result
