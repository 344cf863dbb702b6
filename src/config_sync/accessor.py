"""Dotted-path access into a single document.

Paths are ``.``-separated mapping keys (``page.front``).  None of these
functions persist anything: ``set_value`` and ``clear_value`` return a new
document that the caller must write back to a store.
"""

from __future__ import annotations

import copy
from typing import Any

from .exceptions import KeyNotFoundError, TypeMismatchError
from .storage.values import MISSING, is_missing, validate_value


class _DeleteDocument:
    def __repr__(self) -> str:
        return "DELETE_DOCUMENT"


# Returned by clear_value() for an empty path: the whole object goes.
DELETE_DOCUMENT = _DeleteDocument()


def split_path(path: str) -> list[str]:
    """Split a dotted path; the empty path has no segments."""
    if not path:
        return []
    return path.split(".")


def get_value(doc: Any, path: str = "") -> Any:
    """Return the value at *path*, or ``MISSING``.

    Lookup stops with ``MISSING`` at the first absent segment or the first
    value that is not a mapping.
    """
    current = doc
    for segment in split_path(path):
        if not isinstance(current, dict) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def has_value(doc: Any, path: str) -> bool:
    return not is_missing(get_value(doc, path))


def set_value(doc: Any, path: str, value: Any) -> Any:
    """Return a copy of *doc* with *value* stored at *path*.

    Missing intermediate mappings are created.  A missing document
    (``None`` or ``MISSING``) starts as an empty mapping.

    Raises:
        TypeMismatchError: If an existing intermediate value is not a
            mapping.
    """
    validate_value(value)
    segments = split_path(path)
    if not segments:
        return copy.deepcopy(value)

    result = {} if doc is None or is_missing(doc) else copy.deepcopy(doc)
    if not isinstance(result, dict):
        raise TypeMismatchError(path, segments[0], result)

    node = result
    for segment in segments[:-1]:
        child = node.get(segment, MISSING)
        if is_missing(child):
            child = node[segment] = {}
        elif not isinstance(child, dict):
            raise TypeMismatchError(path, segment, child)
        node = child
    node[segments[-1]] = copy.deepcopy(value)
    return result


def clear_value(doc: Any, path: str) -> Any:
    """Return a copy of *doc* without the key at *path*.

    An empty path returns ``DELETE_DOCUMENT``: the caller should delete
    the whole object instead of saving it.

    Raises:
        KeyNotFoundError: If *path* does not resolve.
        TypeMismatchError: If an intermediate value is not a mapping.
    """
    segments = split_path(path)
    if not segments:
        return DELETE_DOCUMENT
    if doc is None or is_missing(doc):
        raise KeyNotFoundError(path)
    if not isinstance(doc, dict):
        raise TypeMismatchError(path, segments[0], doc)

    result = copy.deepcopy(doc)
    node = result
    for segment in segments[:-1]:
        if segment not in node:
            raise KeyNotFoundError(path)
        child = node[segment]
        if not isinstance(child, dict):
            raise TypeMismatchError(path, segment, child)
        node = child
    if segments[-1] not in node:
        raise KeyNotFoundError(path)
    del node[segments[-1]]
    return result
