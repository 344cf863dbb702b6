"""The value model shared by every store.

A configuration document is a tree built from a small grammar:
``None``, ``bool``, ``int``/``float``, ``str``, ``list`` and ``dict`` with
string keys.  This module defines:

- ``MISSING``: the absence marker returned by reads and key lookups.
- ``validate_value``: rejects anything outside the grammar.
- ``values_equal``: deep structural equality used by the comparator.
"""

from __future__ import annotations

import math
from typing import Any, Union

from ..exceptions import InvalidValueError

Value = Union[None, bool, int, float, str, list, dict]


class _Missing:
    """Singleton marking an absent document or key.

    Distinct from ``None``, which is a legitimate stored value.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    """Return ``True`` if *value* is the ``MISSING`` marker."""
    return value is MISSING


def validate_value(value: Any, _path: str = "") -> None:
    """Check that *value* is a tree of supported kinds.

    Raises:
        InvalidValueError: On the first unsupported node, naming its
            dotted location.
    """
    where = _path or "<root>"
    if value is None or isinstance(value, (bool, str)):
        return
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            raise InvalidValueError(f"NaN is not a supported value at {where}")
        return
    if isinstance(value, list):
        for index, item in enumerate(value):
            validate_value(item, f"{_path}[{index}]" if _path else f"[{index}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidValueError(
                    f"Mapping keys must be strings, got {type(key).__name__} "
                    f"{key!r} at {where}"
                )
            validate_value(item, f"{_path}.{key}" if _path else key)
        return
    raise InvalidValueError(
        f"Unsupported value type {type(value).__name__} at {where}"
    )


def values_equal(left: Any, right: Any) -> bool:
    """Deep structural equality over the value grammar.

    Mappings compare independently of key order, sequences element-wise.
    Booleans never equal numbers, even though Python treats ``True == 1``.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return (
            isinstance(left, bool)
            and isinstance(right, bool)
            and left is right
        )
    if isinstance(left, dict):
        if not isinstance(right, dict) or left.keys() != right.keys():
            return False
        return all(values_equal(left[k], right[k]) for k in left)
    if isinstance(left, list):
        if not isinstance(right, list) or len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (int, float)):
        return isinstance(right, (int, float)) and left == right
    if left is None or right is None:
        return left is right
    return type(left) is type(right) and left == right
