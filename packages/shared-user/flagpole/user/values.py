"""Custom attribute values.

Custom attributes hold JSON-shaped data: strings, numbers, booleans, null, and
nested lists or string-keyed maps of the same. Anything else handed to a user
is coerced into that shape once, at construction, so redaction and
comparison can walk the structure without probing for exotic types.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Union

from flagpole.user.timestamps import format_timestamp

logger = logging.getLogger(__name__)

CustomValue = Union[
    str, int, float, bool, None, list["CustomValue"], dict[str, "CustomValue"]
]


def coerce_custom_value(value: Any) -> CustomValue:
    """Coerce an arbitrary value into a ``CustomValue``.

    Tuples and sets become lists, mappings become dicts with string keys,
    datetimes become canonical timestamp strings. Unsupported values become
    ``None``.

    Examples:
        >>> coerce_custom_value((1, "a"))
        [1, 'a']
        >>> coerce_custom_value({1: True})
        {'1': True}
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(key): coerce_custom_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [coerce_custom_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [coerce_custom_value(item) for item in sorted(value, key=repr)]
    if isinstance(value, datetime):
        return format_timestamp(value)
    logger.debug(f"Dropping unsupported custom value of type {type(value).__name__}")
    return None


def coerce_custom_map(value: Any) -> dict[str, CustomValue] | None:
    """Coerce a custom attribute bag, returning ``None`` for non-mappings."""
    if not isinstance(value, Mapping):
        return None
    return {str(key): coerce_custom_value(item) for key, item in value.items()}


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality for custom values.

    Unlike ``==``, booleans never equal numbers (``True`` vs ``1``), and
    nested containers are compared element by element under the same rule.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right
