"""
Data helpers shared by the merge engine, the composer and the builders.

Filters are plain nested dicts and lists, so "the same clause" means structural
equality: mapping keys compare regardless of order, sequences compare
element by element in order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def is_valid_str(value: Any) -> bool:
    """Return True for a string with at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def is_json(value: Any) -> bool:
    """Return True if value is a JSON object, i.e. a mapping."""
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """Return True for list-like values (lists and tuples, not strings)."""
    return isinstance(value, (list, tuple))


def deep_equals(a: Any, b: Any) -> bool:
    """
    Structural equality over filter values.

    Mappings are equal when they have the same keys with deep-equal values.
    Lists and tuples are equal when they hold deep-equal items in the same
    order. Booleans never equal numbers, unlike Python's ``True == 1``.

    Args:
        a: First value
        b: Second value

    Returns:
        True if both values describe the same clause
    """
    if a is b:
        return True

    if is_json(a) or is_json(b):
        if not (is_json(a) and is_json(b)) or len(a) != len(b):
            return False
        return all(key in b and deep_equals(a[key], b[key]) for key in a)

    if is_sequence(a) or is_sequence(b):
        if not (is_sequence(a) and is_sequence(b)) or len(a) != len(b):
            return False
        return all(deep_equals(x, y) for x, y in zip(a, b))

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    return bool(a == b)


def array_contains_value(array: Iterable[Any], value: Any) -> bool:
    """Return True if any item of array deep-equals value."""
    return any(deep_equals(item, value) for item in array)


def unique_values(values: Iterable[Any]) -> list[Any]:
    """Deduplicate values by structural equality, keeping first occurrences."""
    result: list[Any] = []
    for value in values:
        if not array_contains_value(result, value):
            result.append(value)
    return result
