"""
Data helpers for filter values.
"""

from .data import (
    array_contains_value,
    deep_equals,
    is_json,
    is_sequence,
    is_valid_str,
    unique_values,
)

__all__ = [
    "array_contains_value",
    "deep_equals",
    "is_json",
    "is_sequence",
    "is_valid_str",
    "unique_values",
]
