"""
Classification of filter values.

A filter is a plain nested dict, but the same dict shape plays several roles:
an operator predicate (``{"$gt": 5}``), a combinator (``{"$or": [...]}``) or a
document of field constraints. ``kind_of`` names the role so callers can
dispatch on it explicitly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from ..utils.data import is_json

AND_KEY: Final = "$and"
OR_KEY: Final = "$or"
IN_KEY: Final = "$in"
REGEX_KEY: Final = "$regex"

COMBINATORS: Final = frozenset({AND_KEY, OR_KEY})


class ExpressionKind(str, Enum):
    """Role of a value inside a filter tree."""

    LITERAL = "literal"
    OPERATOR = "operator"
    DOCUMENT = "document"


def is_operator(key: Any) -> bool:
    """Return True for comparator keys like ``$gt``; combinators excluded."""
    return isinstance(key, str) and key.startswith("$") and key not in COMBINATORS


def kind_of(value: Any) -> ExpressionKind:
    """
    Classify a filter value.

    Args:
        value: Any value found in a filter tree

    Returns:
        OPERATOR for mappings made only of comparator keys, DOCUMENT for any
        other mapping (combinators and empty mappings included) and LITERAL
        for everything else, sequences included.
    """
    if not is_json(value):
        return ExpressionKind.LITERAL
    if value and all(is_operator(key) for key in value):
        return ExpressionKind.OPERATOR
    return ExpressionKind.DOCUMENT
