"""
Filter Merge Engine.

Reconciles filter subtrees so that AND-ing many constraints produces a flat,
canonical filter instead of a deep pile of ``$and`` arrays:

    merge_filters({"age": {"$gt": 18}}, {"age": {"$lt": 65}, "city": "Pune"})
    -> [{"age": {"$gt": 18, "$lt": 65}, "city": "Pune"}]

    merge_filters({"city": "Pune"}, {"city": "Delhi"})
    -> [{"city": "Pune"}, {"city": "Delhi"}]

The first entry of the result is always the merged filter. A second entry, the
residue, holds the parts that assign a different value to a key already
present in the merged filter and therefore have to stay a separate clause.

Inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..utils.data import array_contains_value, deep_equals
from .expression import IN_KEY, ExpressionKind, kind_of

logger = logging.getLogger("querybuilder.merge")


def merge_filters(j1: Any, j2: Any) -> list[Any]:
    """
    Merge two filter values as much as possible.

    Merging recurses into the values of keys present in both mappings.
    Two ``$in`` lists on the same key are unioned instead of producing a
    residue.

    Args:
        j1: First filter value
        j2: Second filter value

    Returns:
        ``[merged]`` or ``[merged, residue]``. When only one of the values is
        a mapping it is returned first and the other as the residue; two
        non-mappings are returned as they are.
    """
    if deep_equals(j1, j2):
        return [j1]

    if kind_of(j1) is ExpressionKind.LITERAL:
        if kind_of(j2) is ExpressionKind.LITERAL:
            return [j1, j2]
        return [j2, j1]
    if kind_of(j2) is ExpressionKind.LITERAL:
        return [j1, j2]

    return _merge_mappings(j1, j2)


def _merge_mappings(j1: Mapping[str, Any], j2: Mapping[str, Any]) -> list[Any]:
    merged: dict[str, Any] = {}
    residue: dict[str, Any] = {}

    for key, value in j1.items():
        if key not in j2 or deep_equals(value, j2[key]):
            merged[key] = value
            continue

        other = j2[key]
        if _has_in(value) and _has_in(other):
            value, other = _union_in(value, other)

        children = merge_filters(value, other)
        merged[key] = children[0]
        if len(children) > 1:
            residue[key] = children[1]
            logger.debug(f"[MERGE] Conflicting values for '{key}' kept as residue")

    for key, value in j2.items():
        if key not in j1:
            merged[key] = value

    if residue:
        return [merged, residue]
    return [merged]


def _has_in(value: Any) -> bool:
    return kind_of(value) is ExpressionKind.OPERATOR and IN_KEY in value


def _union_in(
    j1: Mapping[str, Any], j2: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Move the ``$in`` values of j2 into j1, skipping duplicates."""
    values = list(j1[IN_KEY])
    for value in j2[IN_KEY]:
        if not array_contains_value(values, value):
            values.append(value)

    left = dict(j1)
    left[IN_KEY] = values
    right = {key: value for key, value in j2.items() if key != IN_KEY}
    return left, right


def merge_many(expressions: Sequence[Any]) -> list[Any]:
    """
    Merge any number of filters into one merged filter plus residues.

    Filters are merged pairwise from left to right. Residues collected along
    the way are merged the same way, recursively, so the result holds the
    smallest set of clauses that could not be reconciled.

    Args:
        expressions: Filters to merge

    Returns:
        List whose first entry is the merged filter, followed by residues.
        Empty and single-entry inputs are returned as a new list.
    """
    if len(expressions) <= 1:
        return list(expressions)

    merged = expressions[0]
    residues: list[Any] = []
    for expression in expressions[1:]:
        result = merge_filters(merged, expression)
        merged = result[0]
        if len(result) == 2:
            residues.append(result[1])

    residues = merge_many(residues)
    residues.insert(0, merged)

    logger.debug(
        f"[MERGE] Merged {len(expressions)} filters into 1 + {len(residues) - 1} residues"
    )
    return residues
