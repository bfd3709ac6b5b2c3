"""
Filter Composition Engine.

Owns a growing filter and folds new clauses into it under AND or OR
semantics, keeping the result deduplicated and as flat as the merge engine
allows.

Example:
    composer = FilterComposer()
    composer.compare("age", "$gt", 18).compare("age", "$lt", 65)
    composer.matches_any("city", ["Pune", "Delhi"])
    composer.filter
    -> {"age": {"$gt": 18, "$lt": 65}, "city": {"$in": ["Pune", "Delhi"]}}
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..exceptions import InvalidArgumentError
from ..utils.data import array_contains_value, is_json, is_valid_str, unique_values
from .expression import AND_KEY, IN_KEY, OR_KEY
from .merge import merge_many

logger = logging.getLogger("querybuilder.composition")


class FilterComposer:
    """
    Mutable filter under construction.

    Every field primitive funnels into ``and_fold`` so that all clauses go
    through the same deduplication and merge path.
    """

    def __init__(self, q: Mapping[str, Any] | None = None):
        """
        Initialize the composer.

        Args:
            q: Optional existing filter to start from. It is deep-copied;
                anything that is not a mapping is ignored.
        """
        self._q: dict[str, Any] = copy.deepcopy(dict(q)) if is_json(q) else {}

    @property
    def filter(self) -> dict[str, Any]:
        """The filter built so far."""
        return self._q

    def is_empty(self) -> bool:
        return not self._q

    def and_fold(self, expressions: Iterable[Mapping[str, Any]]) -> None:
        """
        AND the expressions into the filter.

        The current filter, its existing ``$and`` entries and the new
        expressions are merged together. The merged result becomes the new
        filter and anything that could not be merged becomes its ``$and``.

        Args:
            expressions: Filters to AND with the current one
        """
        to_be_anded: list[Any] = []

        base = {key: value for key, value in self._q.items() if key != AND_KEY}
        if base:
            to_be_anded.append(base)

        for existing in self._q.get(AND_KEY, []):
            if not array_contains_value(to_be_anded, existing):
                to_be_anded.append(existing)

        for expression in expressions:
            if not array_contains_value(to_be_anded, expression):
                to_be_anded.append(expression)

        merged = merge_many(to_be_anded)
        if not merged:
            self._q = {}
            return

        q = dict(merged[0])
        if AND_KEY in q:
            q[AND_KEY] = list(q[AND_KEY])
        if len(merged) > 1:
            q[AND_KEY] = merged[1:]
        self._q = q

        logger.debug(f"[AND] Folded {len(to_be_anded)} clauses, {len(merged) - 1} kept in $and")

    def or_fold(self, expressions: Iterable[Mapping[str, Any]]) -> None:
        """
        OR the expressions together and AND the group into the filter.

        A single expression is plain AND. If the filter already holds an
        ``$or``, the old and the new groups are both moved into ``$and`` as
        separate ``{"$or": [...]}`` clauses.

        Args:
            expressions: Alternatives of the new OR group
        """
        expressions = list(expressions)
        if not expressions:
            return

        if len(expressions) == 1:
            self.and_fold(expressions)
            return

        if OR_KEY in self._q:
            existing = self._q.pop(OR_KEY)
            self._q[AND_KEY] = [
                *self._q.get(AND_KEY, []),
                {OR_KEY: existing},
                {OR_KEY: expressions},
            ]
            logger.debug("[OR] Existing $or group moved into $and with the new group")
        else:
            self._q[OR_KEY] = expressions
            logger.debug(f"[OR] Added $or group with {len(expressions)} alternatives")

    def matches_all(self, field: str, values: Iterable[Any]) -> FilterComposer:
        """
        Ensure that the field matches all the values.

        Args:
            field: A field in the target document
            values: Values (or operator mappings) the field must match

        Returns:
            This composer for further chaining
        """
        _check_field(field)

        queries = unique_values({field: value} for value in values)
        self.and_fold(queries)
        return self

    def matches_any(
        self,
        field: str,
        values: Iterable[Any],
        add_to_existing_or: bool = False,
    ) -> FilterComposer:
        """
        Ensure that the field matches at least one of the values.

        Args:
            field: A field in the target document
            values: Candidate values
            add_to_existing_or: If True, the values are added to the field's
                existing ``$in`` list, if any

        Returns:
            This composer for further chaining
        """
        _check_field(field)

        values = list(values)
        if len(values) == 1 and not add_to_existing_or:
            return self.matches_all(field, values)

        existing_values: list[Any] = []
        current = self._q.get(field)
        if add_to_existing_or and is_json(current) and IN_KEY in current:
            existing_values = list(current[IN_KEY])
            # the $in list is collated and applied again below
            if len(current) == 1:
                del self._q[field]
            else:
                self._q[field] = {k: v for k, v in current.items() if k != IN_KEY}

        for value in values:
            if not array_contains_value(existing_values, value):
                existing_values.append(value)

        if existing_values:
            self.compare(field, IN_KEY, existing_values)
        return self

    def compare(self, field: str, operator: str, value: Any) -> FilterComposer:
        """
        Ensure the comparison of the field with the value.

        Args:
            field: A field in the target document
            operator: Comparator, e.g. "$gt", "$gte", "$regex"
            value: Operand of the comparator

        Returns:
            This composer for further chaining

        Raises:
            InvalidArgumentError: If field or operator is not a non-empty string
        """
        _check_field(field)
        if not is_valid_str(operator):
            raise InvalidArgumentError("comparator", operator)

        return self.matches_all(field, [{operator: value}])


def _check_field(field: Any) -> None:
    if not is_valid_str(field):
        raise InvalidArgumentError("field", field)
