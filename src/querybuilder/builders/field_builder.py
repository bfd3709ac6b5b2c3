"""
Field Query Builder: constraints on a single document field.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..exceptions import InvalidArgumentError
from ..utils.data import is_valid_str

if TYPE_CHECKING:
    from .query_builder import QueryBuilder


class FieldQueryBuilder:
    """
    Creates efficient constraints for one document field.

    Every method returns the parent builder; use ``and_field()`` on it to
    keep adding to the same field.
    """

    def __init__(self, parent: QueryBuilder, field: str):
        if not is_valid_str(field):
            raise InvalidArgumentError("field", field)
        self._parent = parent
        self.field = field

    def is_(self, comparator: str, value: Any) -> QueryBuilder:
        """
        Compare the field with the value.

        Args:
            comparator: e.g. "$gt", "$gte", "$ne"
            value: Operand of the comparator
        """
        return self._parent._compare(self.field, comparator, value)

    def matches(self, value: Any) -> QueryBuilder:
        """Match the value. Same as ``matches_all([value])``."""
        return self._parent._matches_all(self.field, [value])

    def matches_all(self, values: Iterable[Any]) -> QueryBuilder:
        """Match all the values."""
        return self._parent._matches_all(self.field, values)

    def matches_any(
        self, values: Iterable[Any], add_to_existing_or: bool = False
    ) -> QueryBuilder:
        """
        Match at least one of the values.

        Args:
            values: Candidate values
            add_to_existing_or: If True, add to the field's existing ``$in``
                list, if any
        """
        return self._parent._matches_any(self.field, values, add_to_existing_or)
