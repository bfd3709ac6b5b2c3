"""
Chaining Query Builder.

The query builder creates efficient MongoDB filters from chained calls:

    query = (
        QueryBuilder()
        .field("status").matches("published")
        .field("views").is_("$gte", 100)
        .search("mongo* \"vector search\"").in_("title", "body")
        .build()
    )

OR groups are started with ``either()`` and continued with ``or_()``:

    builder = QueryBuilder()
    builder.either().field("author").matches("shyam").or_().field("editor").matches("shyam")
    builder.build()
    -> {"$or": [{"author": "shyam"}, {"editor": "shyam"}]}

When OR groups are used, the final filter must always be obtained from the
root builder's ``build()``, which flushes the pending group.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from ..config.settings import Settings, get_settings
from ..core.composition import FilterComposer
from ..exceptions import IllegalStateError
from ..utils.data import array_contains_value
from .field_builder import FieldQueryBuilder
from .search_builder import SearchQueryBuilder

logger = logging.getLogger("querybuilder.builders")


class OrGroupState(str, Enum):
    """Whether a builder has an OR group collecting alternatives."""

    IDLE = "idle"
    ACTIVE = "active"


class QueryBuilder:
    """
    Builds a filter through field, search and OR-group sub-builders.

    All calls are ANDed by default.
    """

    def __init__(
        self,
        q: Mapping[str, Any] | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the builder.

        Args:
            q: Optional existing filter to start from
            settings: Settings override (defaults to ``get_settings()``)
        """
        self.settings = settings or get_settings()
        self._composer = FilterComposer(q)
        self._last_search: SearchQueryBuilder | None = None
        self._last_field: FieldQueryBuilder | None = None
        self._or_group: OrQueryBuilder | None = None
        self._or_state = OrGroupState.IDLE

    @property
    def or_state(self) -> OrGroupState:
        return self._or_state

    # Primitives used by the sub-builders

    def _matches_all(self, field: str, values: Iterable[Any]) -> QueryBuilder:
        self._composer.matches_all(field, values)
        return self

    def _matches_any(
        self, field: str, values: Iterable[Any], add_to_existing_or: bool = False
    ) -> QueryBuilder:
        self._composer.matches_any(field, values, add_to_existing_or)
        return self

    def _compare(self, field: str, comparator: str, value: Any) -> QueryBuilder:
        self._composer.compare(field, comparator, value)
        return self

    # Chaining API

    def and_(self) -> QueryBuilder:
        """
        All other calls are ANDed already, so this only improves the
        readability of complex queries.
        """
        return self

    def search(
        self, query: str, match_within_words: bool | None = None
    ) -> SearchQueryBuilder:
        """
        Start a search over document fields using a search string.

        Args:
            query: One or more space separated tokens
            match_within_words: If True, tokens match anywhere. Defaults to
                ``settings.match_within_words`` (word beginnings only).

        Returns:
            A new SearchQueryBuilder
        """
        if match_within_words is None:
            match_within_words = self.settings.match_within_words
        self._last_search = SearchQueryBuilder(
            self, query, match_within_words, settings=self.settings
        )
        return self._last_search

    def and_search(self) -> SearchQueryBuilder:
        """
        Continue with the SearchQueryBuilder of the last ``search()`` call.

        Raises:
            IllegalStateError: If ``search()`` was never called
        """
        if self._last_search is None:
            raise IllegalStateError("and_search", "search")
        return self._last_search

    def field(self, field: str) -> FieldQueryBuilder:
        """
        Start building constraints for a document field.

        Raises:
            InvalidArgumentError: If field is not a non-empty string
        """
        self._last_field = FieldQueryBuilder(self, field)
        return self._last_field

    def and_field(self) -> FieldQueryBuilder:
        """
        Continue with the FieldQueryBuilder of the last ``field()`` call.

        Raises:
            IllegalStateError: If ``field()`` was never called
        """
        if self._last_field is None:
            raise IllegalStateError("and_field", "field")
        return self._last_field

    def either(self) -> ChildQueryBuilder:
        """
        Start an OR group. A group already in progress is applied first, so
        consecutive groups are ANDed with each other.

        Returns:
            The first ChildQueryBuilder of the new group
        """
        if self._or_state is OrGroupState.ACTIVE:
            self.build()
        self._or_group = OrQueryBuilder(settings=self.settings)
        self._or_state = OrGroupState.ACTIVE
        logger.debug("[OR_GROUP] Started OR group")
        return self._or_group.or_()

    def build(self) -> dict[str, Any]:
        """
        Return the filter built so far, applying any pending OR group.
        """
        if self._or_state is OrGroupState.ACTIVE and self._or_group is not None:
            group = self._or_group
            self._or_group = None
            self._or_state = OrGroupState.IDLE
            alternatives = group.flush()
            logger.debug(f"[OR_GROUP] Applying OR group with {len(alternatives)} alternatives")
            self._composer.or_fold(alternatives)
        return self._composer.filter


class OrQueryBuilder:
    """
    Collects the alternatives of one OR group.

    Each alternative is built by its own ChildQueryBuilder; empty and
    duplicate alternatives are dropped.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._queries: list[dict[str, Any]] = []
        self._current = ChildQueryBuilder(self, settings=settings)

    def or_(self) -> ChildQueryBuilder:
        """
        Close the current alternative and continue the group.

        Returns:
            The ChildQueryBuilder for the next alternative
        """
        self.flush()
        return self._current

    def flush(self) -> list[dict[str, Any]]:
        """
        Close the current alternative, if non-empty.

        Returns:
            The alternatives collected so far
        """
        q = self._current.build()
        if q:
            if not array_contains_value(self._queries, q):
                self._queries.append(q)
            self._current = ChildQueryBuilder(self, settings=self._settings)
        return list(self._queries)


class ChildQueryBuilder(QueryBuilder):
    """A QueryBuilder for one alternative of an OR group."""

    def __init__(self, parent_or: OrQueryBuilder, settings: Settings | None = None):
        super().__init__(settings=settings)
        self._parent_or = parent_or

    def or_(self) -> ChildQueryBuilder:
        """
        Continue the OR group started with ``QueryBuilder.either()``.

        Returns:
            A new ChildQueryBuilder in this OR group
        """
        return self._parent_or.or_()
