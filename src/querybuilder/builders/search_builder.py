"""
Search Query Builder: full-text style regex matching over document fields.

All matches are case-insensitive. See ``querybuilder.search.regex_compiler``
for how the search string is tokenized.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bson.regex import Regex

from ..config.settings import Settings, get_settings
from ..core.expression import REGEX_KEY
from ..search.regex_compiler import SearchPattern, search_query_to_regexps

if TYPE_CHECKING:
    import re

    from .query_builder import QueryBuilder


class SearchQueryBuilder:
    """
    Matches the tokens of one search string against document fields.

    If the search string has no tokens, none of the methods add anything.
    Every method returns the parent builder; use ``and_search()`` on it to
    match the same search string against more fields.
    """

    def __init__(
        self,
        parent: QueryBuilder,
        query: Any,
        match_within_words: bool = False,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self._parent = parent
        self._bson_regex = settings.bson_regex
        self.pattern: SearchPattern | None = search_query_to_regexps(
            query,
            match_within_words=match_within_words,
            wildcard_pattern=settings.wildcard_pattern,
            word_start_prefix=settings.word_start_prefix,
        )

    def _regex(self, match_any_token: bool) -> re.Pattern[str] | Regex | None:
        if self.pattern is None:
            return None
        if self._bson_regex:
            return self.pattern.to_bson(match_any_token)
        return self.pattern.select(match_any_token)

    def _match_all_fields(self, fields: tuple[str, ...], match_any_token: bool) -> QueryBuilder:
        regex = self._regex(match_any_token)
        if regex is not None:
            for field in fields:
                self._parent.field(field).is_(REGEX_KEY, regex)
        return self._parent

    def _match_any_field(self, fields: tuple[str, ...], match_any_token: bool) -> QueryBuilder:
        regex = self._regex(match_any_token)
        if regex is not None:
            or_builder = self._parent.either()
            for field in fields:
                or_builder = or_builder.or_().field(field).is_(REGEX_KEY, regex)
        return self._parent

    def in_(self, *fields: str) -> QueryBuilder:
        """Every field must contain all of the tokens."""
        return self._match_all_fields(fields, match_any_token=False)

    def any_in(self, *fields: str) -> QueryBuilder:
        """Every field must contain at least one of the tokens."""
        return self._match_all_fields(fields, match_any_token=True)

    def in_any(self, *fields: str) -> QueryBuilder:
        """At least one of the fields must contain all of the tokens."""
        return self._match_any_field(fields, match_any_token=False)

    def any_in_any(self, *fields: str) -> QueryBuilder:
        """At least one of the fields must contain at least one of the tokens."""
        return self._match_any_field(fields, match_any_token=True)
