"""Tests for the search query builder."""

import re

import pytest
from bson.regex import Regex

from querybuilder.builders import QueryBuilder, SearchQueryBuilder
from querybuilder.config import Settings
from querybuilder.search.regex_compiler import WORD_START_PREFIX

MONGO_ALL = f"(?=.*{WORD_START_PREFIX}mongo)"
MONGO_ANY = f"({WORD_START_PREFIX}mongo)"


@pytest.fixture
def builder(settings):
    return QueryBuilder(settings=settings)


def _regex_of(clause: dict) -> str:
    return clause["$regex"].pattern


class TestMatchAllFields:
    """Every field must match."""

    def test_in_uses_all_tokens_regex(self, builder):
        """in_() puts the all-tokens regex on every field."""
        query = builder.search("mongo").in_("title", "body").build()
        assert set(query) == {"title", "body"}
        assert _regex_of(query["title"]) == MONGO_ALL
        assert _regex_of(query["body"]) == MONGO_ALL

    def test_any_in_uses_any_token_regex(self, builder):
        """any_in() uses the any-token regex."""
        query = builder.search("mongo").any_in("title").build()
        assert _regex_of(query["title"]) == MONGO_ANY

    def test_regex_is_case_insensitive(self, builder):
        """Search regexes ignore case."""
        query = builder.search("mongo").in_("title").build()
        regex = query["title"]["$regex"]
        assert isinstance(regex, re.Pattern)
        assert regex.search("Intro to MongoDB")


class TestMatchAnyField:
    """At least one field must match."""

    def test_in_any_builds_or_group(self, builder):
        """in_any() ORs the fields together."""
        query = builder.search("mongo").in_any("title", "body").build()
        assert list(query) == ["$or"]
        assert [list(clause) for clause in query["$or"]] == [["title"], ["body"]]
        assert _regex_of(query["$or"][0]["title"]) == MONGO_ALL
        assert _regex_of(query["$or"][1]["body"]) == MONGO_ALL

    def test_any_in_any(self, builder):
        """any_in_any() ORs the fields with the any-token regex."""
        query = builder.search("mongo").any_in_any("title", "body").build()
        assert _regex_of(query["$or"][0]["title"]) == MONGO_ANY
        assert _regex_of(query["$or"][1]["body"]) == MONGO_ANY

    def test_single_field_is_plain_and(self, builder):
        """in_any() with one field needs no $or."""
        query = builder.search("mongo").in_any("title").build()
        assert _regex_of(query["title"]) == MONGO_ALL


class TestEmptySearch:
    """A search string without tokens adds nothing."""

    @pytest.mark.parametrize("query_str", ["", "   ", None])
    def test_tree_unchanged(self, builder, query_str):
        """Searches without tokens add nothing."""
        builder.field("a").matches(1)
        search = builder.search(query_str)
        assert search.pattern is None
        search.in_("title")
        search.any_in("title")
        search.in_any("title", "body")
        search.any_in_any("title", "body")
        assert builder.build() == {"a": 1}


class TestChaining:
    """Test and_search() and combination with other clauses."""

    def test_and_search_returns_last_search(self, builder):
        """and_search() continues the last search."""
        search = builder.search("mongo")
        assert isinstance(search, SearchQueryBuilder)
        assert builder.and_search() is search

    def test_and_search_continues_with_more_fields(self, builder):
        """and_search() applies the same search to more fields."""
        query = builder.search("mongo").in_("title").and_search().any_in("body").build()
        assert _regex_of(query["title"]) == MONGO_ALL
        assert _regex_of(query["body"]) == MONGO_ANY

    def test_two_searches_on_one_field(self, builder):
        """Two different regexes on one field are both kept."""
        builder.search("alpha", match_within_words=True).in_("title")
        query = builder.search("beta", match_within_words=True).in_("title").build()
        assert _regex_of(query["title"]) == "(?=.*alpha)"
        assert len(query["$and"]) == 1
        assert _regex_of(query["$and"][0]["title"]) == "(?=.*beta)"


class TestSearchSettings:
    """Settings control search defaults and regex output."""

    def test_match_within_words_default(self):
        """The settings decide the default word matching."""
        builder = QueryBuilder(settings=Settings(_env_file=None, match_within_words=True))
        query = builder.search("mongo").in_("title").build()
        assert _regex_of(query["title"]) == "(?=.*mongo)"

    def test_explicit_argument_overrides_default(self):
        """An explicit argument wins over the settings."""
        builder = QueryBuilder(settings=Settings(_env_file=None, match_within_words=True))
        query = builder.search("mongo", match_within_words=False).in_("title").build()
        assert _regex_of(query["title"]) == MONGO_ALL

    def test_bson_regex_output(self):
        """bson_regex switches the operand to bson.regex.Regex."""
        builder = QueryBuilder(settings=Settings(_env_file=None, bson_regex=True))
        query = builder.search("mongo").any_in("title").build()
        regex = query["title"]["$regex"]
        assert isinstance(regex, Regex)
        assert regex.pattern == MONGO_ANY
        assert regex.flags == re.IGNORECASE
