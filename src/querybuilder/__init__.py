"""
querybuilder - Efficient MongoDB filters from chained calls.

This package builds minimal, deduplicated MongoDB filter documents:
- Field constraints merged into one predicate per field
- $in lists unioned instead of stacked
- Conflicting clauses kept apart in a single $and
- OR groups via either() / or_()
- Full-text style regex search with wildcards and exact phrases

Quick Start:
    ```python
    from querybuilder import QueryBuilder

    query = (
        QueryBuilder()
        .field("age").is_("$gt", 18)
        .and_field().is_("$lt", 65)
        .search('mongo* "vector search"').in_("title")
        .build()
    )
    collection.find(query)
    ```
"""

# Core exports
from .core import (
    ExpressionKind,
    FilterComposer,
    kind_of,
    merge_filters,
    merge_many,
)
from .config.settings import Settings, get_settings

# Builder exports
from .builders import (
    ChildQueryBuilder,
    FieldQueryBuilder,
    OrGroupState,
    OrQueryBuilder,
    QueryBuilder,
    SearchQueryBuilder,
)

# Search exports
from .search import SearchPattern, compile_token, search_query_to_regexps, tokenize

# Errors
from .exceptions import IllegalStateError, InvalidArgumentError, QueryBuilderError

__version__ = "0.1.0"
__all__ = [
    # Core
    "ExpressionKind",
    "FilterComposer",
    "kind_of",
    "merge_filters",
    "merge_many",
    # Config
    "Settings",
    "get_settings",
    # Builders
    "ChildQueryBuilder",
    "FieldQueryBuilder",
    "OrGroupState",
    "OrQueryBuilder",
    "QueryBuilder",
    "SearchQueryBuilder",
    # Search
    "SearchPattern",
    "compile_token",
    "search_query_to_regexps",
    "tokenize",
    # Errors
    "IllegalStateError",
    "InvalidArgumentError",
    "QueryBuilderError",
]
