"""
Chaining filter builders.

- QueryBuilder: root builder, ANDs everything by default
- FieldQueryBuilder: constraints on one field
- SearchQueryBuilder: regex search of a search string over fields
- OrQueryBuilder / ChildQueryBuilder: OR groups started with either()
"""

from .field_builder import FieldQueryBuilder
from .query_builder import ChildQueryBuilder, OrGroupState, OrQueryBuilder, QueryBuilder
from .search_builder import SearchQueryBuilder

__all__ = [
    "ChildQueryBuilder",
    "FieldQueryBuilder",
    "OrGroupState",
    "OrQueryBuilder",
    "QueryBuilder",
    "SearchQueryBuilder",
]
