"""
Filter composition core: classification, merging and folding of filters.
"""

from .composition import FilterComposer
from .expression import ExpressionKind, kind_of
from .merge import merge_filters, merge_many

__all__ = [
    "ExpressionKind",
    "FilterComposer",
    "kind_of",
    "merge_filters",
    "merge_many",
]
