"""
Search query tokenizer and regex compiler.
"""

from .regex_compiler import (
    TOKENIZE_REGEX,
    WILDCARD_PATTERN,
    WORD_START_PREFIX,
    SearchPattern,
    compile_token,
    search_query_to_regexps,
    tokenize,
)

__all__ = [
    "TOKENIZE_REGEX",
    "WILDCARD_PATTERN",
    "WORD_START_PREFIX",
    "SearchPattern",
    "compile_token",
    "search_query_to_regexps",
    "tokenize",
]
