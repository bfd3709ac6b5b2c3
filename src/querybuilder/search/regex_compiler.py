"""
Search Query to Regex Compiler.

Parses a search string into space separated tokens, ``*`` wildcards and
double-quoted exact phrases, and compiles them into two case-insensitive
regular expressions usable as ``$regex`` operands.

For example, the string:

    hello wor*d I am "Shyam Dasgupta"

yields the token patterns:

    hello, wor[A-Za-z0-9_-]*d, I, am, Shyam Dasgupta

each prefixed with a word-beginning anchor. The token "pot" then matches
"Potter" and "#pottery" but not "teapot". With ``match_within_words=True``
the anchor is left out and all three match.

MongoDB does not support ``\\b``, so the anchor is spelled out as "start of
string or a run of characters that are not letters, digits or apostrophes".
Special characters like ``#`` are therefore skipped when locating the
beginning of a word.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Final

from bson.regex import Regex

from ..utils.data import is_valid_str

logger = logging.getLogger("querybuilder.search")

# Splits a query into whitespace-free runs and double-quoted phrases
TOKENIZE_REGEX: Final = re.compile(r'(?:[^\s"]+|"[^"]*")+')

# Regex metacharacters escaped in tokens; * is kept for wildcards
_SPECIAL_CHARS_REGEX: Final = re.compile(r"([\\^$.|?+()\[{])")
_SURROUNDING_QUOTES_REGEX: Final = re.compile(r'^"|"$')

WILDCARD_PATTERN: Final = "[A-Za-z0-9_-]*"
WORD_START_PREFIX: Final = "(^|[^a-zA-Z0-9']+)"


@dataclass(frozen=True)
class SearchPattern:
    """
    Compiled search query.

    Attributes:
        all: Matches subjects containing every token
        any: Matches subjects containing at least one token
        tokens: Deduplicated token patterns the regexes are built from
    """

    all: re.Pattern[str]
    any: re.Pattern[str]
    tokens: tuple[str, ...]

    def select(self, match_any_token: bool = False) -> re.Pattern[str]:
        """Return the ``any`` regex if match_any_token, else ``all``."""
        return self.any if match_any_token else self.all

    def to_bson(self, match_any_token: bool = False) -> Regex:
        """Return the selected regex as a BSON regex with the ``i`` flag."""
        return Regex(self.select(match_any_token).pattern, "i")


def tokenize(query: Any) -> list[str]:
    """
    Split a search string into tokens.

    Args:
        query: Search string

    Returns:
        Tokens, double-quoted phrases keeping their quotes. Non-strings and
        blank strings give no tokens.
    """
    if not is_valid_str(query):
        return []
    return TOKENIZE_REGEX.findall(query.strip())


def compile_token(
    raw: str,
    match_within_words: bool = False,
    wildcard_pattern: str = WILDCARD_PATTERN,
    word_start_prefix: str = WORD_START_PREFIX,
) -> str | None:
    """
    Turn one token into a regex pattern string.

    Args:
        raw: Token as returned by ``tokenize``
        match_within_words: If True, the token may match anywhere
        wildcard_pattern: Pattern substituted for each ``*``
        word_start_prefix: Anchor prepended unless match_within_words

    Returns:
        The token pattern, or None if nothing is left after trimming quotes
    """
    pattern = _SURROUNDING_QUOTES_REGEX.sub("", raw.strip())
    pattern = _SPECIAL_CHARS_REGEX.sub(r"\\\1", pattern)
    pattern = pattern.replace("*", wildcard_pattern)
    if not pattern:
        return None
    if not match_within_words:
        pattern = word_start_prefix + pattern
    return pattern


def search_query_to_regexps(
    query: Any,
    match_within_words: bool = False,
    wildcard_pattern: str = WILDCARD_PATTERN,
    word_start_prefix: str = WORD_START_PREFIX,
) -> SearchPattern | None:
    """
    Compile a search string into ``all`` and ``any`` regular expressions.

    Args:
        query: Search string with space separated tokens
        match_within_words: If True, tokens match anywhere. By default they
            only match at word beginnings.
        wildcard_pattern: Pattern substituted for each ``*``
        word_start_prefix: Word-beginning anchor

    Returns:
        SearchPattern, or None if the query has no tokens
    """
    patterns: list[str] = []
    for token in tokenize(query):
        pattern = compile_token(
            token,
            match_within_words=match_within_words,
            wildcard_pattern=wildcard_pattern,
            word_start_prefix=word_start_prefix,
        )
        if pattern and pattern not in patterns:
            patterns.append(pattern)

    if not patterns:
        logger.debug(f"[SEARCH] No tokens in query {query!r}")
        return None

    logger.debug(f"[SEARCH] Compiled {len(patterns)} token patterns from {query!r}")
    return SearchPattern(
        all=re.compile("(?=.*" + ")(?=.*".join(patterns) + ")", re.IGNORECASE),
        any=re.compile("(" + ")|(".join(patterns) + ")", re.IGNORECASE),
        tokens=tuple(patterns),
    )
