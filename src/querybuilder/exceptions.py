"""
Exceptions raised by the query builder.

Both errors are caller contract violations. They are raised synchronously and
leave the filter under construction as it was before the failing call.
"""

from __future__ import annotations

import json
from typing import Any


class QueryBuilderError(Exception):
    """Base class for all query builder errors."""


class InvalidArgumentError(QueryBuilderError, ValueError):
    """A field or comparator name was not a non-empty string."""

    def __init__(self, kind: str, value: Any):
        self.kind = kind
        self.value = value
        super().__init__(
            f"Invalid {kind}, should be a non-empty string: {_describe(value)}"
        )


class IllegalStateError(QueryBuilderError, RuntimeError):
    """A continuation call was made before its initiating call."""

    def __init__(self, method: str, required: str):
        self.method = method
        self.required = required
        super().__init__(
            f"Illegal {method}() call: should be called only after {required}() was called!"
        )


def _describe(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
