from __future__ import annotations

from typing import Any


class QueryError(Exception):
    """Base class for map-reduce query errors."""


class BadQueryTerm(QueryError):
    reason = "bad_qterm"

    def __init__(self, term: Any) -> None:
        super().__init__(f"bad_qterm: {term!r}")
        self.term = term


class FetchError(QueryError):
    def __init__(self, bucket: Any, key: Any, message: str = "bad_fetch") -> None:
        super().__init__(f"{message}: {bucket!r}/{key!r}")
        self.bucket = bucket
        self.key = key


class CompilationError(QueryError):
    def __init__(self, source: Any, message: str) -> None:
        super().__init__(message)
        self.source = source


class QuerySpecError(QueryError, ValueError):
    """Raised when a JSON query cannot be turned into query terms."""

    def __init__(self, message: str, phase: Any = None) -> None:
        super().__init__(message)
        self.phase = phase
