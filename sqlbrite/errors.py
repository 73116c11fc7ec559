from __future__ import annotations

# sqlbrite/errors.py
import enum
import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    SQL_ERROR = "SqlError"
    ASSERTION_ERROR = "AssertionError"
    NO_ROWS = "NoRowsError"
    USAGE_ERROR = "UsageError"


class QueryError(Exception):
    """A classified failure of a façade call.

    `query` is the text that was (or would have been) submitted to the engine,
    `detail` carries the engine diagnostic where there is one.
    """

    kind: ErrorKind = ErrorKind.SQL_ERROR

    def __init__(self, message: str, query: str = "", detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.query = query
        self.detail = detail

    def __str__(self) -> str:
        return self.message


class SqlError(QueryError):
    kind = ErrorKind.SQL_ERROR

    @classmethod
    def for_query(cls, query: str, detail: str) -> "SqlError":
        return cls(f'SQLite error on query "{query}": "{detail}"', query, detail)


class ChangeAssertionError(QueryError):
    """Rows-changed counter did not match what the caller expected."""

    kind = ErrorKind.ASSERTION_ERROR

    def __init__(self, message: str, query: str = "", actual: int = 0, expected: int = 0):
        super().__init__(message, query)
        self.actual = actual
        self.expected = expected

    @classmethod
    def for_query(cls, query: str, actual: int, expected: int) -> "ChangeAssertionError":
        msg = f'SQLite query "{query}" changed "{actual}" rows instead of "{expected}"'
        return cls(msg, query, actual, expected)


class NoRowsError(QueryError):
    kind = ErrorKind.NO_ROWS

    @classmethod
    def for_query(cls, query: str) -> "NoRowsError":
        return cls(f'SQLite query "{query}" did not match any rows (querysingle_strict)', query)


class UsageError(QueryError):
    kind = ErrorKind.USAGE_ERROR

    @classmethod
    def no_results(cls, query: str) -> "UsageError":
        return cls(f'SQLite query "{query}" succeeded but was expected to return results.', query)


class ErrorReporter(Protocol):
    """Every classified failure passes through `report`.

    An implementation either raises (aborting the call) or returns, in which
    case the façade hands back the neutral result of the method.
    """

    def report(self, error: QueryError) -> None: ...


class RaisingReporter:
    def report(self, error: QueryError) -> None:
        raise error


class LoggingReporter:
    """Log-and-continue policy."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.ERROR):
        self.log = log or logger
        self.level = level
        self.reported: list[QueryError] = []

    def report(self, error: QueryError) -> None:
        self.reported.append(error)
        self.log.log(self.level, f"{error.kind.value}: {error.message}")
