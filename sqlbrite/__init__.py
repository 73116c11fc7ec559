"""SQLBrite: convenience query methods over an SQLite connection.

    from sqlbrite import SQLBrite, SQLiteEngine

    db = SQLBrite(SQLiteEngine.open("app.db"))
    db.exec("UPDATE mytable SET col = 1 WHERE id = ?", [12])
    db.exec("UPDATE mytable SET col = 1 WHERE text = 'Where?'")

If a list of values follows the query, every ? in the query is replaced by
the quoted and escaped value. Pass no list (or None) to skip the replacement.
"""
from __future__ import annotations

from .engine import FAILURE, VOID, Engine, ResultHandle, SQLiteEngine
from .errors import (
    ChangeAssertionError,
    ErrorKind,
    ErrorReporter,
    LoggingReporter,
    NoRowsError,
    QueryError,
    RaisingReporter,
    SqlError,
    UsageError,
)
from .facade import SQLBrite
from .substitution import sql

__version__ = "0.1.0"

__all__ = [
    "SQLBrite",
    "SQLiteEngine",
    "Engine",
    "ResultHandle",
    "VOID",
    "FAILURE",
    "QueryError",
    "SqlError",
    "ChangeAssertionError",
    "NoRowsError",
    "UsageError",
    "ErrorKind",
    "ErrorReporter",
    "RaisingReporter",
    "LoggingReporter",
    "sql",
]
