from __future__ import annotations

# sqlbrite/engine.py
import logging
import sqlite3
from typing import Any, Dict, Protocol, Union

logger = logging.getLogger(__name__)


class _Outcome:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


# Statement ran and produced no cursor (INSERT/UPDATE/DDL...).
VOID = _Outcome("VOID")
# Engine rejected or failed the statement; see last_error_message().
FAILURE = _Outcome("FAILURE")


class ResultHandle(Protocol):
    def next_row(self) -> Union[Dict[str, Any], None, _Outcome]: ...

    def release(self) -> None: ...


class Engine(Protocol):
    """What the façade needs from the database engine."""

    def execute_statement(self, text: str) -> Union[_Outcome, ResultHandle]: ...

    def escape(self, value: Any) -> str: ...

    def rows_changed(self) -> int: ...

    def last_error_message(self) -> str: ...

    def close_connection(self) -> bool: ...


class SQLiteResult:
    """Cursor over the rows of one statement; rows come back as dicts."""

    def __init__(self, cursor: sqlite3.Cursor, engine: "SQLiteEngine"):
        self._cursor = cursor
        self._engine = engine
        self._columns = [d[0] for d in cursor.description]
        self.released = 0

    def next_row(self) -> Union[Dict[str, Any], None, _Outcome]:
        """Next row, None at end of data, FAILURE if the engine failed mid-way."""
        if self.released:
            return None
        try:
            row = self._cursor.fetchone()
        except sqlite3.Error as e:
            self._engine._last_error = str(e)
            return FAILURE
        if row is None:
            return None
        return dict(zip(self._columns, row))

    def release(self) -> None:
        if not self.released:
            self._cursor.close()
        self.released += 1


class SQLiteEngine:
    """Engine capability over a stdlib sqlite3 connection (autocommit)."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._last_error = ""

    @classmethod
    def open(cls, path: str, foreign_keys: bool = True) -> "SQLiteEngine":
        conn = sqlite3.connect(
            path,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        if foreign_keys:
            conn.execute("PRAGMA foreign_keys = ON;")
        return cls(conn)

    def execute_statement(self, text: str) -> Union[_Outcome, SQLiteResult]:
        try:
            cur = self.conn.execute(text)
        except (sqlite3.Error, sqlite3.Warning) as e:
            self._last_error = str(e)
            return FAILURE
        if cur.description is None:
            cur.close()
            return VOID
        return SQLiteResult(cur, self)

    def escape(self, value: Any) -> str:
        if value is None:
            s = ""
        elif isinstance(value, bool):
            s = "1" if value else "0"
        elif isinstance(value, (bytes, bytearray)):
            s = bytes(value).decode("utf-8", errors="replace")
        else:
            s = str(value)
        return s.replace("'", "''")

    def rows_changed(self) -> int:
        return self.conn.execute("SELECT changes()").fetchone()[0]

    def last_error_message(self) -> str:
        return self._last_error

    def close_connection(self) -> bool:
        try:
            self.conn.close()
        except sqlite3.Error as e:
            self._last_error = str(e)
            logger.warning(f"Failed to close connection: {e}")
            return False
        return True
