from __future__ import annotations

# sqlbrite/facade.py
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from .engine import FAILURE, VOID, Engine
from .errors import (
    ChangeAssertionError,
    ErrorReporter,
    NoRowsError,
    QueryError,
    RaisingReporter,
    SqlError,
    UsageError,
)
from .substitution import sql as substitute

logger = logging.getLogger(__name__)

Params = Optional[Sequence[Any]]
Row = Dict[str, Any]


class SQLBrite:
    """Convenience query methods over an Engine.

    Every method takes the query and, optionally, a list of values for the
    ? placeholders in it (see `sql`). Failures are classified and passed to
    the reporter; the default reporter raises them.

    One instance owns one connection. Use it from one thread at a time.
    """

    def __init__(self, engine: Engine, reporter: Optional[ErrorReporter] = None):
        self.engine = engine
        self.reporter = reporter or RaisingReporter()
        self.closed = False

    def __enter__(self) -> "SQLBrite":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        # last resort only; callers close explicitly or use `with`
        if not getattr(self, "closed", True):
            self.close()

    # -------- substitution --------

    def sql(self, query: str, params: Params) -> str:
        """Return `query` with every ? replaced by the escaped, quoted value."""
        return substitute(query, params, self.engine.escape)

    def _prepare(self, query: str, params: Params) -> Optional[str]:
        if self.closed:
            self._error(UsageError(f'SQLite query "{query}" issued on a closed connection', query))
            return None
        try:
            s = self.sql(query, params)
        except UsageError as e:
            self._error(e)
            return None
        logger.debug(f"query: {s}")
        return s

    # -------- reporting --------

    def _error(self, error: QueryError) -> None:
        self.reporter.report(error)

    def _sqlerror(self, s: str) -> None:
        self._error(SqlError.for_query(s, self.engine.last_error_message()))

    # -------- result-less queries --------

    def exec(self, query: str, params: Params = None) -> None:
        """Execute a result-less query."""
        s = self._prepare(query, params)
        if s is None:
            return None
        r = self.engine.execute_statement(s)
        if r is FAILURE:
            self._sqlerror(s)
            return None
        if r is not VOID:
            # row-returning statement; nothing to hand back
            r.release()
        return None

    def exec_assert_change(self, query: str, params: Params, expected_no_rows: int) -> None:
        """Execute a result-less query and check the number of rows it changed.

        Reports an AssertionError if the engine's rows-changed counter differs
        from `expected_no_rows`, e.g. an UPDATE ... WHERE id=? that matched
        nothing.
        """
        s = self._prepare(query, params)
        if s is None:
            return None
        r = self.engine.execute_statement(s)
        if r is FAILURE:
            self._sqlerror(s)
            return None
        if r is not VOID:
            r.release()
        changed = self.engine.rows_changed()
        if changed != expected_no_rows:
            self._error(ChangeAssertionError.for_query(s, changed, expected_no_rows))
        return None

    # -------- single value / single row --------

    def _first_row(self, s: str) -> tuple[bool, Optional[Row]]:
        """(ok, first row or None). ok is False when the engine failed."""
        r = self.engine.execute_statement(s)
        if r is FAILURE:
            self._sqlerror(s)
            return False, None
        if r is VOID:
            return True, None
        try:
            e = r.next_row()
            if e is FAILURE:
                self._sqlerror(s)
                return False, None
            return True, e
        finally:
            r.release()

    def querysingle(self, query: str, params: Params = None) -> Any:
        """Value of the first column of the first row, or None if no row matched."""
        s = self._prepare(query, params)
        if s is None:
            return None
        _, row = self._first_row(s)
        if not row:
            return None
        return next(iter(row.values()))

    def querysingle_strict(self, query: str, params: Params = None) -> Any:
        """Like `querysingle`, but a query matching no rows is an error (NoRowsError)."""
        s = self._prepare(query, params)
        if s is None:
            return None
        ok, row = self._first_row(s)
        if not ok:
            return None
        if row is None:
            self._error(NoRowsError.for_query(s))
            return None
        return next(iter(row.values()))

    def querysinglerow(self, query: str, params: Params = None) -> Row:
        """First row as a dict keyed by column name; {} if no row matched."""
        s = self._prepare(query, params)
        if s is None:
            return {}
        _, row = self._first_row(s)
        return row or {}

    # -------- full result sets --------

    def _cursor(self, s: str):
        r = self.engine.execute_statement(s)
        if r is FAILURE:
            self._sqlerror(s)
            return None
        if r is VOID:
            self._error(UsageError.no_results(s))
            return None
        return r

    def fetchall(self, query: str, params: Params = None) -> List[Row]:
        """All rows, in engine order, as a list of dicts keyed by column name."""
        s = self._prepare(query, params)
        if s is None:
            return []
        r = self._cursor(s)
        if r is None:
            return []
        rows = []
        try:
            while True:
                e = r.next_row()
                if e is FAILURE:
                    self._sqlerror(s)
                    return []
                if e is None:
                    break
                rows.append(e)
        finally:
            r.release()
        return rows

    def query_callback(self, query: str, params: Params, callback: Callable[[Row], Any]) -> int:
        """Call `callback` with each row (a dict keyed by column name).

        Return False from the callback to stop looping. Returns the number of
        rows handed to the callback.
        """
        s = self._prepare(query, params)
        if s is None:
            return 0
        r = self._cursor(s)
        if r is None:
            return 0
        n = 0
        try:
            while True:
                e = r.next_row()
                if e is FAILURE:
                    self._sqlerror(s)
                    break
                if e is None:
                    break
                n += 1
                if callback(e) is False:
                    break
        finally:
            r.release()
        return n

    # -------- lifecycle --------

    def close(self) -> bool:
        """Close the database connection. Returns True on success."""
        if self.closed:
            return True
        self.closed = True
        ok = self.engine.close_connection()
        if not ok:
            logger.warning(f"close failed: {self.engine.last_error_message()}")
        return ok
