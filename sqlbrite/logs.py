import datetime as dt
import logging
from typing import Optional

from .db import get_conn, open_db
from .errors import QueryError, RaisingReporter

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS query_error_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  kind TEXT NOT NULL,
  query TEXT,
  message TEXT NOT NULL,
  detail TEXT
);
CREATE INDEX IF NOT EXISTS idx_qlog_ts ON query_error_log(ts);
CREATE INDEX IF NOT EXISTS idx_qlog_kind ON query_error_log(kind);
"""


def ensure_log_schema(db_path: Optional[str] = None):
    with get_conn(db_path) as conn:
        conn.executescript(DDL)


def record_failure(error: QueryError, db_path: Optional[str] = None) -> int:
    rec = {
        "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
        "kind": error.kind.value,
        "query": error.query,
        "message": error.message,
        "detail": error.detail,
    }
    with get_conn(db_path) as conn:
        cur = conn.execute(
            """INSERT INTO query_error_log (ts,kind,query,message,detail)
            VALUES(:ts,:kind,:query,:message,:detail)""",
            rec,
        )
        return cur.lastrowid


class RecordingReporter:
    """Log-and-continue policy that also keeps failures in query_error_log.

    Uses its own connection, so the failing connection is never touched.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        ensure_log_schema(db_path)

    def report(self, error: QueryError) -> None:
        logger.error(f"{error.kind.value}: {error.message}")
        record_failure(error, self.db_path)


def search_logs(q: str|None, kind: str|None, ts_from: str|None, ts_to: str|None, page: int, size: int,
                db_path: Optional[str] = None):
    """(total, rows) of query_error_log, newest first, one page of `size` rows."""
    filters = []
    values = []
    if q:
        filters.append("(query LIKE ? OR message LIKE ?)")
        values += [f"%{q}%", f"%{q}%"]
    if kind:
        filters.append("kind = ?")
        values.append(kind)
    if ts_from:
        filters.append("ts >= ?")
        values.append(ts_from)
    if ts_to:
        filters.append("ts <= ?")
        values.append(ts_to)
    wh = " WHERE " + " AND ".join(filters) if filters else ""
    limit = max(int(size), 0)
    offset = max(int(page) - 1, 0) * limit
    with open_db(db_path, reporter=RaisingReporter()) as db:
        total = db.querysingle(f"SELECT COUNT(1) FROM query_error_log{wh}", values)
        rows = db.fetchall(
            f"SELECT * FROM query_error_log{wh} ORDER BY ts DESC, id DESC LIMIT {limit} OFFSET {offset}",
            values,
        )
    return total, rows
