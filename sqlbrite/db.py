from __future__ import annotations

# sqlbrite/db.py
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .config import _PROJECT_ROOT, Settings, load_settings
from .engine import SQLiteEngine
from .errors import ErrorReporter, RaisingReporter
from .facade import SQLBrite

# DB path resolution order:
# 1) SQLBRITE_DB_PATH environment variable (highest priority)
# 2) test_db_path from config.yaml (when running under tests)
# 3) db_path from config.yaml
# 4) fallback: sqlbrite.db in the project root
_ROOT_DB = os.path.join(_PROJECT_ROOT, "sqlbrite.db")


def _is_test() -> bool:
    return (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)


def get_db_path(settings: Settings | None = None) -> str:
    env_path = os.environ.get("SQLBRITE_DB_PATH")
    cfg = settings or load_settings()

    if env_path:
        path = env_path
    elif _is_test() and cfg.test_db_path:
        path = cfg.test_db_path
    elif cfg.db_path:
        path = cfg.db_path
    else:
        path = _ROOT_DB

    # make sure the directory exists
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Raw SQLite connection. Uses db_path when given, otherwise get_db_path().
    Foreign keys on, rows as sqlite3.Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def default_reporter(settings: Settings | None = None, db_path: str | None = None) -> ErrorReporter:
    """Failure policy from config; the failure log defaults to the database being queried."""
    cfg = settings or load_settings()
    if cfg.log_failures:
        from .logs import RecordingReporter

        return RecordingReporter(cfg.error_log_path or db_path)
    return RaisingReporter()


@contextmanager
def open_db(db_path: str | None = None, reporter: ErrorReporter | None = None) -> Iterator[SQLBrite]:
    """SQLBrite over a fresh connection, closed when the block exits."""
    cfg = load_settings()
    path = db_path or get_db_path(cfg)
    db = SQLBrite(SQLiteEngine.open(path), reporter or default_reporter(cfg, path))
    try:
        yield db
    finally:
        db.close()
