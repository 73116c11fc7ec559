import os
import sqlite3
import pytest

SCHEMA = """
CREATE TABLE IF NOT EXISTS item (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  qty INTEGER NOT NULL DEFAULT 0,
  note TEXT
);
"""


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "sqlbrite_test.db"
    # Point the package at this temp DB
    os.environ["SQLBRITE_DB_PATH"] = str(path)
    os.environ["SQLBRITE_CONFIG"] = str(path.parent / "config.yaml")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: only ever wipe the temp DB
    assert os.environ.get("SQLBRITE_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("item", "query_error_log"):
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                pass
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def seeded(tmp_db_path):
    conn = sqlite3.connect(tmp_db_path)
    try:
        conn.executemany(
            "INSERT INTO item(id, name, qty) VALUES(?,?,?)",
            [(1, "apple", 3), (2, "pear", 0), (3, "plum", 7)],
        )
        conn.commit()
    finally:
        conn.close()
    return tmp_db_path


@pytest.fixture()
def db(seeded):
    from sqlbrite.db import open_db
    from sqlbrite.errors import RaisingReporter

    with open_db(seeded, reporter=RaisingReporter()) as d:
        yield d
