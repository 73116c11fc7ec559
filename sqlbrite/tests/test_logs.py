"""
Failure log: RecordingReporter + search_logs
"""
import pytest

from sqlbrite.db import open_db
from sqlbrite.errors import NoRowsError, SqlError
from sqlbrite.logs import RecordingReporter, ensure_log_schema, record_failure, search_logs


class TestQueryErrorLog:

    @pytest.fixture(autouse=True)
    def _schema(self, tmp_db_path):
        ensure_log_schema()

    def test_record_and_search(self, tmp_db_path):
        record_failure(SqlError.for_query("SELECT x", "no such column: x"))
        record_failure(NoRowsError.for_query("SELECT 1 WHERE 0"))

        total, rows = search_logs(None, None, None, None, 1, 10)
        assert total == 2
        assert {r["kind"] for r in rows} == {"SqlError", "NoRowsError"}

        total, rows = search_logs("no such column", None, None, None, 1, 10)
        assert total == 1
        assert rows[0]["query"] == "SELECT x"
        assert rows[0]["detail"] == "no such column: x"

        total, rows = search_logs(None, "NoRowsError", None, None, 1, 10)
        assert total == 1 and rows[0]["detail"] is None

    def test_paging(self, tmp_db_path):
        for i in range(5):
            record_failure(SqlError.for_query(f"Q{i}", "bad"))
        total, rows = search_logs(None, None, None, None, 2, 2)
        assert total == 5
        assert len(rows) == 2

    def test_time_filter(self, tmp_db_path):
        record_failure(SqlError.for_query("Q", "bad"))
        total, _ = search_logs(None, None, "2000-01-01", None, 1, 10)
        assert total == 1
        total, _ = search_logs(None, None, None, "2000-01-01", 1, 10)
        assert total == 0

    def test_failures_logged_in_the_database_being_queried(self, monkeypatch, tmp_path, tmp_db_path):
        from sqlbrite import db as dbmod
        from sqlbrite.config import Settings

        monkeypatch.setattr(dbmod, "load_settings", lambda: Settings(log_failures=True))
        other = str(tmp_path / "other.db")
        with open_db(other) as db:
            assert db.fetchall("SELECT * FROM nosuch") == []

        total, rows = search_logs(None, None, None, None, 1, 10, other)
        assert total == 1
        assert rows[0]["query"] == "SELECT * FROM nosuch"
        # nothing went to the default database
        assert search_logs(None, None, None, None, 1, 10)[0] == 0

    def test_search_value_with_question_mark(self, tmp_db_path):
        record_failure(SqlError.for_query("SELECT 'Where?'", "bad"))
        total, rows = search_logs("Where?", None, None, None, 1, 10)
        assert total == 1

    def test_recording_reporter_keeps_going(self, seeded):
        rep = RecordingReporter()
        with open_db(seeded, reporter=rep) as db:
            assert db.fetchall("SELECT * FROM nosuch WHERE id = ?", [1]) == []
            assert db.querysingle_strict("SELECT id FROM item WHERE id = ?", [99]) is None
            # still usable afterwards
            assert db.querysingle("SELECT COUNT(*) FROM item") == 3

        total, rows = search_logs(None, None, None, None, 1, 10)
        assert total == 2
        queries = {r["query"] for r in rows}
        assert queries == {"SELECT * FROM nosuch WHERE id = '1'", "SELECT id FROM item WHERE id = '99'"}
