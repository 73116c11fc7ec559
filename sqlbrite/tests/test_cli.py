import json

from sqlbrite.cli import main


def _out(capsys):
    cap = capsys.readouterr()
    return cap.out.strip(), cap.err.strip()


def test_all_with_params(seeded, capsys):
    rc = main(["--db", seeded, "all", "SELECT id, name FROM item WHERE qty > ? ORDER BY id", "-p", "1"])
    out, _ = _out(capsys)
    assert rc == 0
    assert json.loads(out) == [{"id": 1, "name": "apple"}, {"id": 3, "name": "plum"}]


def test_exec_then_single(seeded, capsys):
    assert main(["--db", seeded, "exec", "UPDATE item SET name=? WHERE id=?", "-p", "O'Hara", "-p", "2"]) == 0
    _out(capsys)
    assert main(["--db", seeded, "single", "SELECT name FROM item WHERE id = 2"]) == 0
    out, _ = _out(capsys)
    assert json.loads(out) == "O'Hara"


def test_row_and_missing_row(seeded, capsys):
    main(["--db", seeded, "row", "SELECT id, qty FROM item WHERE id = ?", "-p", "3"])
    out, _ = _out(capsys)
    assert json.loads(out) == {"id": 3, "qty": 7}
    main(["--db", seeded, "row", "SELECT id FROM item WHERE id = ?", "-p", "42"])
    out, _ = _out(capsys)
    assert json.loads(out) == {}


def test_raw_keeps_question_mark(seeded, capsys):
    rc = main(["--db", seeded, "single", "SELECT 'Where?'", "--raw"])
    out, _ = _out(capsys)
    assert rc == 0
    assert json.loads(out) == "Where?"


def test_classified_errors_exit_1(seeded, capsys):
    rc = main(["--db", seeded, "single-strict", "SELECT id FROM item WHERE id = ?", "-p", "42"])
    _, err = _out(capsys)
    assert rc == 1
    assert err.startswith("NoRowsError: ")

    rc = main(["--db", seeded, "assert-change", "DELETE FROM item WHERE id = ?", "-p", "42", "--expected", "1"])
    _, err = _out(capsys)
    assert rc == 1
    assert err.startswith("AssertionError: ")

    rc = main(["--db", seeded, "all", "DELETE FROM item WHERE id = 1"])
    _, err = _out(capsys)
    assert rc == 1
    assert err.startswith("UsageError: ")


def test_logs_command_empty(seeded, capsys):
    assert main(["--db", seeded, "logs"]) == 0
    out, _ = _out(capsys)
    assert json.loads(out) == {"total": 0, "items": []}
