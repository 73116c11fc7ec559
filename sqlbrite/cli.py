#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SQLBrite command line

Commands:
  exec            Run a result-less statement
  assert-change   Run a result-less statement and check the rows it changed
  single          Print the first column of the first row (null if none)
  single-strict   Same, but no matching row is an error
  row             Print the first row as an object ({} if none)
  all             Print every row as a list of objects
  logs            Search the query failure log

Examples:
  sqlbrite --db app.db exec "UPDATE t SET x=? WHERE id=?" -p 5 -p 12
  sqlbrite --db app.db all "SELECT * FROM t WHERE name = ?" -p "O'Hara"
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import load_settings
from .db import get_db_path, open_db
from .errors import QueryError
from .logs import ensure_log_schema, search_logs

QUERY_COMMANDS = ("exec", "assert-change", "single", "single-strict", "row", "all")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sqlbrite", description="Run queries through SQLBrite")
    parser.add_argument("--db", help="SQLite database file; default from SQLBRITE_DB_PATH / config.yaml", default=None)
    parser.add_argument("--log-level", help="logging level (default from config.yaml)", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    for name in QUERY_COMMANDS:
        p = sub.add_parser(name)
        p.add_argument("query")
        p.add_argument("-p", "--param", action="append", dest="params",
                       help="value for the next ? placeholder (repeatable)")
        p.add_argument("--raw", action="store_true",
                       help="skip placeholder substitution even if -p is not given")
        if name == "assert-change":
            p.add_argument("--expected", type=int, required=True, help="expected number of changed rows")

    p = sub.add_parser("logs")
    p.add_argument("-q", help="text to search in query/message", default=None)
    p.add_argument("--kind", default=None, help="SqlError / AssertionError / NoRowsError / UsageError")
    p.add_argument("--from", dest="ts_from", default=None)
    p.add_argument("--to", dest="ts_to", default=None)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--size", type=int, default=50)
    return parser


def _params(args):
    # -p given -> substitute; otherwise the query is literal SQL
    if args.raw:
        return None
    return args.params


def run_query(args) -> object:
    with open_db(args.db) as db:
        params = _params(args)
        if args.command == "exec":
            db.exec(args.query, params)
            return {"message": "ok"}
        if args.command == "assert-change":
            db.exec_assert_change(args.query, params, args.expected)
            return {"message": "ok", "changed": args.expected}
        if args.command == "single":
            return db.querysingle(args.query, params)
        if args.command == "single-strict":
            return db.querysingle_strict(args.query, params)
        if args.command == "row":
            return db.querysinglerow(args.query, params)
        return db.fetchall(args.query, params)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "logs":
            path = settings.error_log_path or args.db or get_db_path(settings)
            ensure_log_schema(path)
            total, rows = search_logs(args.q, args.kind, args.ts_from, args.ts_to, args.page, args.size, path)
            out = {"total": total, "items": rows}
        else:
            out = run_query(args)
    except QueryError as e:
        print(f"{e.kind.value}: {e.message}", file=sys.stderr)
        return 1

    print(json.dumps(out, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
