from __future__ import annotations

# sqlbrite/substitution.py
import re
from typing import Any, Callable, Optional, Sequence

from .errors import UsageError

PLACEHOLDER = "?"
_SPLIT_RE = re.compile(r"(\?)")


def count_placeholders(query: str) -> int:
    return query.count(PLACEHOLDER)


def sql(query: str, params: Optional[Sequence[Any]], escape: Callable[[Any], str]) -> str:
    """Replace every ? in `query` with the matching value, escaped and quoted.

        sql("SELECT * FROM mytable WHERE id = ?", [12], escape)
        -> "SELECT * FROM mytable WHERE id = '12'"

    `params=None` skips the replacement and returns the query untouched.
    A ? inside a string literal counts as a placeholder too; write such
    queries without params, or pass the literal as a parameter.
    """
    if params is None:
        return query
    values = list(params)
    need = count_placeholders(query)
    if need > len(values):
        raise UsageError(
            f'SQLite query "{query}" has {need} placeholders but {len(values)} values were given',
            query,
        )
    out = []
    i = 0
    for part in _SPLIT_RE.split(query):
        if part == PLACEHOLDER:
            out.append("'" + escape(values[i]) + "'")
            i += 1
        else:
            out.append(part)
    return "".join(out)
