"""SQL placeholder handling.

Statements are written with ``?`` positional placeholders. Drivers using the
``format`` paramstyle (psycopg, mysql-connector) get ``%s`` instead.
A ``?`` inside a string literal, a quoted identifier or a comment is not a
placeholder and is never rewritten.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

# Segments that cannot hold placeholders: 'string' literals ('' escapes included),
# "quoted" and `backquoted` identifiers, -- line and /* block */ comments
_OPAQUE_PATTERN = re.compile(
    r"'(?:[^']|'')*'"
    r'|"(?:[^"]|"")*"'
    r"|`[^`]*`"
    r"|--[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)


def _split_opaque(sql: str) -> list[tuple[bool, str]]:
    """Split *sql* into ``(is_opaque, text)`` segments."""
    parts: list[tuple[bool, str]] = []
    last_end = 0
    for match in _OPAQUE_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append((False, sql[last_end:start]))
        parts.append((True, match.group()))
        last_end = end
    if last_end < len(sql):
        parts.append((False, sql[last_end:]))
    return parts


@lru_cache(maxsize=256)
def count_placeholders(sql: str) -> int:
    """Number of ``?`` placeholders outside literals, quoted identifiers and comments."""
    return sum(text.count("?") for is_opaque, text in _split_opaque(sql) if not is_opaque)


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert ``?`` placeholders to the target param style.

    Args:
        sql: SQL string with ``?`` placeholders.
        paramstyle: Target style - 'qmark' (no conversion) or 'format' (%s).

    Returns:
        SQL with placeholders converted to the target style.
    """
    if paramstyle == "qmark":
        return sql
    return _convert_to_format(sql)


@lru_cache(maxsize=256)
def _convert_to_format(sql: str) -> str:
    """Convert ``?`` to ``%s`` and escape literal ``%`` as ``%%``."""
    parts: list[str] = []
    for is_opaque, text in _split_opaque(sql):
        text = text.replace("%", "%%")
        if not is_opaque:
            text = text.replace("?", "%s")
        parts.append(text)
    return "".join(parts)


def coerce_params(params: tuple[Any, ...] | list[Any] | Any) -> tuple[Any, ...]:
    """Normalize *params* to a tuple of positional bind values.

    * ``None`` → empty tuple.
    * ``tuple`` / ``list`` → ``tuple``.
    * Any other scalar → wrapped in a single-element tuple.
    """
    if params is None:
        return ()
    if isinstance(params, (tuple, list)):
        return tuple(params)
    return (params,)
