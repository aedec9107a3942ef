"""SQLite adapter - stdlib sqlite3."""

from __future__ import annotations

import sqlite3
import time
from typing import Any

from row_orm.core.connection import ConnectionConfig

# Number of SQLite VM instructions between timeout checks
_PROGRESS_STEPS = 1000


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3.

    Statement timeouts are enforced with a progress handler that aborts the
    running statement once its deadline passes; SQLite then raises
    ``sqlite3.OperationalError: interrupted``.
    """

    @property
    def paramstyle(self) -> str:
        return "qmark"

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        return (sqlite3.Error,)

    def is_timeout(self, error: BaseException) -> bool:
        return isinstance(error, sqlite3.OperationalError) and "interrupted" in str(error)

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        return sqlite3.connect(config.database, **config.extra)

    def close(self, connection: sqlite3.Connection) -> None:
        connection.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        # The handler is per connection: it also bounds cursors the caller
        # runs directly until clear_timeout is called
        if timeout:
            deadline = time.monotonic() + timeout
            connection.set_progress_handler(
                lambda: int(time.monotonic() > deadline), _PROGRESS_STEPS
            )
        else:
            connection.set_progress_handler(None, 0)
        return connection.execute(sql, params)

    def clear_timeout(self, connection: sqlite3.Connection) -> None:
        connection.set_progress_handler(None, 0)

    def last_insert_id(self, connection: sqlite3.Connection, cursor: sqlite3.Cursor) -> Any:
        return cursor.lastrowid

    def commit(self, connection: sqlite3.Connection) -> None:
        connection.commit()
