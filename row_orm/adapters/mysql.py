"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_orm.core.connection import ConnectionConfig
from row_orm.core.params import normalize_params

# "Query execution was interrupted, maximum statement execution time exceeded"
_ER_QUERY_TIMEOUT = 3024


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python.

    Timeouts use the session ``max_execution_time`` (milliseconds), which
    MySQL applies to read-only SELECT statements.
    """

    def __init__(self) -> None:
        self._timeout_ms = 0

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        import mysql.connector

        return (mysql.connector.Error,)

    def is_timeout(self, error: BaseException) -> bool:
        return getattr(error, "errno", None) == _ER_QUERY_TIMEOUT

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        self._timeout_ms = 0
        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            **config.extra,
        )

    def close(self, connection: Any) -> None:
        connection.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> Any:
        """Execute SQL and return a buffered cursor."""
        timeout_ms = int(timeout * 1000) if timeout else 0
        cursor = connection.cursor(buffered=True)
        if timeout_ms != self._timeout_ms:
            cursor.execute("SET SESSION max_execution_time = %s", (timeout_ms,))
            self._timeout_ms = timeout_ms
        if params:
            cursor.execute(normalize_params(sql, self.paramstyle), params)
        else:
            cursor.execute(sql)
        return cursor

    def clear_timeout(self, connection: Any) -> None:
        """No-op: the server budgets each statement separately."""

    def last_insert_id(self, connection: Any, cursor: Any) -> Any:
        return cursor.lastrowid

    def commit(self, connection: Any) -> None:
        connection.commit()
