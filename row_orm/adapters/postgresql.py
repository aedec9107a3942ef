"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from row_orm.core.connection import ConnectionConfig
from row_orm.core.params import normalize_params


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlAdapter:
    """PostgreSQL adapter using psycopg (v3+).

    Timeouts map onto the session ``statement_timeout`` setting, which is
    only re-issued when the requested value changes.
    """

    def __init__(self) -> None:
        self._timeout_ms = 0

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        import psycopg

        return (psycopg.Error,)

    def is_timeout(self, error: BaseException) -> bool:
        import psycopg.errors

        return isinstance(error, psycopg.errors.QueryCanceled)

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg

        self._timeout_ms = 0
        return psycopg.connect(_build_conninfo(config), **config.extra)

    def close(self, connection: Any) -> None:
        connection.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> Any:
        timeout_ms = int(timeout * 1000) if timeout else 0
        if timeout_ms != self._timeout_ms:
            connection.execute(
                "SELECT set_config('statement_timeout', %s, false)", (str(timeout_ms),)
            )
            self._timeout_ms = timeout_ms
        if params:
            return connection.execute(normalize_params(sql, self.paramstyle), params)
        return connection.execute(sql)

    def clear_timeout(self, connection: Any) -> None:
        """No-op: the server budgets each statement separately."""

    def last_insert_id(self, connection: Any, cursor: Any) -> Any:
        return connection.execute("SELECT lastval()").fetchone()[0]

    def commit(self, connection: Any) -> None:
        connection.commit()
