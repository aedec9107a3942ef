"""Database adapter protocol.

Every adapter module MUST implement this protocol so the Engine can drive
any backend through the same calls.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_orm.core.connection import ConnectionConfig


@runtime_checkable
class Adapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'qmark' (?) or 'format' (%s)."""
        ...

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        """Driver exception classes the Engine wraps in DatabaseError."""
        ...

    def is_timeout(self, error: BaseException) -> bool:
        """True if *error* reports a statement timeout."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a new connection."""
        ...

    def close(self, connection: Any) -> None:
        """Close a connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> Any:
        """Execute SQL with ``?`` placeholders and return a DB-API cursor.

        *timeout* (seconds) bounds the statement; ``None`` disables it.
        """
        ...

    def clear_timeout(self, connection: Any) -> None:
        """Disarm the statement timeout once its statement is finished."""
        ...

    def last_insert_id(self, connection: Any, cursor: Any) -> Any:
        """Return the auto-increment id generated by the last INSERT."""
        ...

    def commit(self, connection: Any) -> None:
        """Commit the current transaction."""
        ...
