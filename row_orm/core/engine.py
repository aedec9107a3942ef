"""Query execution engine.

The Engine owns one database connection. It hands out statement builders
for declared row types, runs rendered statements through the adapter and
maps results with RowMapper. Any exception raised by the driver is wrapped
in DatabaseError with the original chained as its cause.

An Engine is not safe to share between threads: it performs no locking
around its connection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from row_orm.core.connection import ConnectionConfig, ConnectionManager
from row_orm.core.exceptions import ConfigurationError, DatabaseError, MappingError
from row_orm.core.params import coerce_params
from row_orm.mapping.protocol import Mapper
from row_orm.mapping.row import RowMapper, rows_to_dicts
from row_orm.mapping.schema import resolve
from row_orm.query.bound import BoundQuery
from row_orm.query.insert import InsertStatement
from row_orm.query.pager import Paginated, PaginatedSearchStatement, paginate, paginate_sql
from row_orm.query.select import CountStatement, SearchStatement, SingleStatement
from row_orm.query.update import UpdateStatement, render_delete

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)

Params = Sequence[Any] | None


class Engine:
    """Synchronous ORM facade over a single connection."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        config = connection_manager.config
        self._query_timeout: float | None = config.query_timeout if config else None

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig.

        The connection is opened on first use.
        """
        return cls(ConnectionManager(config))

    @classmethod
    def from_connection(cls, connection: Any, driver: str = "sqlite") -> Engine:
        """Create an Engine around an already open DB-API connection."""
        return cls(ConnectionManager.from_connection(connection, driver))

    @property
    def connection(self) -> Any:
        return self._connection_manager.connection

    @property
    def query_timeout(self) -> float | None:
        return self._query_timeout

    def set_query_timeout(self, seconds: float | None) -> None:
        """Bound every subsequent statement to *seconds*. ``None`` or 0 disables."""
        if seconds is not None and seconds < 0:
            raise ConfigurationError(f"Query timeout must be >= 0, got {seconds}")
        self._query_timeout = seconds or None

    def close(self) -> None:
        self._connection_manager.close()

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # --- Statement execution ---

    def run(self, query: BoundQuery) -> Any:
        """Execute a rendered statement and return the driver cursor.

        The statement timeout stays armed while the caller reads the cursor;
        engine methods that consume it disarm it once they are done.
        """
        logger.debug(f"Executing: {query.sql} {list(query.params)}")
        adapter = self._connection_manager.adapter
        try:
            return adapter.execute(self.connection, query.sql, query.params, self._query_timeout)
        except adapter.error_types as e:
            adapter.clear_timeout(self.connection)
            if adapter.is_timeout(e):
                logger.warning(f"Statement exceeded {self._query_timeout}s timeout: {query.sql}")
            raise DatabaseError(query.sql, query.params, detail=str(e)) from e

    def commit(self) -> None:
        adapter = self._connection_manager.adapter
        try:
            adapter.commit(self.connection)
        except adapter.error_types as e:
            raise DatabaseError("COMMIT", detail=str(e)) from e

    def last_insert_id(self, cursor: Any) -> Any:
        adapter = self._connection_manager.adapter
        try:
            return adapter.last_insert_id(self.connection, cursor)
        except adapter.error_types as e:
            raise DatabaseError("<last insert id>", detail=str(e)) from e

    def run_update(self, query: BoundQuery) -> int:
        """Execute a mutating statement, commit, and return the affected row count."""
        cursor = self.run(query)
        try:
            self.commit()
        finally:
            self._connection_manager.adapter.clear_timeout(self.connection)
        return int(cursor.rowcount)

    def run_select(self, row_type: type[T], query: BoundQuery) -> list[T]:
        """Execute a query and map every row onto *row_type*."""
        mapper: Mapper[T] = RowMapper(row_type)
        cursor = self.run(query)
        return self._fetch(query, lambda: mapper.map_cursor(cursor))

    def run_scalar(self, query: BoundQuery) -> Any:
        """First column of the first row, or ``None`` when there is no row."""
        cursor = self.run(query)
        row = self._fetch(query, cursor.fetchone)
        if row is None:
            return None
        return row[0]

    def _fetch(self, query: BoundQuery, fetch: Callable[[], R]) -> R:
        # Some drivers only report errors while rows are being read
        adapter = self._connection_manager.adapter
        try:
            return fetch()
        except adapter.error_types as e:
            raise DatabaseError(query.sql, query.params, detail=str(e)) from e
        finally:
            adapter.clear_timeout(self.connection)

    # --- Builders ---

    def insert(self, row_type: type[T]) -> InsertStatement[T]:
        return InsertStatement(self, row_type)

    def single(self, row_type: type[T]) -> SingleStatement[T]:
        return SingleStatement(self, row_type)

    def search(self, row_type: type[T]) -> SearchStatement[T]:
        return SearchStatement(self, row_type)

    def count(self, row_type: type[T]) -> CountStatement[T]:
        return CountStatement(self, row_type)

    def search_with_pager(self, row_type: type[T], page_size: int) -> PaginatedSearchStatement[T]:
        """Fluent pager; raises InvalidPageSizeError for ``page_size < 1``."""
        return PaginatedSearchStatement(self, row_type, page_size)

    def update(self, row: T) -> UpdateStatement[T]:
        return UpdateStatement(self, row)

    # --- Row operations ---

    def update_by_bean(self, row: T, bean: Any) -> int:
        """Update *row* with the plain-column values of *bean*."""
        return self.update(row).set_by_bean(bean).execute()

    def refetch(self, row: T) -> T | None:
        """Re-read *row* from the database by primary key."""
        meta = resolve(type(row))
        pk_value = meta.primary_key_value(row, "refetch")
        return self.single(type(row)).where(f"{meta.primary_key.name}=?", pk_value).execute()

    def delete(self, row: Any) -> int:
        """Delete *row* by primary key. Returns the affected row count."""
        return self.run_update(render_delete(row))

    def get_table_name(self, row_type: type) -> str:
        return resolve(row_type).table

    # --- Raw SQL ---

    def single_by_sql(self, row_type: type[T], sql: str, params: Params = None) -> T | None:
        rows = self.run_select(row_type, BoundQuery(sql, coerce_params(params)))
        return rows[0] if rows else None

    def search_by_sql(self, row_type: type[T], sql: str, params: Params = None) -> list[T]:
        return self.run_select(row_type, BoundQuery(sql, coerce_params(params)))

    def search_by_sql_with_pager(
        self,
        row_type: type[T],
        sql: str,
        params: Params,
        page_size: int,
        offset: int = 0,
    ) -> Paginated[T]:
        """Run raw SQL one page at a time.

        *sql* must not carry its own LIMIT/OFFSET; ``LIMIT page_size + 1
        OFFSET offset`` is appended.
        """
        query = BoundQuery(paginate_sql(sql, page_size, offset), coerce_params(params))
        return paginate(self.run_select(row_type, query), page_size)

    def update_by_sql(self, sql: str, params: Params = None) -> int:
        """Execute a mutating statement. Returns the affected row count."""
        return self.run_update(BoundQuery(sql, coerce_params(params)))

    def query_for_long(self, sql: str, params: Params = None) -> int | None:
        """First column of the first row as ``int``; ``None`` when no row matches."""
        value = self.run_scalar(BoundQuery(sql, coerce_params(params)))
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise MappingError(f"Cannot convert {value!r} to int: {sql}") from e

    def query_for_string(self, sql: str, params: Params = None) -> str | None:
        """First column of the first row as ``str``; ``None`` when no row matches."""
        value = self.run_scalar(BoundQuery(sql, coerce_params(params)))
        if value is None:
            return None
        if isinstance(value, bytes | bytearray):
            try:
                return bytes(value).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MappingError(f"Cannot decode {value!r} as UTF-8: {sql}") from e
        return str(value)

    def execute_query(
        self,
        sql: str,
        params: Params = None,
        transform: Callable[[Any], R] | None = None,
    ) -> R | list[dict[str, Any]]:
        """Run a query and hand the cursor to *transform*.

        Without a transform the rows are returned as ``label -> value`` dicts.
        """
        query = BoundQuery(sql, coerce_params(params))
        cursor = self.run(query)
        if transform is None:
            return self._fetch(query, lambda: rows_to_dicts(cursor))
        return self._fetch(query, lambda: transform(cursor))

    def map_rows(self, row_type: type[T], cursor: Any) -> list[T]:
        """Map the remaining rows of a cursor the caller executed."""
        return RowMapper(row_type).map_cursor(cursor)
