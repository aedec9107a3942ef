"""INSERT statement builder."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from row_orm.core.exceptions import DatabaseError
from row_orm.mapping.bean import columns_from_bean
from row_orm.mapping.schema import resolve
from row_orm.query.bound import BoundQuery, epoch_seconds

if TYPE_CHECKING:
    from row_orm.core.engine import Engine

T = TypeVar("T")

logger = logging.getLogger(__name__)


class InsertStatement(Generic[T]):
    """Fluent INSERT builder for one row type.

    Created and updated timestamp columns that were not given a value are
    filled with the current epoch seconds when the statement is rendered.
    """

    def __init__(self, engine: Engine, row_type: type[T]) -> None:
        self._engine = engine
        self._row_type = row_type
        self._meta = resolve(row_type)
        self._values: dict[str, Any] = {}

    def value(self, column: str, value: Any) -> InsertStatement[T]:
        """Set one column. Raises ConfigurationError for undeclared columns."""
        self._values[self._meta.column(column).name] = value
        return self

    def values(self, values: Mapping[str, Any]) -> InsertStatement[T]:
        for column, value in values.items():
            self.value(column, value)
        return self

    def value_by_bean(self, bean: Any) -> InsertStatement[T]:
        """Take the plain-column values of a dataclass, Pydantic model or mapping."""
        self._values.update(columns_from_bean(self._meta, bean))
        return self

    def render(self, now: int | None = None) -> BoundQuery:
        values = dict(self._values)
        stamp = epoch_seconds() if now is None else now
        for column in self._meta.columns:
            if column.role.is_timestamp and column.name not in values:
                values[column.name] = stamp

        if not values:
            return BoundQuery(f"INSERT INTO {self._meta.table} DEFAULT VALUES")

        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        return BoundQuery(
            f"INSERT INTO {self._meta.table} ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )

    def execute(self) -> int:
        """Insert the row. Returns the affected row count."""
        return self._engine.run_update(self.render())

    def execute_select(self) -> T:
        """Insert the row and fetch it back, database defaults included.

        The row is looked up by the primary key value given to the builder,
        or else by the id the database generated for the insert.
        """
        pk = self._meta.require_primary_key("select inserted")
        query = self.render()
        cursor = self._engine.run(query)
        self._engine.commit()

        pk_value = self._values.get(pk.name)
        if pk_value is None:
            pk_value = self._engine.last_insert_id(cursor)
        logger.debug(f"Inserted {self._meta.table} row {pk.name}={pk_value}")

        row = self._engine.single(self._row_type).where(f"{pk.name}=?", pk_value).execute()
        if row is None:
            raise DatabaseError(query.sql, query.params, detail="Inserted row could not be re-fetched")
        return row

    def __repr__(self) -> str:
        return f"InsertStatement({self._row_type.__name__}, {self._values!r})"
