"""UPDATE and DELETE statement builders for a single row."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from row_orm.core.enums import ColumnRole
from row_orm.core.exceptions import ConfigurationError
from row_orm.mapping.bean import columns_from_bean
from row_orm.mapping.schema import resolve
from row_orm.query.bound import BoundQuery, epoch_seconds

if TYPE_CHECKING:
    from row_orm.core.engine import Engine

T = TypeVar("T")

logger = logging.getLogger(__name__)


class UpdateStatement(Generic[T]):
    """Updates one row, identified by its primary key.

    Every updated-timestamp column is rewritten with the current epoch
    seconds, whether or not other columns change and whatever it held
    before (NULL included), unless a value is set for it explicitly.
    """

    def __init__(self, engine: Engine, row: T) -> None:
        self._engine = engine
        self._row = row
        self._meta = resolve(type(row))
        self._pk = self._meta.require_primary_key("update")
        self._values: dict[str, Any] = {}

    def set(self, column: str, value: Any) -> UpdateStatement[T]:
        meta = self._meta.column(column)
        if meta.role is ColumnRole.PRIMARY_KEY:
            raise ConfigurationError(f"Cannot update primary key column '{meta.name}'")
        self._values[meta.name] = value
        return self

    def set_values(self, values: Mapping[str, Any]) -> UpdateStatement[T]:
        for column, value in values.items():
            self.set(column, value)
        return self

    def set_by_bean(self, bean: Any) -> UpdateStatement[T]:
        """Take the plain-column values of a dataclass, Pydantic model or mapping."""
        self._values.update(columns_from_bean(self._meta, bean))
        return self

    def render(self, now: int | None = None) -> BoundQuery | None:
        """Render the UPDATE, or ``None`` when there is nothing to set."""
        values = dict(self._values)
        stamp = epoch_seconds() if now is None else now
        for column in self._meta.updated_columns:
            values.setdefault(column.name, stamp)
        if not values:
            return None

        pk_value = self._meta.primary_key_value(self._row, "update")
        assignments = ", ".join(f"{name}=?" for name in values)
        return BoundQuery(
            f"UPDATE {self._meta.table} SET {assignments} WHERE {self._pk.name}=?",
            (*values.values(), pk_value),
        )

    def execute(self) -> int:
        """Run the update. Returns the affected row count."""
        query = self.render()
        if query is None:
            logger.debug(f"Nothing to update for {self._meta.table}")
            return 0
        return self._engine.run_update(query)


def render_delete(row: Any) -> BoundQuery:
    """Render ``DELETE`` for *row* by primary key."""
    meta = resolve(type(row))
    pk = meta.require_primary_key("delete")
    return BoundQuery(
        f"DELETE FROM {meta.table} WHERE {pk.name}=?",
        (meta.primary_key_value(row, "delete"),),
    )
